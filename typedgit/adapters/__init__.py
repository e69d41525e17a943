"""Adapters implementing typedgit ports."""
