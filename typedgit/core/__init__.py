"""Core logic independent of how git is invoked."""
