"""Domain layer: identifiers, entities, config and exceptions."""
