"""Domain layer: entities, value objects, payload schemas and exceptions."""
