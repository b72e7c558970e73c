"""Domain layer: entities, enums, exceptions, and role resolution."""
