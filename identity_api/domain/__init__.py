"""Domain layer: value objects, entities, repository ports and domain services."""
