"""Domain layer: entities, errors and result types."""
