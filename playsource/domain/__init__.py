"""Domain layer: entities, plugin contracts and the error taxonomy."""
