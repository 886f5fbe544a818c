"""Domain layer: entities, schemas, errors and services for groups."""
