"""Service layer: configuration and task business logic."""
