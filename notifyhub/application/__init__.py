"""Application layer: use cases orchestrating domain entities and repositories."""
