"""Application layer: request context and use-case services."""
