"""Application layer: core services and command use cases."""
