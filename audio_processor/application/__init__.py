"""Application layer: interfaces and use cases."""
