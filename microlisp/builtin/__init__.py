"""Primitive procedures installed into the global environment."""
