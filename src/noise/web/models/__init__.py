"""API contract models."""
