"""Routes Package - API endpoint definitions."""

__all__ = ["health"]
