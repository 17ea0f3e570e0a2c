from .core import DatabaseService

__all__ = ["DatabaseService"]
