"""Task Service: per-user task management over Redis."""

__version__ = "1.0.0"
