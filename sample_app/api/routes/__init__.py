from . import health, work

__all__ = ["health", "work"]
