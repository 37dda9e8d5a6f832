from . import engine, system

__all__ = ["engine", "system"]
