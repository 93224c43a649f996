"""Priority request queue."""

from .queue import RequestQueue

__all__ = ["RequestQueue"]
