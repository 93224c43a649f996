"""CLI commands."""

from .config import show_config
from .schedule import schedule
from .simulate import simulate

__all__ = ["schedule", "show_config", "simulate"]
