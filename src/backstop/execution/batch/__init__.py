"""Batch execution with bounded concurrency."""

from .executor import BatchExecutor

__all__ = ["BatchExecutor"]
