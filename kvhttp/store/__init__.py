"""Store module for KV-HTTP."""

from .concurrent import ConcurrentStore, StoreStats
from .reporter import StatusReporter

__all__ = ["ConcurrentStore", "StatusReporter", "StoreStats"]
