"""Database layer for the leave kernel."""

from leave_kernel.db.base import Base, TimestampedBase, UUIDString
from leave_kernel.db.engine import Database

__all__ = ["Base", "Database", "TimestampedBase", "UUIDString"]
