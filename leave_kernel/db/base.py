"""
Declarative base for the leave kernel's ORM models.

Architecture position: Kernel > DB.  Imported by every module in
``leave_kernel/models``; imports nothing from the kernel itself.

Conventions:
    - Primary keys are uuid4 values, stored as 36-character strings so
      the same schema runs on SQLite and PostgreSQL.
    - ``Decimal`` columns are Numeric(8, 1): leave days and entitlements
      are halves, never floats.
    - ``created_at`` / ``updated_at`` come from the database clock.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """``uuid.UUID`` in Python, ``VARCHAR(36)`` in the database."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    """Root of every mapped class; contributes the ``id`` primary key."""

    type_annotation_map: ClassVar[dict] = {
        UUID: UUIDString(),
        Decimal: Numeric(8, 1),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TimestampedBase(Base):
    """
    Adds database-assigned timestamps.

    ``updated_at`` is refreshed by ``onupdate`` for ORM flushes; services
    that issue a Core ``UPDATE`` set it to ``func.now()`` themselves.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(),
    )
