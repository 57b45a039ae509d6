"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every write-side service in the kernel.  Services receive a SQLAlchemy
    ``Session`` and use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or roll back themselves.  The caller
    (``LeaveActionHandler``, a script, or the test harness) owns the
    ``session_scope()``.

Failure modes:
    - A subclass that calls ``session.commit()`` breaks the
      read-validate-write atomicity of a workflow transition.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from leave_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active
        transaction.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
        - Does NOT provide queue/report queries -- those belong in
          ``leave_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
