"""
Module: leave_kernel.db.engine
Responsibility: The ``Database`` handle -- engine, session factory and
    transactional scope.  A process entry point constructs exactly one
    handle and passes it to whatever needs it.
Architecture position: Kernel > DB.  May import from db/base.py.  Imports
    models/ only inside create_tables/drop_tables so that every table is
    registered on Base.metadata.

Invariants enforced:
    - No module-level engine or session globals.  Two handles never share
      a connection pool.
    - PostgreSQL sessions run at READ COMMITTED, with explicit row-level
      locking (SELECT ... FOR UPDATE) where the workflow needs it.
    - SQLite (development and tests) is opened with check_same_thread=False
      and a busy timeout so that worker threads wait for the write lock
      instead of failing immediately.

Failure modes:
    - sqlalchemy.exc.OperationalError / DBAPIError from the driver propagate
      out of session_scope() after rollback.
    - Connection pool exhaustion if pool_size + max_overflow is exceeded.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from leave_kernel.logging_config import get_logger

logger = get_logger("db.engine")


class Database:
    """
    Explicit database handle.

    Contract:
        Wraps one SQLAlchemy Engine and its session factory.  Sessions
        produced by ``session()`` are independent; ``session_scope()`` owns
        commit/rollback for a single unit of work.

    Guarantees:
        - session_scope() commits on normal exit, rolls back and re-raises
          on any exception, and always closes the session.
        - Sessions use expire_on_commit=False so DTOs built inside a scope
          stay readable after it.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(
        cls,
        database_url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_pre_ping: bool = True,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
        sqlite_busy_timeout: float = 30.0,
    ) -> Database:
        """
        Build a handle from a database URL.

        Args:
            database_url: PostgreSQL or SQLite URL.
            echo: If True, log all SQL statements.
            pool_size: Connections kept in the pool (PostgreSQL only).
            max_overflow: Max connections beyond pool_size (PostgreSQL only).
            pool_pre_ping: Test connections before use (PostgreSQL only).
            pool_timeout: Seconds to wait for a pooled connection.
            pool_recycle: Seconds after which a connection is recycled.
            sqlite_busy_timeout: Seconds SQLite waits on a locked database.
        """
        url = make_url(database_url)
        options: dict[str, Any] = {"echo": echo}

        if url.get_backend_name() == "sqlite":
            options["connect_args"] = {
                "check_same_thread": False,
                "timeout": sqlite_busy_timeout,
            }
        else:
            options.update(
                poolclass=QueuePool,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                isolation_level="READ COMMITTED",
            )

        engine = create_engine(url, **options)
        logger.info(
            "database_initialized",
            extra={
                "dialect": engine.dialect.name,
                "database": url.database,
                "echo": echo,
            },
        )
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    def session(self) -> Session:
        """A new, unmanaged session.  The caller commits and closes it."""
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Usage:
            with database.session_scope() as session:
                service = LeaveWorkflowService(session)
                service.apply_action(...)
                # Commits on successful exit, rolls back on exception
        """
        session = self.session()
        logger.debug("transaction_started")
        try:
            yield session
            session.commit()
            logger.debug("transaction_committed")
        except Exception:
            session.rollback()
            logger.warning("transaction_rolled_back", exc_info=True)
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create every kernel table that does not exist yet."""
        from leave_kernel.db.base import Base
        import leave_kernel.models  # noqa: F401  registers tables

        Base.metadata.create_all(self._engine)

    def drop_tables(self) -> None:
        """Drop every kernel table.  Use with caution - primarily for testing."""
        from leave_kernel.db.base import Base
        import leave_kernel.models  # noqa: F401

        Base.metadata.drop_all(self._engine)

    def dispose(self) -> None:
        """Release all pooled connections."""
        self._engine.dispose()
