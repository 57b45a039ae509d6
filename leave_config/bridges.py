"""
Config -> Kernel Bridges.

Functions that convert a ``LeaveConfiguration`` into kernel inputs.  They
live in leave_config (the producer) because the kernel must NEVER import
leave_config.

Usage:
    from leave_config.bridges import build_database, build_role_names

    config = get_active_config()
    role_names = build_role_names(config)
    database = build_database(config)
"""

from __future__ import annotations

import logging

from leave_config.schema import LeaveConfiguration
from leave_kernel.db.engine import Database
from leave_kernel.domain.participants import RoleNames
from leave_kernel.logging_config import configure_logging


def build_role_names(config: LeaveConfiguration) -> RoleNames:
    roles = config.roles
    return RoleNames(
        head_of_department=roles.head_of_department,
        acting_excluded=frozenset(roles.acting_excluded),
        recommenders=frozenset(roles.recommenders),
        approvers=frozenset(roles.approvers),
        field_subject_officer=roles.subject_officers.field,
        office_subject_officer=roles.subject_officers.office,
        development_subject_officer=roles.subject_officers.development,
        development_designation_marker=roles.development_designation_marker,
    )


def build_database(config: LeaveConfiguration, database_url: str | None = None) -> Database:
    """Construct the ``Database`` handle; ``database_url`` overrides the config."""
    settings = config.database
    return Database.from_url(
        database_url or settings.url,
        echo=settings.echo,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        sqlite_busy_timeout=settings.sqlite_busy_timeout,
    )


def apply_logging(config: LeaveConfiguration) -> None:
    """Configure kernel logging at the configured level."""
    configure_logging(level=getattr(logging, config.logging.level))
