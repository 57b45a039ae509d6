"""
Leave configuration schema.

Frozen dataclasses that a parsed YAML configuration set becomes.  The
loader builds them; ``leave_config.bridges`` turns them into kernel inputs.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings for ``Database.from_url``."""

    url: str
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 5
    sqlite_busy_timeout: float = 30.0


@dataclass(frozen=True)
class SubjectOfficerRoles:
    field: str
    office: str
    development: str


@dataclass(frozen=True)
class RoleNameSettings:
    """Role names that drive eligibility and Head-of-Department escalation.

    ``approvers`` and ``head_of_department`` are independent: the approver
    list may name a short role ("HOD") while escalation matches the full
    role name.
    """

    head_of_department: str
    acting_excluded: tuple[str, ...]
    recommenders: tuple[str, ...]
    approvers: tuple[str, ...]
    subject_officers: SubjectOfficerRoles
    development_designation_marker: str = "do"


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class LeaveConfiguration:
    """A validated configuration set.

    ``checksum`` is the SHA-256 of the canonical JSON form of the source
    document, so identical YAML always yields the same value.
    """

    config_id: str
    version: int
    database: DatabaseSettings
    roles: RoleNameSettings
    logging: LoggingSettings
    checksum: str
