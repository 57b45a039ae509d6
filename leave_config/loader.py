"""
Configuration Loader (``leave_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses it into the typed
``leave_config.schema`` dataclasses.  The single public entry point for
runtime config is ``leave_config.get_active_config()``.

Invariants enforced
-------------------
* Required keys are never defaulted silently: a missing or mistyped key
  raises ``ValueError`` naming the key.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing or invalid keys  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from leave_config.schema import (
    DatabaseSettings,
    LeaveConfiguration,
    LoggingSettings,
    RoleNameSettings,
    SubjectOfficerRoles,
)

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' section is required and must be a mapping")
    return value


def _string(data: dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{path}.{key}' is required and must be a non-empty string")
    return value.strip()


def _string_list(data: dict[str, Any], key: str, path: str) -> tuple[str, ...]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ValueError(f"'{path}.{key}' is required and must be a list of role names")
    return tuple(v.strip() for v in value)


def _int(data: dict[str, Any], key: str, path: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"'{path}.{key}' must be a non-negative integer")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    echo = data.get("echo", False)
    if not isinstance(echo, bool):
        raise ValueError("'database.echo' must be a boolean")
    timeout = data.get("sqlite_busy_timeout", 30.0)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout < 0:
        raise ValueError("'database.sqlite_busy_timeout' must be a non-negative number")
    return DatabaseSettings(
        url=_string(data, "url", "database"),
        echo=echo,
        pool_size=_int(data, "pool_size", "database", 10),
        max_overflow=_int(data, "max_overflow", "database", 5),
        sqlite_busy_timeout=float(timeout),
    )


def parse_roles(data: dict[str, Any]) -> RoleNameSettings:
    subject = _section(data, "subject_officers")
    marker = data.get("development_designation_marker", "do")
    if not isinstance(marker, str) or not marker.strip():
        raise ValueError("'roles.development_designation_marker' must be a non-empty string")
    return RoleNameSettings(
        head_of_department=_string(data, "head_of_department", "roles"),
        acting_excluded=_string_list(data, "acting_excluded", "roles"),
        recommenders=_string_list(data, "recommenders", "roles"),
        approvers=_string_list(data, "approvers", "roles"),
        subject_officers=SubjectOfficerRoles(
            field=_string(subject, "field", "roles.subject_officers"),
            office=_string(subject, "office", "roles.subject_officers"),
            development=_string(subject, "development", "roles.subject_officers"),
        ),
        development_designation_marker=marker.strip().lower(),
    )


def parse_logging(data: dict[str, Any] | None) -> LoggingSettings:
    if data is None:
        return LoggingSettings()
    level = str(data.get("level", "INFO")).upper()
    if level not in _LOG_LEVELS:
        raise ValueError(f"'logging.level' must be one of {sorted(_LOG_LEVELS)}, got {level!r}")
    return LoggingSettings(level=level)


def parse_configuration(data: dict[str, Any]) -> LeaveConfiguration:
    """
    Parse a whole configuration document.

    Raises:
        ValueError: on any missing or invalid key.
    """
    config_id = data.get("config_id")
    if not isinstance(config_id, str) or not config_id.strip():
        raise ValueError("'config_id' is required and must be a non-empty string")
    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int) or version < 1:
        raise ValueError("'version' is required and must be a positive integer")

    logging_section = data.get("logging")
    if logging_section is not None and not isinstance(logging_section, dict):
        raise ValueError("'logging' section must be a mapping")

    return LeaveConfiguration(
        config_id=config_id.strip(),
        version=version,
        database=parse_database(_section(data, "database")),
        roles=parse_roles(_section(data, "roles")),
        logging=parse_logging(logging_section),
        checksum=compute_checksum(data),
    )
