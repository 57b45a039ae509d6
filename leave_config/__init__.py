"""
Leave configuration (``leave_config``).

Responsibility
--------------
The single entry point for runtime configuration.  Loads a YAML
configuration set, validates it into frozen dataclasses and emits a
``LEAVE_CONFIG_TRACE`` log line identifying exactly which configuration is
active.

Architecture position
---------------------
**Config layer**.  Depends on the kernel only through
``leave_config.bridges``; the kernel never imports from ``leave_config``.

Usage::

    from leave_config import get_active_config
    from leave_config.bridges import build_database, build_role_names

    config = get_active_config()
    database = build_database(config)
    handler = LeaveActionHandler(database, build_role_names(config))
"""

from __future__ import annotations

import logging
from pathlib import Path

from leave_config.loader import load_yaml_file, parse_configuration
from leave_config.schema import LeaveConfiguration

_logger = logging.getLogger("leave_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | str | None = None) -> LeaveConfiguration:
    """The ONLY public configuration entrypoint.

    Contract:
        No other component reads configuration files.  All configuration
        flows through this function.

    Guarantees:
        - The returned ``LeaveConfiguration`` has passed validation.
        - A ``LEAVE_CONFIG_TRACE`` log entry is emitted on every successful
          call.

    Args:
        config_path: Path to a YAML configuration set.  Defaults to
            ``leave_config/sets/default.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If configuration validation fails.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_configuration(load_yaml_file(path))

    _logger.info(
        "LEAVE_CONFIG_TRACE",
        extra={
            "trace_type": "LEAVE_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(path),
            "head_of_department_role": config.roles.head_of_department,
        },
    )
    return config


__all__ = ["DEFAULT_CONFIG_PATH", "LeaveConfiguration", "get_active_config"]
