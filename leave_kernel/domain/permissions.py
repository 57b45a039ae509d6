"""
Permission catalogue and typed permission sets.

Responsibility
--------------
Roles store their permissions as raw JSON (resource name -> list of action
names).  ``parse_permissions`` is the one place that raw data becomes a
typed ``PermissionSet``; everything downstream matches on enum members.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.

Invariants enforced
-------------------
* Every (resource, action) pair in a ``PermissionSet`` appears in
  ``PERMISSION_CATALOGUE``.
* Qualified keys (``"leave:approve"``) must name the resource they are
  listed under.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from leave_kernel.exceptions import InvalidPermissionError


class Resource(str, Enum):
    LEAVE = "leave"
    MAIL = "mail"
    INVENTORY = "inventory"
    FILE = "file"
    STAFF = "staff"
    ACCOUNT = "account"
    ADMIN = "admin"
    DIVISION = "division"
    ROLE = "role"
    USER = "user"


class PermissionAction(str, Enum):
    # leave
    APPLY = "apply"
    VIEW_HISTORY = "view_history"
    RECOMMEND = "recommend"
    APPROVE = "approve"
    MANAGE_SUBJECT = "manage_subject"
    ACTING = "acting"
    VIEW_OFFICE_STAFF = "view_office_staff"
    VIEW_FIELD_STAFF = "view_field_staff"
    VIEW_DEV_OFFICERS = "view_dev_officers"
    MANAGE_BALANCE = "manage_balance"
    VIEW_SUMMARY = "view_summary"
    # mail
    REGISTER = "register"
    TRANSFER = "transfer"
    RECEIVE = "receive"
    FORWARD = "forward"
    TODO = "todo"
    HISTORY = "history"
    # inventory
    ADD = "add"
    VIEW = "view"
    REQUEST = "request"
    SERVICE_REQUEST = "service_request"
    # file
    VIEW_UPDATE = "view_update"
    # staff
    PRINT = "print"
    SEARCH = "search"
    # account
    UPDATE_PASSWORD = "update_password"
    # admin
    ACCESS = "access"
    # CRUD (division / role / user)
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


_A = PermissionAction
_CRUD = frozenset({_A.CREATE, _A.READ, _A.UPDATE, _A.DELETE})

PERMISSION_CATALOGUE: Mapping[Resource, frozenset[PermissionAction]] = MappingProxyType({
    Resource.LEAVE: frozenset({
        _A.APPLY, _A.VIEW_HISTORY, _A.RECOMMEND, _A.APPROVE,
        _A.MANAGE_SUBJECT, _A.ACTING, _A.VIEW_OFFICE_STAFF,
        _A.VIEW_FIELD_STAFF, _A.VIEW_DEV_OFFICERS, _A.MANAGE_BALANCE,
        _A.VIEW_SUMMARY,
    }),
    Resource.MAIL: frozenset({
        _A.REGISTER, _A.APPROVE, _A.TRANSFER, _A.RECEIVE, _A.FORWARD,
        _A.TODO, _A.HISTORY,
    }),
    Resource.INVENTORY: frozenset({
        _A.ADD, _A.VIEW, _A.REQUEST, _A.RECEIVE, _A.SERVICE_REQUEST,
        _A.HISTORY,
    }),
    Resource.FILE: frozenset({_A.ADD, _A.VIEW_UPDATE, _A.MANAGE_SUBJECT}),
    Resource.STAFF: frozenset({_A.VIEW, _A.PRINT, _A.SEARCH}),
    Resource.ACCOUNT: frozenset({_A.UPDATE_PASSWORD}),
    Resource.ADMIN: frozenset({_A.ACCESS}),
    Resource.DIVISION: _CRUD,
    Resource.ROLE: _CRUD,
    Resource.USER: _CRUD,
})


@dataclass(frozen=True)
class PermissionSet:
    """Typed mapping of resource to the actions granted on it."""

    grants: Mapping[Resource, frozenset[PermissionAction]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def allows(self, resource: Resource, action: PermissionAction) -> bool:
        return action in self.grants.get(resource, frozenset())

    def to_raw(self) -> dict[str, list[str]]:
        """Serialize back to the stored JSON shape (sorted for stability)."""
        return {
            resource.value: sorted(a.value for a in actions)
            for resource, actions in sorted(self.grants.items(), key=lambda kv: kv[0].value)
            if actions
        }

    def __bool__(self) -> bool:
        return any(self.grants.values())


EMPTY_PERMISSIONS = PermissionSet()


def _parse_resource(name: Any) -> Resource:
    try:
        return Resource(str(name).strip())
    except ValueError:
        raise InvalidPermissionError(str(name), "unknown resource") from None


def _parse_action(resource: Resource, raw: Any) -> PermissionAction:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidPermissionError(repr(raw), "action must be a non-empty string")
    value = raw.strip()
    if ":" in value:
        prefix, _, value = value.partition(":")
        if prefix != resource.value:
            raise InvalidPermissionError(raw, f"listed under resource '{resource.value}'")
    try:
        action = PermissionAction(value)
    except ValueError:
        raise InvalidPermissionError(raw, "unknown action") from None
    if action not in PERMISSION_CATALOGUE[resource]:
        raise InvalidPermissionError(raw, f"not an action of resource '{resource.value}'")
    return action


def parse_permissions(raw: Mapping[str, Iterable[str]] | Iterable[str] | None) -> PermissionSet:
    """Validate raw permission data and build a ``PermissionSet``.

    Accepts either a mapping of resource name to action names (bare
    ``"approve"`` or qualified ``"leave:approve"``), or a flat iterable of
    qualified ``"resource:action"`` keys.

    Raises:
        InvalidPermissionError: unknown resource or action, malformed key,
            or a qualified key filed under the wrong resource.
    """
    if raw is None:
        return EMPTY_PERMISSIONS

    grants: dict[Resource, set[PermissionAction]] = {}

    if isinstance(raw, Mapping):
        for resource_name, actions in raw.items():
            resource = _parse_resource(resource_name)
            if isinstance(actions, str) or not isinstance(actions, Iterable):
                raise InvalidPermissionError(
                    repr(actions), f"actions for '{resource.value}' must be a list"
                )
            bucket = grants.setdefault(resource, set())
            for action in actions:
                bucket.add(_parse_action(resource, action))
    elif isinstance(raw, str):
        raise InvalidPermissionError(raw, "expected a list of 'resource:action' keys")
    else:
        for key in raw:
            if not isinstance(key, str) or ":" not in key:
                raise InvalidPermissionError(repr(key), "expected 'resource:action'")
            resource = _parse_resource(key.partition(":")[0])
            grants.setdefault(resource, set()).add(_parse_action(resource, key))

    return PermissionSet(
        MappingProxyType({r: frozenset(a) for r, a in grants.items()})
    )
