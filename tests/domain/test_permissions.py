"""
Tests for permission parsing.

Covers:
- Mapping form with bare and qualified action names
- Flat list form of "resource:action" keys
- Rejection of unknown resources/actions and misfiled qualified keys
- PermissionSet queries and round-trip to the stored shape
"""

import pytest

from leave_kernel.domain.permissions import (
    EMPTY_PERMISSIONS,
    PERMISSION_CATALOGUE,
    PermissionAction,
    Resource,
    parse_permissions,
)
from leave_kernel.exceptions import InvalidPermissionError


class TestParsePermissions:
    def test_mapping_with_bare_actions(self):
        perms = parse_permissions({"leave": ["apply", "approve"]})
        assert perms.allows(Resource.LEAVE, PermissionAction.APPROVE)
        assert perms.allows(Resource.LEAVE, PermissionAction.APPLY)
        assert not perms.allows(Resource.LEAVE, PermissionAction.RECOMMEND)

    def test_mapping_with_qualified_actions(self):
        perms = parse_permissions({"leave": ["leave:recommend"], "mail": ["mail:todo"]})
        assert perms.allows(Resource.LEAVE, PermissionAction.RECOMMEND)
        assert perms.allows(Resource.MAIL, PermissionAction.TODO)

    def test_flat_list_of_qualified_keys(self):
        perms = parse_permissions(["leave:approve", "role:create", "admin:access"])
        assert perms.allows(Resource.LEAVE, PermissionAction.APPROVE)
        assert perms.allows(Resource.ROLE, PermissionAction.CREATE)
        assert perms.allows(Resource.ADMIN, PermissionAction.ACCESS)

    def test_none_is_empty(self):
        assert parse_permissions(None) == EMPTY_PERMISSIONS
        assert not parse_permissions(None)

    def test_same_action_name_is_scoped_by_resource(self):
        perms = parse_permissions({"mail": ["approve"]})
        assert perms.allows(Resource.MAIL, PermissionAction.APPROVE)
        assert not perms.allows(Resource.LEAVE, PermissionAction.APPROVE)

    @pytest.mark.parametrize("raw", [
        {"payroll": ["apply"]},
        {"leave": ["fly"]},
        {"leave": ["mail:todo"]},
        {"leave": ["print"]},
        {"leave": "apply"},
        {"leave": [""]},
        {"leave": [42]},
        ["leave-approve"],
        ["leave:unknown"],
        "leave:approve",
    ])
    def test_invalid_data_is_rejected(self, raw):
        with pytest.raises(InvalidPermissionError) as exc_info:
            parse_permissions(raw)
        assert exc_info.value.code == "INVALID_PERMISSION"

    def test_to_raw_is_sorted_and_round_trips(self):
        perms = parse_permissions({"leave": ["recommend", "apply"], "account": ["update_password"]})
        raw = perms.to_raw()
        assert raw == {"account": ["update_password"], "leave": ["apply", "recommend"]}
        assert parse_permissions(raw) == perms


class TestCatalogue:
    def test_every_resource_has_actions(self):
        assert set(PERMISSION_CATALOGUE) == set(Resource)
        assert all(PERMISSION_CATALOGUE[r] for r in Resource)

    def test_leave_catalogue(self):
        assert PermissionAction.MANAGE_BALANCE in PERMISSION_CATALOGUE[Resource.LEAVE]
        assert PermissionAction.ACTING in PERMISSION_CATALOGUE[Resource.LEAVE]
