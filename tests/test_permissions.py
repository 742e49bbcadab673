"""
Tests for the static role and field permission tables.
"""

import pytest

from shared.core import permissions
from shared.core.permissions import (field_permission, field_visibility, filter_fields, get_role,
                                     has_permission, is_self_or_permitted, list_roles)


class TestHasPermission:
    def test_viewer_cannot_read_users(self):
        assert has_permission("viewer", "users", "read") is False

    def test_admin_can_delete_users(self):
        assert has_permission("admin", "users", "delete") is True

    @pytest.mark.parametrize("resource,action", [("skus", "read"), ("users", "delete"), ("anything", "anything")])
    def test_unknown_role_has_nothing(self, resource, action):
        assert has_permission("unknown_role", resource, action) is False

    def test_manager_reads_but_cannot_create_users(self):
        assert has_permission("manager", "users", "read") is True
        assert has_permission("manager", "users", "create") is False

    def test_user_records_but_cannot_amend_transactions(self):
        assert has_permission("user", "transactions", "create") is True
        assert has_permission("user", "transactions", "update") is False

    def test_only_admin_creates_logs(self):
        assert [role for role in ("admin", "manager", "user", "viewer")
                if has_permission(role, "logs", "create")] == ["admin"]


class TestRoleCatalogue:
    def test_lists_all_roles_in_order(self):
        assert [role["name"] for role in list_roles()] == ["admin", "manager", "user", "viewer"]

    def test_role_description(self):
        assert get_role("manager")["description"] == "Management access with limited user control"

    def test_unknown_role(self):
        assert get_role("root") is None

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            permissions.ROLE_GRANTS["admin"] = {}
        with pytest.raises(AttributeError):
            permissions.ROLE_GRANTS["viewer"]["skus"].add("delete")


class TestFieldVisibility:
    def test_exact_entry_wins_over_wildcard(self):
        assert field_permission("manager", "inventory", "is_manual_cost") == "read"
        assert field_permission("manager", "inventory", "quantity") == "write"

    def test_wildcard_applies_to_other_fields(self):
        assert field_permission("user", "users", "email") == "hidden"

    def test_no_map_means_no_rule(self):
        assert field_visibility("viewer", "settings") == {}
        assert field_permission("viewer", "settings", "anything") is None

    def test_filter_drops_hidden_fields(self):
        data = {"id": 1, "name": "Jane", "email": "jane@example.com"}
        assert filter_fields(data, "user", "users") == {}
        assert filter_fields(data, "manager", "users") == data

    def test_filter_without_rules_keeps_everything(self):
        data = {"key": "value"}
        assert filter_fields(data, "viewer", "settings") == data
        assert filter_fields(data, "ghost", "users") == data


class TestSelfOrPermitted:
    def test_owner_always_allowed(self):
        assert is_self_or_permitted("u-1", "u-1", "viewer", "users", "read") is True

    def test_other_user_needs_grant(self):
        assert is_self_or_permitted("u-1", "u-2", "viewer", "users", "read") is False
        assert is_self_or_permitted("u-1", "u-2", "manager", "users", "read") is True
