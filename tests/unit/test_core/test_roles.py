"""
test_roles.py - RoleStore 테스트
"""

from src.core.roles import RoleStore
from src.core.store import MemoryStateStore
from src.domain.schemas import RoleDefinition


class TestAddRole:
    """add_role 멱등성."""

    def test_add_new_role(self, store: MemoryStateStore):
        roles = RoleStore(store)

        role = roles.add_role("representant", "Representant", {"read": True})

        assert role == RoleDefinition("representant", "Representant", {"read": True})
        assert roles.get_role("representant") == role
        assert roles.is_role("representant") is True

    def test_existing_role_untouched(self, store: MemoryStateStore):
        """이미 있으면 None, 기존 정의 유지."""
        roles = RoleStore(store)
        roles.add_role("editor", "Editor", {"edit": True})

        assert roles.add_role("editor", "Other", {"edit": False}) is None

        role = roles.get_role("editor")
        assert role.display_name == "Editor"
        assert role.capabilities == {"edit": True}

    def test_list_roles_sorted(self, store: MemoryStateStore):
        roles = RoleStore(store)
        roles.add_role("b", "B")
        roles.add_role("a", "A")

        assert [r.name for r in roles.list_roles()] == ["a", "b"]

    def test_get_missing(self, store: MemoryStateStore):
        assert RoleStore(store).get_role("ghost") is None


class TestRemoveRole:
    def test_remove(self, store: MemoryStateStore):
        roles = RoleStore(store)
        roles.add_role("temp", "Temp")

        assert roles.remove_role("temp") is True
        assert roles.remove_role("temp") is False
        assert roles.list_roles() == []


class TestCapabilities:
    """capability 추가/제거."""

    def test_add_cap(self, store: MemoryStateStore):
        roles = RoleStore(store)
        roles.add_role("r", "R", {"read": True})

        assert roles.add_cap("r", "edit_participant") is True
        assert roles.add_cap("r", "delete_participant", grant=False) is True

        role = roles.get_role("r")
        assert role.has_cap("edit_participant") is True
        assert role.has_cap("delete_participant") is False
        assert role.has_cap("unknown") is False

    def test_add_cap_missing_role(self, store: MemoryStateStore):
        assert RoleStore(store).add_cap("ghost", "read") is False

    def test_remove_cap(self, store: MemoryStateStore):
        roles = RoleStore(store)
        roles.add_role("r", "R", {"read": True})

        assert roles.remove_cap("r", "read") is True
        assert roles.remove_cap("r", "read") is False
        assert roles.get_role("r").capabilities == {}
