"""
Role store: 사용자 역할/권한 저장소.

StateStore의 "user_roles" 키에 {name: RoleDefinition.to_dict()} 형태로 저장.
add_role은 멱등 → 이미 있으면 기존 정의 유지하고 None 반환.
"""

import logging

from src.core.store import StateStore
from src.domain.constants import USER_ROLES_KEY
from src.domain.schemas import RoleDefinition

logger = logging.getLogger(__name__)


class RoleStore:
    """
    역할 CRUD.

    Usage:
        roles = RoleStore(store)
        roles.add_role("representant", "Representant", {"read": True})
    """

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def _all(self) -> dict[str, dict]:
        return self.store.get(USER_ROLES_KEY) or {}

    def add_role(
        self,
        name: str,
        display_name: str,
        capabilities: dict[str, bool] | None = None,
    ) -> RoleDefinition | None:
        """
        역할 추가.

        Args:
            name: 역할 이름
            display_name: 표시 이름
            capabilities: capability → 부여 여부

        Returns:
            새로 만든 RoleDefinition (이미 있으면 None)
        """
        role = RoleDefinition(
            name=name,
            display_name=display_name,
            capabilities=dict(capabilities or {}),
        )
        created = False

        def _add(current: dict | None) -> dict:
            nonlocal created
            roles = current or {}
            if name not in roles:
                roles[name] = role.to_dict()
                created = True
            return roles

        self.store.update(USER_ROLES_KEY, _add)

        if not created:
            logger.debug(f"Role already exists: {name}")
            return None

        logger.info(f"Role added: {name}")
        return role

    def get_role(self, name: str) -> RoleDefinition | None:
        data = self._all().get(name)
        return RoleDefinition.from_dict(data) if data else None

    def remove_role(self, name: str) -> bool:
        """역할 삭제. 없으면 False."""
        removed = False

        def _remove(current: dict | None) -> dict | None:
            nonlocal removed
            roles = current or {}
            if name in roles:
                del roles[name]
                removed = True
            return roles or None

        self.store.update(USER_ROLES_KEY, _remove)
        return removed

    def list_roles(self) -> list[RoleDefinition]:
        """등록된 역할 목록 (이름순)."""
        return [RoleDefinition.from_dict(data) for _, data in sorted(self._all().items())]

    def is_role(self, name: str) -> bool:
        return name in self._all()

    # =========================================================================
    # Capabilities
    # =========================================================================

    def add_cap(self, name: str, capability: str, grant: bool = True) -> bool:
        """
        역할에 capability 추가/변경.

        Returns:
            역할이 없으면 False
        """
        found = False

        def _add_cap(current: dict | None) -> dict | None:
            nonlocal found
            roles = current or {}
            if name in roles:
                roles[name].setdefault("capabilities", {})[capability] = grant
                found = True
            return roles or None

        self.store.update(USER_ROLES_KEY, _add_cap)
        return found

    def remove_cap(self, name: str, capability: str) -> bool:
        """역할에서 capability 제거. 역할/권한이 없으면 False."""
        found = False

        def _remove_cap(current: dict | None) -> dict | None:
            nonlocal found
            roles = current or {}
            caps = roles.get(name, {}).get("capabilities", {})
            if capability in caps:
                del caps[capability]
                found = True
            return roles or None

        self.store.update(USER_ROLES_KEY, _remove_cap)
        return found
