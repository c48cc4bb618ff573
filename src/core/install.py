"""
Installer: 최초 1회 설치 루틴.

상태 머신:
    idle ──(가드 획득)──▶ installing ──(가드 해제)──▶ idle

규칙:
- 가드 레코드: StateStore["wedcontest_installing"], TTL 10분
- 가드 획득은 check-and-set (StateStore.update) → 동시 설치 창 축소
- 만료된 가드는 idle로 간주 (크래시 복구)
- 설치 단계: 역할 생성만 활성
- 완료 후 action: wedcontest_flush_rewrite_rules → wedcontest_installed
- 저장소 실패는 로그 남기고 False 반환 (예외 전파 없음)
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from src.core.hooks import HookRegistry
from src.core.roles import RoleStore
from src.core.store import StateStore
from src.domain.constants import (
    HOOK_FLUSH_REWRITE_RULES,
    HOOK_INSTALLED,
    INSTALL_GUARD_KEY,
    INSTALL_GUARD_TTL,
    REPRESENTANT_CAPABILITIES,
    REPRESENTANT_DISPLAY_NAME,
    REPRESENTANT_ROLE,
)
from src.domain.errors import WedContestError
from src.domain.schemas import InstallState, InstallStatus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Installer:
    """
    설치 루틴.

    Usage:
        installer = Installer(store, hooks=hooks)
        if installer.install():
            ...
    """

    def __init__(
        self,
        store: StateStore,
        roles: RoleStore | None = None,
        hooks: HookRegistry | None = None,
        ttl: timedelta = INSTALL_GUARD_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Args:
            store: 가드 레코드 저장소
            roles: 역할 저장소 (None이면 같은 store 사용)
            hooks: 완료 action 발행용
            ttl: 가드 만료 시간
            clock: 현재 시각 (aware datetime)
        """
        self.store = store
        self.roles = roles or RoleStore(store)
        self.hooks = hooks or HookRegistry()
        self.ttl = ttl
        self._clock = clock
        self._installing = False

    @property
    def is_installing(self) -> bool:
        """이 인스턴스가 설치 루틴을 실행 중인지."""
        return self._installing

    def status(self) -> InstallState:
        """
        현재 가드 상태.

        레코드가 없거나 만료되었으면 IDLE.
        """
        data = self.store.get(INSTALL_GUARD_KEY)
        if not data:
            return InstallState(status=InstallStatus.IDLE)

        state = InstallState.from_dict(data)
        if not state.is_active(self._clock()):
            return InstallState(status=InstallStatus.IDLE)
        return state

    # =========================================================================
    # Guard
    # =========================================================================

    def _acquire(self) -> str | None:
        """
        가드 획득 (check-and-set).

        Returns:
            owner 토큰 (이미 실행 중이면 None)
        """
        now = self._clock()
        token = uuid.uuid4().hex
        claim = InstallState(
            status=InstallStatus.INSTALLING,
            owner=token,
            started_at=now.isoformat(),
            expires_at=(now + self.ttl).isoformat(),
        )

        def _claim(current: Any) -> Any:
            if current:
                existing = InstallState.from_dict(current)
                if existing.is_active(now):
                    return current
                if existing.status == InstallStatus.INSTALLING:
                    logger.warning(
                        f"Expired install guard found (owner={existing.owner}, "
                        f"expires_at={existing.expires_at}). Taking over."
                    )
            return claim.to_dict()

        record = self.store.update(INSTALL_GUARD_KEY, _claim)
        if record.get("owner") != token:
            return None
        return token

    def _release(self, token: str) -> None:
        """가드 해제 (소유한 경우에만)."""

        def _clear(current: Any) -> Any:
            if isinstance(current, dict) and current.get("owner") != token:
                return current
            return None

        try:
            self.store.update(INSTALL_GUARD_KEY, _clear)
        except WedContestError as e:
            # 해제 실패 → TTL 만료로 복구됨
            logger.warning(f"Failed to release install guard: {e}")

    # =========================================================================
    # Install
    # =========================================================================

    def install(self) -> bool:
        """
        설치 실행.

        Returns:
            설치 루틴을 실행했으면 True
            (다른 설치가 진행 중이거나 저장소 실패 시 False)
        """
        try:
            token = self._acquire()
        except WedContestError as e:
            logger.error(f"Install guard unavailable: {e}")
            return False

        if token is None:
            logger.info("Install already in progress, skipping.")
            return False

        self._installing = True
        try:
            self.create_roles()
        except WedContestError as e:
            logger.error(f"Install failed: {e}")
            return False
        finally:
            self._installing = False
            self._release(token)

        self.hooks.do_action(HOOK_FLUSH_REWRITE_RULES)
        self.hooks.do_action(HOOK_INSTALLED)
        logger.info("Install completed.")
        return True

    def create_roles(self) -> None:
        """역할 및 권한 생성."""
        # 참가자 대리인 역할
        self.roles.add_role(
            REPRESENTANT_ROLE,
            REPRESENTANT_DISPLAY_NAME,
            dict(REPRESENTANT_CAPABILITIES),
        )
