"""
Hook registry: filter / action 확장 지점.

규칙:
- 전역 상태 금지 → 조립하는 애플리케이션(WedContest)이 소유
- 실행 순서: priority 오름차순 → 같은 priority는 등록 순서
- filter: 반환값이 다음 callback의 입력값이 됨 (transform-and-return)
- action: 반환값 무시 (fire-and-forget)
- accepted_args: callback에 전달할 인자 개수 (filter는 value 포함)
"""

import itertools
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.domain.constants import DEFAULT_HOOK_PRIORITY


@dataclass(frozen=True)
class _Callback:
    priority: int
    seq: int
    func: Callable[..., Any]
    accepted_args: int


class HookRegistry:
    """
    이름 → callback 목록.

    Usage:
        hooks = HookRegistry()
        hooks.add_filter("wedcontest_locate_template", my_filter, accepted_args=3)
        path = hooks.apply_filters("wedcontest_locate_template", path, name, subpath)
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[_Callback]] = {}
        self._seq = itertools.count()
        self._fired: Counter[str] = Counter()
        self._current: list[str] = []

    # =========================================================================
    # Registration
    # =========================================================================

    def add_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_HOOK_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        """
        filter/action callback 등록.

        Args:
            name: hook 이름
            callback: 호출할 함수
            priority: 낮을수록 먼저 실행 (기본 10)
            accepted_args: 전달할 인자 수
        """
        entry = _Callback(priority, next(self._seq), callback, max(accepted_args, 0))
        callbacks = self._callbacks.setdefault(name, [])
        callbacks.append(entry)
        callbacks.sort(key=lambda c: (c.priority, c.seq))

    def add_action(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_HOOK_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        """action callback 등록 (add_filter와 같은 저장소 사용)."""
        self.add_filter(name, callback, priority, accepted_args)

    def remove_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> bool:
        """
        callback 제거.

        Returns:
            제거되었으면 True
        """
        callbacks = self._callbacks.get(name, [])
        for entry in callbacks:
            if entry.func == callback and entry.priority == priority:
                callbacks.remove(entry)
                if not callbacks:
                    del self._callbacks[name]
                return True
        return False

    def remove_action(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> bool:
        return self.remove_filter(name, callback, priority)

    def remove_all(self, name: str) -> None:
        """hook의 모든 callback 제거."""
        self._callbacks.pop(name, None)

    def has_filter(self, name: str, callback: Callable[..., Any] | None = None) -> bool:
        """
        등록 여부.

        callback이 주어지면 해당 callback 등록 여부만 확인.
        """
        callbacks = self._callbacks.get(name, [])
        if callback is None:
            return bool(callbacks)
        return any(entry.func == callback for entry in callbacks)

    def has_action(self, name: str, callback: Callable[..., Any] | None = None) -> bool:
        return self.has_filter(name, callback)

    # =========================================================================
    # Invocation
    # =========================================================================

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """
        filter 실행.

        Args:
            name: hook 이름
            value: 변환 대상 값
            *args: callback에 추가로 전달할 인자

        Returns:
            모든 callback을 거친 값 (callback이 없으면 value 그대로)
        """
        callbacks = list(self._callbacks.get(name, []))
        if not callbacks:
            return value

        self._current.append(name)
        try:
            for entry in callbacks:
                call_args = (value, *args)[: max(entry.accepted_args, 1)]
                value = entry.func(*call_args)
        finally:
            self._current.pop()
        return value

    def do_action(self, name: str, *args: Any) -> None:
        """action 실행. 실행 횟수는 callback 유무와 무관하게 기록."""
        self._fired[name] += 1

        callbacks = list(self._callbacks.get(name, []))
        if not callbacks:
            return

        self._current.append(name)
        try:
            for entry in callbacks:
                entry.func(*args[: entry.accepted_args])
        finally:
            self._current.pop()

    def did_action(self, name: str) -> int:
        """action이 실행된 횟수."""
        return self._fired[name]

    def current_filter(self) -> str | None:
        """현재 실행 중인 hook 이름 (없으면 None)."""
        return self._current[-1] if self._current else None

    def doing_filter(self, name: str | None = None) -> bool:
        """hook 실행 중 여부 (name 없으면 아무 hook이나)."""
        if name is None:
            return bool(self._current)
        return name in self._current
