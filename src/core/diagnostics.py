"""
Developer diagnostics: 잘못된 사용/폐기된 API 보고.

규칙:
- 치명적이지 않음 → 경고 로그 + action 발행 후 실행 계속
- 메시지 포맷:
  "<function> was called incorrectly. <message>. This message was added in version <version>."
- hooks가 있으면 doing_it_wrong_run / deprecated_function_run action 발행
"""

import logging
import traceback
from typing import Any

from src.core.hooks import HookRegistry
from src.domain.constants import HOOK_DEPRECATED_FUNCTION, HOOK_DOING_IT_WRONG

logger = logging.getLogger(__name__)


def backtrace_summary(skip: int = 2, limit: int = 6) -> str:
    """
    호출 스택 요약 (가장 가까운 호출자부터).

    Args:
        skip: 생략할 최근 프레임 수 (이 함수 포함)
        limit: 최대 프레임 수
    """
    frames = traceback.extract_stack()[:-skip]
    names = [frame.name for frame in reversed(frames[-limit:])]
    return ", ".join(names)


class Diagnostics:
    """
    비치명적 진단 채널.

    Usage:
        diagnostics = Diagnostics(hooks)
        diagnostics.doing_it_wrong("Logger.log", 'invalid level "loud"', "3.0")
    """

    def __init__(self, hooks: HookRegistry | None = None) -> None:
        self.hooks = hooks

    def doing_it_wrong(self, function: str, message: str, version: str) -> None:
        """
        잘못된 사용 보고.

        Args:
            function: 잘못 호출된 함수 이름
            message: 설명
            version: 메시지가 추가된 버전
        """
        message = f"{message} Backtrace: {backtrace_summary()}"

        if self.hooks is not None:
            self.hooks.do_action(HOOK_DOING_IT_WRONG, function, message, version)

        logger.warning(
            f"{function} was called incorrectly. {message}. "
            f"This message was added in version {version}."
        )

    def deprecated_function(
        self,
        function: str,
        version: str,
        replacement: str | None = None,
    ) -> None:
        """폐기된 함수 호출 보고."""
        if self.hooks is not None:
            self.hooks.do_action(HOOK_DEPRECATED_FUNCTION, function, replacement, version)

        if replacement:
            logger.warning(
                f"{function} is deprecated since version {version}! "
                f"Use {replacement} instead."
            )
        else:
            logger.warning(
                f"{function} is deprecated since version {version} "
                f"with no alternative available."
            )

    def do_deprecated_action(
        self,
        name: str,
        args: tuple[Any, ...],
        version: str,
        message: str | None = None,
    ) -> None:
        """
        폐기된 action 실행.

        등록된 callback이 없으면 아무것도 하지 않음.
        """
        if self.hooks is None or not self.hooks.has_action(name):
            return

        self.hooks.do_action(name, *args)

        suffix = f" {message}" if message else ""
        logger.warning(f"{name} is deprecated since version {version}!{suffix}")
