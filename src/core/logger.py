"""
Logger façade: 레벨별 메시지를 등록된 handler로 분배.

규칙:
- handler 목록은 생성 시점에 검증 → 이후 변경 없음 (tuple)
- 잘못된 handler는 진단 후 제외 (생성은 실패하지 않음)
- threshold 이상 severity만 handler로 전달 (None이면 전부)
- 잘못된 level → 진단 1회, threshold 검사는 통과로 간주
- handler 하나의 예외가 나머지 handler 호출을 막지 않음
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from src.core.diagnostics import Diagnostics
from src.core.handlers import FileLogHandler
from src.core.hooks import HookRegistry
from src.core.levels import LogLevel, get_level_severity, is_valid_level
from src.domain.constants import (
    HOOK_LOG_ADD,
    HOOK_LOGGER_ADD_MESSAGE,
    HOOK_LOGGER_LOG_MESSAGE,
    HOOK_REGISTER_LOG_HANDLERS,
)
from src.domain.schemas import LogEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class LogHandler(Protocol):
    """로그 엔트리를 기록할 수 있는 객체."""

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        """
        엔트리 기록.

        Returns:
            기록 성공 여부
        """
        ...


class Logger:
    """
    로깅 façade.

    Usage:
        log = Logger(handlers=[FileLogHandler(log_dir)], threshold="warning")
        log.error("Payment failed", {"source": "checkout"})
    """

    def __init__(
        self,
        handlers: Iterable[Any] | None = None,
        threshold: "str | LogLevel | None" = None,
        hooks: HookRegistry | None = None,
        diagnostics: Diagnostics | None = None,
        log_dir: Path | None = None,
    ) -> None:
        """
        Args:
            handlers: handler 목록. None이면 wedcontest_register_log_handlers filter로 결정
            threshold: 최소 레벨 (None이면 전부 처리)
            hooks: filter/action 레지스트리
            diagnostics: 진단 채널 (None이면 hooks 기반으로 생성)
            log_dir: 폐기된 clear()가 사용할 로그 디렉터리
        """
        self.hooks = hooks or HookRegistry()
        self.diagnostics = diagnostics or Diagnostics(self.hooks)
        self.log_dir = log_dir

        if handlers is None:
            handlers = self.hooks.apply_filters(HOOK_REGISTER_LOG_HANDLERS, [])

        if handlers is not None and not isinstance(handlers, (list, tuple)):
            self.diagnostics.doing_it_wrong(
                "Logger.__init__",
                f"Log handlers must be a list, {type(handlers).__name__} given.",
                "3.0",
            )
            handlers = []

        registered: list[LogHandler] = []
        for handler in handlers or []:
            if not isinstance(handler, type) and isinstance(handler, LogHandler):
                registered.append(handler)
            else:
                name = handler.__name__ if isinstance(handler, type) else type(handler).__name__
                self.diagnostics.doing_it_wrong(
                    "Logger.__init__",
                    f"The provided handler {name} does not implement LogHandler.",
                    "3.0",
                )

        self._handlers: tuple[LogHandler, ...] = tuple(registered)

        if threshold is not None and is_valid_level(threshold):
            self._threshold: int | None = get_level_severity(threshold)
        else:
            self._threshold = None

    @property
    def handlers(self) -> tuple[LogHandler, ...]:
        return self._handlers

    @property
    def threshold(self) -> int | None:
        """threshold severity (None이면 필터링 없음)."""
        return self._threshold

    def should_handle(self, level: "str | LogLevel") -> bool:
        """
        handler로 전달할지 여부.

        잘못된 레벨은 threshold 검사를 통과한 것으로 처리.
        """
        if self._threshold is None:
            return True
        if not is_valid_level(level):
            return True
        return self._threshold <= get_level_severity(level)

    # =========================================================================
    # Logging
    # =========================================================================

    def log(
        self,
        level: "str | LogLevel",
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        로그 엔트리 추가.

        Args:
            level: emergency|alert|critical|error|warning|notice|info|debug
            message: 로그 메시지
            context: handler용 추가 정보
        """
        if not is_valid_level(level):
            self.diagnostics.doing_it_wrong(
                "Logger.log",
                f'Logger.log was called with an invalid level "{level}".',
                "3.0",
            )

        if not self.should_handle(level):
            return

        level_name = level.value if isinstance(level, LogLevel) else str(level)
        context = dict(context or {})
        message = self.hooks.apply_filters(
            HOOK_LOGGER_LOG_MESSAGE, message, level_name, context
        )
        entry = LogEntry(datetime.now(UTC), level_name, message, context)

        for handler in self._handlers:
            try:
                handler.handle(entry.timestamp, entry.level, entry.message, entry.context)
            except Exception as e:
                logger.error(
                    f"Log handler {type(handler).__name__} failed: {e}",
                    exc_info=True,
                )

    def add(
        self,
        handle: str,
        message: str,
        level: "str | LogLevel" = LogLevel.NOTICE,
    ) -> bool:
        """
        Legacy 로그 추가. log() 또는 레벨별 메서드 사용 권장.

        context에 source=handle, _legacy=True 기록.
        """
        message = self.hooks.apply_filters(HOOK_LOGGER_ADD_MESSAGE, message, handle)
        self.log(level, message, {"source": handle, "_legacy": True})
        self.diagnostics.do_deprecated_action(
            HOOK_LOG_ADD,
            (handle, message),
            "3.0",
            "This action has been deprecated with no alternative.",
        )
        return True

    def emergency(self, message: str, context: dict[str, Any] | None = None) -> None:
        """System is unusable."""
        self.log(LogLevel.EMERGENCY, message, context)

    def alert(self, message: str, context: dict[str, Any] | None = None) -> None:
        """
        Action must be taken immediately.

        예: 사이트 전체 다운, DB 사용 불가.
        """
        self.log(LogLevel.ALERT, message, context)

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Critical conditions (컴포넌트 사용 불가, 예상치 못한 예외)."""
        self.log(LogLevel.CRITICAL, message, context)

    def error(self, message: str, context: dict[str, Any] | None = None) -> None:
        """즉시 조치는 필요 없지만 기록/모니터링 필요한 런타임 에러."""
        self.log(LogLevel.ERROR, message, context)

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        """에러는 아닌 예외적 상황 (폐기된 API 사용 등)."""
        self.log(LogLevel.WARNING, message, context)

    def notice(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.NOTICE, message, context)

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def debug(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    # =========================================================================
    # Deprecated
    # =========================================================================

    def clear(self, handle: str) -> bool:
        """
        handle 로그 파일 비우기.

        폐기됨 → FileLogHandler.clear 사용.
        """
        self.diagnostics.deprecated_function(
            "Logger.clear", "3.0", "FileLogHandler.clear"
        )

        for handler in self._handlers:
            if isinstance(handler, FileLogHandler):
                return handler.clear(handle)

        if self.log_dir is None:
            return False
        return FileLogHandler(self.log_dir).clear(handle)
