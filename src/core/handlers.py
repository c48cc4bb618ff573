"""
Log handlers: LogHandler 프로토콜 구현체.

- FileLogHandler: source별 일 단위 파일에 한 줄씩 append (filelock 보호)
- StdlibLogHandler: stdlib logging으로 전달

handler는 예외를 밖으로 던지지 않음 → 실패 시 False 반환.
"""

import json
import logging
import re
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.core.levels import to_stdlib_level
from src.domain.constants import DEFAULT_LOG_SOURCE, LOG_FILE_DATE_FORMAT
from src.domain.schemas import LogEntry

logger = logging.getLogger(__name__)

# context 중 파일에 기록하지 않는 키
_RESERVED_CONTEXT_KEYS = ("source", "_legacy")

_HANDLE_SANITIZE = re.compile(r"[^a-z0-9_-]+")


def sanitize_handle(handle: str) -> str:
    """
    파일명에 쓸 수 있도록 handle 정리.

    - 소문자
    - 영숫자, '-', '_' 외 문자는 '-'
    - 비면 기본 source
    """
    cleaned = _HANDLE_SANITIZE.sub("-", handle.strip().lower()).strip("-")
    return cleaned or DEFAULT_LOG_SOURCE


def format_entry(
    timestamp: datetime,
    level: str,
    message: str,
    context: dict[str, Any],
) -> str:
    """
    로그 한 줄 포맷.

    포맷: "<ISO timestamp> <LEVEL> <message>[ CONTEXT: <json>]"
    """
    line = f"{timestamp.isoformat()} {level.upper()} {message}"
    extra = {k: v for k, v in context.items() if k not in _RESERVED_CONTEXT_KEYS}
    if extra:
        line += f" CONTEXT: {json.dumps(extra, ensure_ascii=False, default=str)}"
    return line


# =============================================================================
# File Handler
# =============================================================================

class FileLogHandler:
    """
    파일 로그 handler.

    구조:
    <log_dir>/
    ├── <source>-<YYYY-MM-DD>.log
    └── .locks/<source>.lock
    """

    LOCK_TIMEOUT = 10.0

    def __init__(self, log_dir: Path, lock_timeout: float | None = None) -> None:
        """
        Args:
            log_dir: 로그 디렉터리 (없으면 첫 기록 시 생성)
            lock_timeout: 파일 락 timeout (초)
        """
        self.log_dir = Path(log_dir)
        self.lock_timeout = lock_timeout if lock_timeout is not None else self.LOCK_TIMEOUT
        self._locks_dir = self.log_dir / ".locks"

    @contextmanager
    def _handle_lock(self, handle: str) -> Generator[None, None, None]:
        """handle별 파일 락."""
        self._locks_dir.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._locks_dir / f"{handle}.lock", timeout=self.lock_timeout)
        with lock:
            yield

    def get_log_file_path(self, handle: str, timestamp: datetime) -> Path:
        """handle + 날짜 → 로그 파일 경로."""
        date = timestamp.strftime(LOG_FILE_DATE_FORMAT)
        return self.log_dir / f"{sanitize_handle(handle)}-{date}.log"

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        """
        엔트리를 파일에 append.

        Returns:
            기록 성공 여부 (실패해도 예외 없음)
        """
        handle = sanitize_handle(str(context.get("source") or DEFAULT_LOG_SOURCE))
        path = self.get_log_file_path(handle, timestamp)
        line = format_entry(timestamp, level, message, context)

        try:
            with self._handle_lock(handle):
                with open(path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            return True
        except Timeout:
            logger.warning(f"Timed out waiting for log lock: {handle}")
            return False
        except OSError as e:
            logger.warning(f"Failed to write log file {path}: {e}")
            return False

    def _files_for(self, handle: str) -> list[Path]:
        if not self.log_dir.exists():
            return []
        return sorted(self.log_dir.glob(f"{sanitize_handle(handle)}-*.log"))

    def clear(self, handle: str) -> bool:
        """
        handle의 로그 파일 내용 비우기.

        Returns:
            비운 파일이 하나라도 있으면 True
        """
        cleared = False
        handle = sanitize_handle(handle)
        try:
            with self._handle_lock(handle):
                for path in self._files_for(handle):
                    path.write_text("", encoding="utf-8")
                    cleared = True
        except (Timeout, OSError) as e:
            logger.warning(f"Failed to clear log files for {handle}: {e}")
            return False
        return cleared

    def remove(self, handle: str) -> bool:
        """
        handle의 로그 파일 삭제.

        Returns:
            삭제한 파일이 하나라도 있으면 True
        """
        removed = False
        handle = sanitize_handle(handle)
        try:
            with self._handle_lock(handle):
                for path in self._files_for(handle):
                    path.unlink()
                    removed = True
        except (Timeout, OSError) as e:
            logger.warning(f"Failed to remove log files for {handle}: {e}")
            return False
        return removed


# =============================================================================
# Stdlib Bridge
# =============================================================================

class StdlibLogHandler:
    """stdlib logging으로 전달하는 handler."""

    def __init__(self, logger_name: str = "wedcontest") -> None:
        self._logger = logging.getLogger(logger_name)

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        self._logger.log(
            to_stdlib_level(level),
            message,
            extra={
                "wed_level": level,
                "wed_timestamp": timestamp.isoformat(),
                "wed_context": context,
            },
        )
        return True


# =============================================================================
# In-Memory
# =============================================================================

class MemoryLogHandler:
    """
    엔트리를 메모리에 보관하는 handler (CLI 미리보기, 테스트용).

    max_entries를 넘으면 오래된 것부터 버림.
    """

    def __init__(self, max_entries: int = 1000) -> None:
        self.max_entries = max_entries
        self.entries: list[LogEntry] = []

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        self.entries.append(LogEntry(timestamp, level, message, dict(context)))
        if len(self.entries) > self.max_entries:
            del self.entries[: len(self.entries) - self.max_entries]
        return True

    def by_source(self, source: str) -> list[LogEntry]:
        return [e for e in self.entries if (e.source or DEFAULT_LOG_SOURCE) == source]

    def clear(self) -> None:
        self.entries.clear()
