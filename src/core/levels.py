"""
Log levels: 8단계 고정 severity (RFC 5424).

emergency > alert > critical > error > warning > notice > info > debug
"""

import logging
from enum import Enum


class LogLevel(str, Enum):
    """로그 레벨. 값은 handler로 전달되는 소문자 이름."""
    EMERGENCY = "emergency"  # System is unusable
    ALERT = "alert"          # Action must be taken immediately
    CRITICAL = "critical"    # Critical conditions
    ERROR = "error"          # Error conditions
    WARNING = "warning"      # Warning conditions
    NOTICE = "notice"        # Normal but significant condition
    INFO = "info"            # Informational messages
    DEBUG = "debug"          # Debug-level messages

    @property
    def severity(self) -> int:
        return LEVEL_SEVERITY[self.value]


LEVEL_SEVERITY: dict[str, int] = {
    "emergency": 800,
    "alert": 700,
    "critical": 600,
    "error": 500,
    "warning": 400,
    "notice": 300,
    "info": 200,
    "debug": 100,
}

SEVERITY_LEVEL: dict[int, str] = {v: k for k, v in LEVEL_SEVERITY.items()}

# stdlib logging 브리지용
STDLIB_LEVELS: dict[str, int] = {
    "emergency": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "notice": logging.INFO,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _normalize(level: "str | LogLevel") -> str:
    if isinstance(level, LogLevel):
        return level.value
    return str(level).strip().lower()


def is_valid_level(level: "str | LogLevel") -> bool:
    """유효한 레벨 이름인지."""
    return _normalize(level) in LEVEL_SEVERITY


def get_level_severity(level: "str | LogLevel") -> int:
    """
    레벨 → severity 정수.

    Returns:
        severity (잘못된 레벨이면 0)
    """
    return LEVEL_SEVERITY.get(_normalize(level), 0)


def get_severity_level(severity: int) -> str | None:
    """severity 정수 → 레벨 이름 (없으면 None)."""
    return SEVERITY_LEVEL.get(severity)


def to_stdlib_level(level: "str | LogLevel") -> int:
    """레벨 → stdlib logging 레벨 (잘못된 레벨은 WARNING)."""
    return STDLIB_LEVELS.get(_normalize(level), logging.WARNING)
