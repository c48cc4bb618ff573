"""
Core layer: 플러그인 핵심 모듈.

페이지 렌더링을 깨뜨리지 않는 것이 최우선 → 예외 대신 진단

역할:
- hook 레지스트리, 진단 채널
- 로그 레벨, Logger façade, handler
- 상태 저장소, 역할 저장소, 설치 루틴
"""

from .diagnostics import Diagnostics
from .handlers import FileLogHandler, MemoryLogHandler, StdlibLogHandler
from .hooks import HookRegistry
from .install import Installer
from .levels import LogLevel, get_level_severity, is_valid_level
from .logger import LogHandler, Logger
from .roles import RoleStore
from .store import JsonStateStore, MemoryStateStore, StateStore, atomic_write_json

__all__ = [
    # hooks
    "HookRegistry",
    # diagnostics
    "Diagnostics",
    # levels
    "LogLevel",
    "get_level_severity",
    "is_valid_level",
    # logger
    "Logger",
    "LogHandler",
    # handlers
    "FileLogHandler",
    "MemoryLogHandler",
    "StdlibLogHandler",
    # store
    "StateStore",
    "JsonStateStore",
    "MemoryStateStore",
    "atomic_write_json",
    # roles
    "RoleStore",
    # install
    "Installer",
]
