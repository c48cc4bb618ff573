"""
Pytest fixtures for the plugin core tests.

구성:
- 플러그인 디렉터리 (templates/ 기본 템플릿)
- 테마 디렉터리 (child / parent)
- HookRegistry, MemoryStateStore
- 테스트용 log handler
"""

from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from src.app.config import Settings
from src.core.hooks import HookRegistry
from src.core.store import MemoryStateStore

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    """
    플러그인 루트.

    포함:
    - templates/loop.html (기본 템플릿)
    """
    root = tmp_path / "plugin"
    (root / "templates").mkdir(parents=True)
    (root / "templates" / "loop.html").write_text(
        "default:{{ title }}", encoding="utf-8"
    )
    return root


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """빈 child 테마 디렉터리."""
    root = tmp_path / "theme"
    root.mkdir()
    return root


@pytest.fixture
def parent_theme_dir(tmp_path: Path) -> Path:
    """빈 parent 테마 디렉터리."""
    root = tmp_path / "parent-theme"
    root.mkdir()
    return root


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def settings(tmp_path: Path, plugin_dir: Path, theme_dir: Path) -> Settings:
    """테스트용 설정 (tmp_path 아래로 격리)."""
    return Settings(
        plugin_path=plugin_dir,
        theme_roots=[theme_dir],
        log_dir=tmp_path / "logs",
        state_path=tmp_path / "state" / "wedcontest.json",
    )


# =============================================================================
# Handler Fixtures
# =============================================================================

class RecordingHandler:
    """받은 엔트리를 그대로 기록하는 handler."""

    def __init__(self) -> None:
        self.entries: list[tuple[datetime, str, str, dict[str, Any]]] = []

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        self.entries.append((timestamp, level, message, context))
        return True

    @property
    def levels(self) -> list[str]:
        return [entry[1] for entry in self.entries]

    @property
    def messages(self) -> list[str]:
        return [entry[2] for entry in self.entries]


class FailingHandler:
    """항상 예외를 던지는 handler."""

    def __init__(self) -> None:
        self.calls = 0

    def handle(
        self,
        timestamp: datetime,
        level: str,
        message: str,
        context: dict[str, Any],
    ) -> bool:
        self.calls += 1
        raise RuntimeError("handler exploded")


@pytest.fixture
def recording_handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def failing_handler() -> FailingHandler:
    return FailingHandler()


@pytest.fixture
def diagnostics_calls(hooks: HookRegistry) -> list[tuple]:
    """doing_it_wrong_run action으로 발행된 진단 기록."""
    calls: list[tuple] = []
    hooks.add_action(
        "doing_it_wrong_run",
        lambda function, message, version: calls.append((function, message, version)),
        accepted_args=3,
    )
    return calls
