"""
test_plugin_flow.py - 플러그인 조립 후 전체 흐름 테스트

시나리오:
1. 설치 → 역할 생성, 완료 action
2. 기본 템플릿만 있을 때 render("loop", {title: "X"}) → 기본 템플릿 + title 바인딩, 진단 없음
3. 테마 오버라이드 추가 → 오버라이드 렌더링, debug 설정 시 기본 템플릿
4. 로거: 기본 파일 handler + filter로 추가한 handler
"""

import io
import logging
from dataclasses import replace
from pathlib import Path

from src.app.config import Settings
from src.app.plugin import WedContest
from src.core.hooks import HookRegistry
from src.core.store import MemoryStateStore


class TestPluginFlow:
    """WedContest 조립 루트."""

    def test_install_creates_role_and_fires_actions(self, settings: Settings):
        hooks = HookRegistry()
        plugin = WedContest(settings, hooks=hooks)

        assert plugin.install() is True
        assert plugin.install() is True

        assert [r.name for r in plugin.roles.list_roles()] == ["representant"]
        assert hooks.did_action("wedcontest_installed") == 2
        assert settings.state_path.exists()

    def test_render_default_template(self, settings: Settings, caplog):
        """end-to-end: 오버라이드 없음 → 기본 템플릿, title 바인딩, 진단 없음."""
        caplog.set_level(logging.WARNING, logger="src.core.diagnostics")
        plugin = WedContest(settings, store=MemoryStateStore())
        out = io.StringIO()

        plugin.get_template("loop", {"title": "X"}, out=out)

        assert out.getvalue() == "default:X"
        assert caplog.records == []

    def test_override_and_debug(self, settings: Settings, theme_dir: Path, plugin_dir: Path):
        override = theme_dir / "wedcontest" / "loop.html"
        override.parent.mkdir(parents=True)
        override.write_text("override:{{ title }}", encoding="utf-8")

        plugin = WedContest(settings, store=MemoryStateStore())
        assert plugin.locate_template("loop") == override
        assert plugin.get_template("loop", {"title": "X"}) == "override:X"

        debug = WedContest(replace(settings, template_debug_mode=True), store=MemoryStateStore())
        assert debug.locate_template("loop") == plugin_dir / "templates" / "loop.html"
        assert debug.get_template("loop", {"title": "X"}) == "default:X"

    def test_paths(self, settings: Settings, plugin_dir: Path):
        plugin = WedContest(settings, store=MemoryStateStore())

        assert plugin.plugin_path() == plugin_dir
        assert plugin.template_path() == "wedcontest/"

    def test_logger_default_file_handler(self, settings: Settings):
        plugin = WedContest(settings, store=MemoryStateStore())

        plugin.logger.warning("disk low", {"source": "system"})

        files = list(settings.log_dir.glob("system-*.log"))
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8").strip().endswith("WARNING disk low")

    def test_logger_handlers_extended_by_filter(self, settings: Settings, recording_handler):
        hooks = HookRegistry()
        hooks.add_filter(
            "wedcontest_register_log_handlers", lambda handlers: handlers + [recording_handler]
        )
        plugin = WedContest(replace(settings, log_threshold="error"), hooks=hooks, store=MemoryStateStore())

        plugin.logger.warning("dropped")
        plugin.logger.error("kept")

        assert len(plugin.logger.handlers) == 2
        assert recording_handler.messages == ["kept"]
        assert plugin.logger is plugin.logger

    def test_get_template_part(self, settings: Settings, plugin_dir: Path):
        (plugin_dir / "templates" / "content-contest.html").write_text("part", encoding="utf-8")
        plugin = WedContest(settings, store=MemoryStateStore())

        assert plugin.get_template_part("content", "contest") == "part"
