"""
test_config.py - 설정 로드 테스트
"""

from pathlib import Path

import pytest
import yaml

from src.app.config import Settings, load_config, load_settings
from src.domain.errors import ConfigError, ErrorCodes


def _write_config(path: Path, data: dict) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadConfig:
    """yaml 로드."""

    def test_missing_file_returns_empty(self, tmp_path: Path):
        assert load_config(tmp_path / "missing.yaml") == {}

    def test_empty_file_returns_empty(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_parse_error(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("plugin: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        assert exc_info.value.code == ErrorCodes.CONFIG_PARSE_FAILED

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_project_default_yaml_loads(self):
        """프로젝트 루트 default.yaml 유효성."""
        settings = load_settings()

        assert settings.template_path == "wedcontest/"
        assert settings.template_debug_mode is False
        assert settings.log_threshold is None


class TestSettings:
    """Settings 변환."""

    def test_relative_paths_resolve_against_config_dir(self, tmp_path: Path):
        path = _write_config(
            tmp_path / "config.yaml",
            {
                "plugin": {"path": "plugin", "template_debug_mode": True},
                "theme": {"roots": ["themes/child", "/abs/parent"]},
                "logging": {"threshold": "WARNING", "log_dir": "var/logs"},
                "state": {"path": "var/state.json", "lock_timeout": 2},
            },
        )

        settings = load_settings(path)

        base = tmp_path.resolve()
        assert settings.plugin_path == base / "plugin"
        assert settings.template_debug_mode is True
        assert settings.theme_roots == [base / "themes" / "child", Path("/abs/parent")]
        assert settings.log_threshold == "warning"
        assert settings.log_dir == base / "var" / "logs"
        assert settings.state_path == base / "var" / "state.json"
        assert settings.state_lock_timeout == 2.0

    def test_defaults(self, tmp_path: Path):
        settings = Settings.from_dict({}, base_dir=tmp_path)

        assert settings.plugin_path == tmp_path / "."
        assert settings.template_extension == ".html"
        assert settings.theme_roots == []

    def test_invalid_threshold(self, tmp_path: Path):
        with pytest.raises(ConfigError) as exc_info:
            Settings.from_dict({"logging": {"threshold": "loud"}}, base_dir=tmp_path)

        assert exc_info.value.context["key"] == "logging.threshold"

    def test_invalid_roots(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            Settings.from_dict({"theme": {"roots": "single"}}, base_dir=tmp_path)

    def test_invalid_section(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            Settings.from_dict({"plugin": "oops"}, base_dir=tmp_path)
