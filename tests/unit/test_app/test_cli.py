"""
test_cli.py - CLI 테스트
"""

from pathlib import Path

import pytest
import yaml

from src.app.cli import _parse_args_pairs, main


@pytest.fixture
def config_path(tmp_path: Path, plugin_dir: Path, theme_dir: Path) -> Path:
    """tmp_path 아래로 격리된 설정 파일."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "plugin": {"path": str(plugin_dir)},
                "theme": {"roots": [str(theme_dir)]},
                "logging": {"log_dir": "logs"},
                "state": {"path": "state/wedcontest.json"},
            }
        ),
        encoding="utf-8",
    )
    return path


class TestParseArgsPairs:
    def test_pairs(self):
        assert _parse_args_pairs(["title=Hello", "empty=", "eq=a=b"]) == {
            "title": "Hello",
            "empty": "",
            "eq": "a=b",
        }

    def test_invalid_pair_exits(self, config_path: Path):
        with pytest.raises(SystemExit):
            main(["--config", str(config_path), "render", "loop", "--arg", "novalue"])


class TestCommands:
    """서브커맨드."""

    def test_install_then_roles(self, config_path: Path, capsys):
        assert main(["--config", str(config_path), "install"]) == 0
        assert capsys.readouterr().out.strip() == "installed"

        assert main(["--config", str(config_path), "roles"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("representant\tRepresentant\t")
        assert "edit_participant" in out

    def test_locate(self, config_path: Path, plugin_dir: Path, capsys):
        assert main(["--config", str(config_path), "locate", "loop"]) == 0

        assert capsys.readouterr().out.strip() == str(plugin_dir / "templates" / "loop.html")

    def test_locate_missing(self, config_path: Path):
        assert main(["--config", str(config_path), "locate", "nope"]) == 1

    def test_render(self, config_path: Path, capsys):
        assert main(["--config", str(config_path), "render", "loop", "--arg", "title=Hi"]) == 0

        assert capsys.readouterr().out == "default:Hi"

    def test_render_missing(self, config_path: Path, capsys):
        assert main(["--config", str(config_path), "render", "nope"]) == 1
        assert capsys.readouterr().out == ""

    def test_part_missing(self, config_path: Path):
        assert main(["--config", str(config_path), "part", "content", "contest"]) == 1

    def test_log_writes_file(self, config_path: Path, tmp_path: Path):
        assert main(
            ["--config", str(config_path), "log", "error", "boom", "--source", "cli"]
        ) == 0

        files = list((tmp_path / "logs").glob("cli-*.log"))
        assert len(files) == 1
        assert "ERROR boom" in files[0].read_text(encoding="utf-8")

    def test_bad_config(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("logging: {threshold: loud}", encoding="utf-8")

        assert main(["--config", str(path), "roles"]) == 1
