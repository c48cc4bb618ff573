"""
Configuration: default.yaml → Settings.

규칙:
- 파일이 없으면 기본값
- 상대 경로는 설정 파일 디렉터리 기준
- 파싱/타입 오류 → ConfigError (프로세스 시작 시점에만 발생)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.core.levels import is_valid_level
from src.domain.constants import DEFAULT_TEMPLATE_EXTENSION, DEFAULT_TEMPLATE_PATH
from src.domain.errors import ConfigError, ErrorCodes

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "default.yaml"


@dataclass
class Settings:
    """플러그인 설정."""
    plugin_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH.parent)
    template_path: str = DEFAULT_TEMPLATE_PATH
    template_extension: str = DEFAULT_TEMPLATE_EXTENSION
    template_debug_mode: bool = False

    theme_roots: list[Path] = field(default_factory=list)

    log_threshold: str | None = None
    log_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH.parent / "logs")

    state_path: Path = field(
        default_factory=lambda: DEFAULT_CONFIG_PATH.parent / ".state" / "wedcontest.json"
    )
    state_lock_timeout: float = 10.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path) -> "Settings":
        """
        설정 dict → Settings.

        Args:
            data: yaml 파싱 결과
            base_dir: 상대 경로 기준 디렉터리

        Raises:
            ConfigError: CONFIG_INVALID
        """
        plugin = _section(data, "plugin")
        theme = _section(data, "theme")
        logging_cfg = _section(data, "logging")
        state = _section(data, "state")

        def _path(value: Any, default: str) -> Path:
            path = Path(value if value is not None else default)
            return path if path.is_absolute() else (base_dir / path)

        roots = theme.get("roots") or []
        if not isinstance(roots, list):
            raise ConfigError(ErrorCodes.CONFIG_INVALID, key="theme.roots", value=roots)

        threshold = logging_cfg.get("threshold")
        if threshold is not None and not is_valid_level(str(threshold)):
            raise ConfigError(
                ErrorCodes.CONFIG_INVALID, key="logging.threshold", value=threshold
            )

        return cls(
            plugin_path=_path(plugin.get("path"), "."),
            template_path=str(plugin.get("template_path", DEFAULT_TEMPLATE_PATH)),
            template_extension=str(
                plugin.get("template_extension", DEFAULT_TEMPLATE_EXTENSION)
            ),
            template_debug_mode=bool(plugin.get("template_debug_mode", False)),
            theme_roots=[_path(root, ".") for root in roots],
            log_threshold=str(threshold).lower() if threshold is not None else None,
            log_dir=_path(logging_cfg.get("log_dir"), "logs"),
            state_path=_path(state.get("path"), ".state/wedcontest.json"),
            state_lock_timeout=float(state.get("lock_timeout", 10.0)),
        )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(ErrorCodes.CONFIG_INVALID, key=key)
    return value


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드 (없으면 빈 dict)."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(
            ErrorCodes.CONFIG_PARSE_FAILED, path=str(config_path), cause=str(e)
        )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(ErrorCodes.CONFIG_INVALID, path=str(config_path))
    return data


def load_settings(config_path: Path | None = None) -> Settings:
    """설정 파일 → Settings."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    data = load_config(config_path)
    return Settings.from_dict(data, base_dir=config_path.resolve().parent)
