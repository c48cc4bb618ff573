"""
App layer: 설정 로드, 플러그인 조립, CLI.

역할:
- default.yaml → Settings (config.py)
- HookRegistry/저장소/로거/설치기/템플릿 로더 조립 (plugin.py)
- 운영 도구 진입점 (cli.py)

주의: 폴더 구분
- src/templates/ → 코드 (loader.py)
- templates/ (루트) → 플러그인 기본 템플릿 (Jinja2 HTML)
"""

from .config import Settings, load_config, load_settings
from .plugin import WedContest

__all__ = [
    "Settings",
    "load_config",
    "load_settings",
    "WedContest",
]
