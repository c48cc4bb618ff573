"""
플러그인 조립 루트.

HookRegistry, 저장소, 로거, 설치기, 템플릿 로더를 한곳에서 생성/소유.
전역 싱글턴 없음 → 필요한 곳에 WedContest 인스턴스를 전달.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

from src.app.config import Settings
from src.core.diagnostics import Diagnostics
from src.core.handlers import FileLogHandler
from src.core.hooks import HookRegistry
from src.core.install import Installer
from src.core.logger import Logger
from src.core.roles import RoleStore
from src.core.store import JsonStateStore, StateStore
from src.domain.constants import HOOK_REGISTER_LOG_HANDLERS
from src.templates.loader import TemplateLoader

logger = logging.getLogger(__name__)


class WedContest:
    """
    플러그인 인스턴스.

    Usage:
        plugin = WedContest(load_settings())
        plugin.install()
        plugin.get_template("loop", {"title": "X"}, out=sys.stdout)
    """

    def __init__(
        self,
        settings: Settings,
        hooks: HookRegistry | None = None,
        store: StateStore | None = None,
    ) -> None:
        self.settings = settings
        self.hooks = hooks or HookRegistry()
        self.diagnostics = Diagnostics(self.hooks)
        self.store = store or JsonStateStore(
            settings.state_path, lock_timeout=settings.state_lock_timeout
        )
        self.roles = RoleStore(self.store)
        self.installer = Installer(self.store, roles=self.roles, hooks=self.hooks)
        self.templates = TemplateLoader(
            plugin_path=settings.plugin_path,
            theme_roots=settings.theme_roots,
            hooks=self.hooks,
            diagnostics=self.diagnostics,
            template_path=settings.template_path,
            debug_mode=settings.template_debug_mode,
            extension=settings.template_extension,
        )
        self._logger: Logger | None = None

        # 기본 handler: 파일 로그 (다른 filter가 목록을 교체/추가 가능)
        self.hooks.add_filter(HOOK_REGISTER_LOG_HANDLERS, self._default_log_handlers, 0)

    def _default_log_handlers(self, handlers: list[Any]) -> list[Any]:
        return [*handlers, FileLogHandler(self.settings.log_dir)]

    # =========================================================================
    # Paths
    # =========================================================================

    def plugin_path(self) -> Path:
        return self.settings.plugin_path

    def template_path(self) -> str:
        return self.templates.template_path()

    # =========================================================================
    # Services
    # =========================================================================

    @property
    def logger(self) -> Logger:
        """
        공유 Logger (최초 접근 시 생성).

        handler 목록은 생성 시점의 wedcontest_register_log_handlers filter 결과로 고정.
        """
        if self._logger is None:
            self._logger = Logger(
                handlers=None,
                threshold=self.settings.log_threshold,
                hooks=self.hooks,
                diagnostics=self.diagnostics,
                log_dir=self.settings.log_dir,
            )
        return self._logger

    def install(self) -> bool:
        return self.installer.install()

    def locate_template(
        self,
        template_name: str,
        template_path: str = "",
        default_path: str | Path = "",
    ) -> Path:
        return self.templates.locate_template(template_name, template_path, default_path)

    def get_template(
        self,
        template_name: str,
        args: Mapping[str, Any] | None = None,
        template_path: str = "",
        default_path: str | Path = "",
        out: TextIO | None = None,
    ) -> str | None:
        return self.templates.get_template(
            template_name, args, template_path, default_path, out
        )

    def get_template_part(
        self,
        slug: str,
        name: str = "",
        out: TextIO | None = None,
    ) -> str | None:
        return self.templates.get_template_part(slug, name, out)
