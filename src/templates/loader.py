"""
템플릿 로더: 테마 오버라이드 탐색 + Jinja2 렌더링.

탐색 순서 (locate_template):
    <theme_root>/<template_path>/<template_name>
    <theme_root>/<template_name>
    <default_path>/<template_name>

규칙:
- theme_roots: child 테마 먼저, parent 테마 다음
- template_debug_mode=True → 테마 오버라이드 무시, 항상 default_path
- 결과 경로는 존재하지 않을 수 있음 → 예외 없음, 호출자가 확인
- 렌더링 실패/템플릿 없음 → 진단 후 None 반환 (페이지 렌더링을 깨지 않음)
- 탐색 결과 캐시 없음
"""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TextIO

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from src.core.diagnostics import Diagnostics
from src.core.hooks import HookRegistry
from src.domain.constants import (
    DEFAULT_TEMPLATE_EXTENSION,
    DEFAULT_TEMPLATE_PATH,
    HOOK_AFTER_TEMPLATE_PART,
    HOOK_BEFORE_TEMPLATE_PART,
    HOOK_GET_TEMPLATE,
    HOOK_GET_TEMPLATE_PART,
    HOOK_LOCATE_TEMPLATE,
    HOOK_TEMPLATE_PATH,
    PLUGIN_TEMPLATES_DIR,
)
from src.domain.schemas import TemplateLocation, TemplateSource

logger = logging.getLogger(__name__)


class TemplateLoader:
    """
    템플릿 탐색/렌더링.

    Usage:
        loader = TemplateLoader(plugin_path, theme_roots=[child, parent], hooks=hooks)
        loader.get_template("loop", {"title": "X"}, out=sys.stdout)
    """

    def __init__(
        self,
        plugin_path: Path,
        theme_roots: Sequence[Path] = (),
        hooks: HookRegistry | None = None,
        diagnostics: Diagnostics | None = None,
        template_path: str = DEFAULT_TEMPLATE_PATH,
        debug_mode: bool = False,
        extension: str = DEFAULT_TEMPLATE_EXTENSION,
    ) -> None:
        """
        Args:
            plugin_path: 플러그인 루트 (templates/ 포함)
            theme_roots: 테마 디렉터리 목록 (우선순위 순)
            hooks: filter/action 레지스트리
            diagnostics: 진단 채널
            template_path: 테마 안의 플러그인 전용 하위 경로
            debug_mode: True면 테마 오버라이드 무시
            extension: 확장자 없는 템플릿 이름에 붙일 확장자
        """
        self.plugin_path = Path(plugin_path)
        self.theme_roots = [Path(root) for root in theme_roots]
        self.hooks = hooks or HookRegistry()
        self.diagnostics = diagnostics or Diagnostics(self.hooks)
        self._template_path = template_path
        self.debug_mode = debug_mode
        self.extension = extension

    # =========================================================================
    # Paths
    # =========================================================================

    def template_path(self) -> str:
        """테마 안의 플러그인 하위 경로 (filter 적용)."""
        return self.hooks.apply_filters(HOOK_TEMPLATE_PATH, self._template_path)

    def default_path(self) -> Path:
        """플러그인 기본 템플릿 디렉터리."""
        return self.plugin_path / PLUGIN_TEMPLATES_DIR

    def _with_extension(self, template_name: str) -> str:
        """확장자가 없으면 기본 확장자 추가."""
        if Path(template_name).suffix or not self.extension:
            return template_name
        return f"{template_name}{self.extension}"

    def _theme_lookup(
        self,
        names: Sequence[str],
        tried: list[Path],
    ) -> tuple[Path, int] | None:
        """
        테마 디렉터리에서 첫 번째로 존재하는 파일 탐색.

        이름 우선, 그다음 테마 순서 (child → parent).

        Returns:
            (경로, names 인덱스) 또는 None
        """
        for index, name in enumerate(names):
            if not name:
                continue
            for root in self.theme_roots:
                candidate = root / name
                tried.append(candidate)
                if candidate.is_file():
                    return candidate, index
        return None

    # =========================================================================
    # Locate
    # =========================================================================

    def locate(
        self,
        template_name: str,
        template_path: str = "",
        default_path: str | Path = "",
    ) -> TemplateLocation:
        """
        템플릿 위치 탐색 (탐색 후보와 결정 단계 포함).

        Args:
            template_name: 템플릿 이름 (예: "loop.html", "single/contest")
            template_path: 테마 안의 하위 경로 (기본: template_path())
            default_path: 플러그인 기본 경로 (기본: <plugin>/templates)

        Returns:
            TemplateLocation (path는 존재하지 않을 수 있음)
        """
        template_name = self._with_extension(template_name)
        if not template_path:
            template_path = self.template_path()
        base = Path(default_path) if default_path else self.default_path()

        tried: list[Path] = []
        found = None
        if not self.debug_mode:
            found = self._theme_lookup(
                [str(Path(template_path) / template_name), template_name],
                tried,
            )

        if found is None:
            path = base / template_name
            tried.append(path)
            source = TemplateSource.DEFAULT
        else:
            path, index = found
            source = TemplateSource.THEME_SUBPATH if index == 0 else TemplateSource.THEME

        located = self.hooks.apply_filters(
            HOOK_LOCATE_TEMPLATE, path, template_name, template_path
        )
        return TemplateLocation(path=Path(located), source=source, candidates=tried)

    def locate_template(
        self,
        template_name: str,
        template_path: str = "",
        default_path: str | Path = "",
    ) -> Path:
        """템플릿 경로 반환. 존재 여부는 호출자가 확인."""
        return self.locate(template_name, template_path, default_path).path

    # =========================================================================
    # Render
    # =========================================================================

    def _render_file(self, path: Path, args: Mapping[str, Any]) -> str | None:
        """
        Jinja2로 파일 렌더링.

        Returns:
            렌더링 결과 (실패 시 None, 진단 남김)
        """
        env = Environment(
            loader=FileSystemLoader(str(path.parent)),
            autoescape=select_autoescape(["html", "htm", "xml"]),
            keep_trailing_newline=True,
        )
        try:
            template = env.get_template(path.name)
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            self._render_failed(path, e)
            return None

        # 템플릿 안의 Python 연산 오류(TypeError 등)도 렌더링 실패로 처리
        try:
            return template.render(**args)
        except Exception as e:
            self._render_failed(path, e)
            return None

    def _render_failed(self, path: Path, error: Exception) -> None:
        self.diagnostics.doing_it_wrong(
            "get_template",
            f"{path} could not be rendered: {type(error).__name__}: {error}",
            "2.1",
        )

    def get_template(
        self,
        template_name: str,
        args: Mapping[str, Any] | None = None,
        template_path: str = "",
        default_path: str | Path = "",
        out: TextIO | None = None,
    ) -> str | None:
        """
        템플릿 렌더링.

        Args:
            template_name: 템플릿 이름
            args: 템플릿 컨텍스트 (템플릿은 이름으로 필드를 읽음)
            template_path: 테마 안의 하위 경로
            default_path: 플러그인 기본 경로
            out: 출력 스트림 (주어지면 렌더링 결과를 씀)

        Returns:
            렌더링 결과 (템플릿 없음/실패 시 None)
        """
        args = dict(args or {})
        located = self.locate_template(template_name, template_path, default_path)

        if not located.is_file():
            self.diagnostics.doing_it_wrong(
                "get_template",
                f"{located} does not exist.",
                "2.1",
            )
            return None

        # 외부 플러그인이 템플릿 파일을 바꿀 수 있음
        located = Path(
            self.hooks.apply_filters(
                HOOK_GET_TEMPLATE, located, template_name, args, template_path, default_path
            )
        )

        self.hooks.do_action(
            HOOK_BEFORE_TEMPLATE_PART, template_name, template_path, located, args
        )
        try:
            output = self._render_file(located, args)
            if output is not None and out is not None:
                out.write(output)
        finally:
            self.hooks.do_action(
                HOOK_AFTER_TEMPLATE_PART, template_name, template_path, located, args
            )

        return output

    def get_template_part(
        self,
        slug: str,
        name: str = "",
        out: TextIO | None = None,
    ) -> str | None:
        """
        템플릿 파트 렌더링 (예: loop 조각).

        탐색 순서:
        1. 테마: <slug>-<name>, <template_path>/<slug>-<name>  (debug면 생략)
        2. 플러그인: templates/<slug>-<name>
        3. 테마: <slug>, <template_path>/<slug>  (debug면 생략)

        Returns:
            렌더링 결과 (템플릿 없으면 None, 진단 없음)
        """
        template_path = self.template_path()
        template: Path | None = None
        tried: list[Path] = []

        if name:
            part = self._with_extension(f"{slug}-{name}")
            if not self.debug_mode:
                found = self._theme_lookup([part, str(Path(template_path) / part)], tried)
                template = found[0] if found else None

            default = self.default_path() / part
            if template is None and default.is_file():
                template = default

        if template is None and not self.debug_mode:
            part = self._with_extension(slug)
            found = self._theme_lookup([part, str(Path(template_path) / part)], tried)
            template = found[0] if found else None

        template = self.hooks.apply_filters(HOOK_GET_TEMPLATE_PART, template, slug, name)
        if not template:
            logger.debug(f"No template part for slug={slug!r} name={name!r}")
            return None

        output = self._render_file(Path(template), {})
        if output is not None and out is not None:
            out.write(output)
        return output
