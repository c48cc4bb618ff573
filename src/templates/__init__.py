"""
Templates layer: 템플릿 탐색/렌더링 모듈.

역할:
- 테마 오버라이드 탐색 (locate_template)
- 템플릿/템플릿 파트 렌더링 (get_template, get_template_part)

주의: 폴더 구분
- src/templates/ → 코드 (이 모듈)
- templates/ (루트) → 플러그인 기본 템플릿
- <theme>/wedcontest/ → 테마 오버라이드
"""

from .loader import TemplateLoader

__all__ = [
    "TemplateLoader",
]
