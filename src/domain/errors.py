"""
Error definitions for the plugin core.

운영 규칙:
- 페이지 렌더링을 깨뜨리지 않는다 → 코어는 예외를 호출자에게 던지지 않음
- 개발자 실수(잘못된 level, 없는 템플릿, 잘못된 handler)는 Diagnostics로 보고
- 예외가 허용되는 곳: 프로세스 시작 시점의 설정 로드 (ConfigError)
"""

from typing import Any


class WedContestError(Exception):
    """
    플러그인 코어 공통 에러.

    호출자까지 전달되는 것은 시작 시점 검증뿐:
    - 설정 파일 파싱 실패
    - 설정 값 타입 오류

    상태 저장소 에러(STATE_*)는 코어 내부에서 잡아 로그 후 False로 변환.

    Usage:
        raise WedContestError("CONFIG_INVALID", key="logging.threshold")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ConfigError(WedContestError):
    """설정 파일 로드/검증 실패."""

    pass


# =============================================================================
# Error / Diagnostic Codes
# =============================================================================

class ErrorCodes:
    """에러 및 진단 코드 상수."""

    # === Config ===
    CONFIG_PARSE_FAILED = "CONFIG_PARSE_FAILED"
    CONFIG_INVALID = "CONFIG_INVALID"

    # === State store (Installer가 잡아서 False로 변환) ===
    STATE_CORRUPT = "STATE_CORRUPT"
    STATE_LOCK_TIMEOUT = "STATE_LOCK_TIMEOUT"
    STATE_IO_FAILED = "STATE_IO_FAILED"
