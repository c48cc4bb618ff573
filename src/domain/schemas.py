"""
Data schemas for the plugin core.

규칙:
- 로그 엔트리는 휘발성 → 영속화는 handler 책임
- Role/InstallState는 StateStore에 dict로 저장 → to_dict/from_dict 제공
- 템플릿 위치는 캐시하지 않음 (매 호출마다 새로 탐색)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

# =============================================================================
# Logging
# =============================================================================

@dataclass(frozen=True)
class LogEntry:
    """단일 로그 엔트리 (handler로 전달되는 단위)."""
    timestamp: datetime
    level: str  # emergency..debug (잘못된 값이면 원본 문자열 그대로)
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str | None:
        """context의 source (legacy add()가 채움)."""
        source = self.context.get("source")
        return str(source) if source else None


# =============================================================================
# Roles
# =============================================================================

@dataclass
class RoleDefinition:
    """
    사용자 역할 정의.

    capabilities: capability 이름 → 부여 여부
    """
    name: str
    display_name: str
    capabilities: dict[str, bool] = field(default_factory=dict)

    def has_cap(self, capability: str) -> bool:
        """capability 부여 여부."""
        return bool(self.capabilities.get(capability, False))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "capabilities": dict(self.capabilities),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoleDefinition":
        return cls(
            name=data["name"],
            display_name=data.get("display_name", data["name"]),
            capabilities={k: bool(v) for k, v in data.get("capabilities", {}).items()},
        )


# =============================================================================
# Templates
# =============================================================================

class TemplateSource(str, Enum):
    """템플릿이 어느 단계에서 결정되었는지."""
    THEME_SUBPATH = "theme_subpath"  # <theme>/<template_path>/<name>
    THEME = "theme"                  # <theme>/<name>
    DEFAULT = "default"              # <plugin>/templates/<name>


@dataclass
class TemplateLocation:
    """
    템플릿 탐색 결과.

    path는 존재하지 않을 수 있음 → 호출자가 exists() 확인.
    """
    path: Path
    source: TemplateSource
    candidates: list[Path] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    @property
    def is_override(self) -> bool:
        """테마 오버라이드로 결정되었는지."""
        return self.source != TemplateSource.DEFAULT


# =============================================================================
# Install
# =============================================================================

class InstallStatus(str, Enum):
    """설치 루틴 상태."""
    IDLE = "idle"
    INSTALLING = "installing"


@dataclass
class InstallState:
    """
    설치 가드 레코드.

    expires_at이 지난 INSTALLING 레코드는 IDLE로 간주 (크래시 복구).
    """
    status: InstallStatus
    owner: str = ""
    started_at: str = ""
    expires_at: str = ""

    def is_active(self, now: datetime) -> bool:
        """만료되지 않은 INSTALLING 상태인지."""
        if self.status != InstallStatus.INSTALLING:
            return False
        try:
            expires = datetime.fromisoformat(self.expires_at)
        except (ValueError, TypeError):
            return False
        return now < expires

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "owner": self.owner,
            "started_at": self.started_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "InstallState":
        # 구버전 transient 값("yes" 등)은 만료된 가드로 취급
        if not isinstance(data, dict):
            return cls(status=InstallStatus.IDLE)

        status = data.get("status", "idle")
        try:
            status = InstallStatus(status)
        except ValueError:
            status = InstallStatus.IDLE

        return cls(
            status=status,
            owner=data.get("owner", ""),
            started_at=data.get("started_at", ""),
            expires_at=data.get("expires_at", ""),
        )
