"""Domain layer: errors, constants and schemas."""

from .errors import ConfigError, ErrorCodes, WedContestError
from .schemas import (
    InstallState,
    InstallStatus,
    LogEntry,
    RoleDefinition,
    TemplateLocation,
    TemplateSource,
)

__all__ = [
    "WedContestError",
    "ConfigError",
    "ErrorCodes",
    "LogEntry",
    "RoleDefinition",
    "TemplateLocation",
    "TemplateSource",
    "InstallState",
    "InstallStatus",
]
