"""
Domain Constants: 플러그인 전역 상수.

hook 이름, 저장소 키, 기본 경로 등 시스템 전반에서 사용되는 값들.
"""

from datetime import timedelta

# =============================================================================
# Template Lookup (템플릿 탐색 경로)
# =============================================================================
# 탐색 순서:
#   <theme_root>/<template_path>/<template_name>
#   <theme_root>/<template_name>
#   <plugin_path>/templates/<template_name>

DEFAULT_TEMPLATE_PATH = "wedcontest/"
PLUGIN_TEMPLATES_DIR = "templates"
DEFAULT_TEMPLATE_EXTENSION = ".html"

# =============================================================================
# Hook Names (확장 지점)
# =============================================================================

# === Templates ===
HOOK_TEMPLATE_PATH = "wedcontest_template_path"
HOOK_LOCATE_TEMPLATE = "wedcontest_locate_template"
HOOK_GET_TEMPLATE = "wed_get_template"
HOOK_GET_TEMPLATE_PART = "wed_get_template_part"
HOOK_BEFORE_TEMPLATE_PART = "wed_before_template_part"
HOOK_AFTER_TEMPLATE_PART = "wed_after_template_part"

# === Logger ===
HOOK_REGISTER_LOG_HANDLERS = "wedcontest_register_log_handlers"
HOOK_LOGGER_LOG_MESSAGE = "wedcontest_logger_log_message"
HOOK_LOGGER_ADD_MESSAGE = "wedcontest_logger_add_message"
HOOK_LOG_ADD = "wedcontest_log_add"

# === Install ===
HOOK_FLUSH_REWRITE_RULES = "wedcontest_flush_rewrite_rules"
HOOK_INSTALLED = "wedcontest_installed"

# === Diagnostics ===
HOOK_DOING_IT_WRONG = "doing_it_wrong_run"
HOOK_DEPRECATED_FUNCTION = "deprecated_function_run"

DEFAULT_HOOK_PRIORITY = 10

# =============================================================================
# State Store Keys (영속 상태)
# =============================================================================

INSTALL_GUARD_KEY = "wedcontest_installing"
INSTALL_GUARD_TTL = timedelta(minutes=10)
USER_ROLES_KEY = "user_roles"

# =============================================================================
# Roles
# =============================================================================

REPRESENTANT_ROLE = "representant"
REPRESENTANT_DISPLAY_NAME = "Representant"
REPRESENTANT_CAPABILITIES = {
    "read": True,
    "edit_participant": True,
    "read_participant": True,
    "delete_participant": True,
}

# =============================================================================
# Logging
# =============================================================================

DEFAULT_LOG_SOURCE = "log"
LOG_FILE_DATE_FORMAT = "%Y-%m-%d"
