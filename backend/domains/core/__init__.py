"""
Core - 通用应用基础设施

提供与具体业务无关的基础设施组件:
- 统一异常体系
- 配置管理
- 结构化日志
"""

from .exceptions import (
    ApplicationError,
    ConfigurationError,
    ErrorCategory,
    NotFoundError,
    NoteNotFoundError,
    PersistenceError,
    SessionStateError,
    ValidationError,
)
from .logging_config import (
    LogConfig,
    LogFormat,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from .settings import NotepadSettings, get_settings, reload_settings

__all__ = [
    # Exceptions
    "ErrorCategory",
    "ApplicationError",
    "NotFoundError",
    "NoteNotFoundError",
    "ValidationError",
    "SessionStateError",
    "PersistenceError",
    "ConfigurationError",
    # Logging
    "LogConfig",
    "LogFormat",
    "configure_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
    # Settings
    "NotepadSettings",
    "get_settings",
    "reload_settings",
]
