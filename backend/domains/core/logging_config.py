"""
结构化日志

structlog 负责事件字典，标准库 logging 负责输出：
模块里既可以用 logging.getLogger(__name__)，也可以用 get_logger(__name__)，
两者最终由同一个 ProcessorFormatter 渲染为控制台文本或 JSON 行。

每条日志附带 service 字段（notepad-api / notepad-cli），
HTTP 请求期间还附带 request_id。
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

import structlog

# 这些库在 INFO 级别过于嘈杂
_QUIET_LOGGERS = ("uvicorn.access", "redis", "httpx", "httpcore")


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


@dataclass
class LogConfig:
    """日志配置"""
    level: str = "INFO"
    format: LogFormat = LogFormat.CONSOLE
    add_timestamp: bool = True
    service_name: str = "notepad"

    @classmethod
    def from_settings(cls, service_name: str = "notepad") -> "LogConfig":
        from .settings import get_settings

        settings = get_settings()
        return cls(
            level=settings.log_level,
            format=LogFormat(settings.log_format),
            service_name=service_name,
        )


def _service_tagger(service_name: str):
    def add_service(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service


def _shared_processors(config: LogConfig) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        _service_tagger(config.service_name),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if config.add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))
    return processors


def _renderer(config: LogConfig) -> Any:
    if config.format == LogFormat.JSON:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(config: Optional[LogConfig] = None, service_name: str = "notepad") -> LogConfig:
    """
    配置 structlog 与根 logger（可重复调用，后一次覆盖前一次）

    Args:
        config: 日志配置；None 则按 NOTEPAD_LOG_LEVEL / NOTEPAD_LOG_FORMAT 构建
        service_name: config 为 None 时使用的服务名

    Returns:
        生效的日志配置
    """
    if config is None:
        config = LogConfig.from_settings(service_name=service_name)

    shared = _shared_processors(config)
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_renderer(config), foreign_pre_chain=shared))

    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return config


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    获取结构化 logger

    使用示例:
        logger = get_logger(__name__)
        logger.info("note_created", note_id=3, total=4)
    """
    return structlog.get_logger(name)


def bind_request_context(request_id: str) -> None:
    """为当前请求绑定 request_id（之前的上下文被清空）"""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
