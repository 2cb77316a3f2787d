"""
应用配置管理（基于 pydantic-settings）

提供:
- 类型安全的配置
- 环境变量自动绑定（前缀 NOTEPAD_）
- 配置校验
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = {"memory", "file", "redis"}


class NotepadSettings(BaseSettings):
    """
    笔记应用主配置

    支持从环境变量和 .env 文件加载，例如:
        NOTEPAD_STORAGE_BACKEND=redis
        NOTEPAD_REDIS_URL=redis://localhost:6379/1
    """
    model_config = SettingsConfigDict(
        env_prefix="NOTEPAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 项目信息
    project_name: str = Field(default="Notepad API", description="服务名称")
    version: str = Field(default="1.0.0", description="服务版本")
    host: str = Field(default="127.0.0.1", description="监听地址")
    port: int = Field(default=8000, ge=1, le=65535, description="监听端口")
    api_prefix: str = Field(default="/api/v1", description="API 路由前缀")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="允许的跨域来源",
    )

    # 持久化
    storage_backend: str = Field(default="file", description="存储后端: memory/file/redis")
    storage_key: str = Field(default="notes", min_length=1, description="笔记集合的存储键")
    storage_path: Path = Field(default=Path("data") / "notes.json", description="file 后端的数据文件")
    redis_url: str = Field(default="redis://localhost:6379/0", description="redis 后端连接 URL")

    # 日志
    log_level: str = Field(default="INFO", description="日志级别")
    log_format: str = Field(default="console", description="日志格式: json/console")

    @field_validator("storage_backend")
    @classmethod
    def validate_backend(cls, v):
        v_lower = v.strip().lower()
        if v_lower not in STORAGE_BACKENDS:
            raise ValueError(f"Invalid storage backend: {v}. Must be one of {sorted(STORAGE_BACKENDS)}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v):
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_format(cls, v):
        v_lower = v.lower()
        if v_lower not in ("json", "console"):
            raise ValueError(f"Invalid log format: {v}")
        return v_lower


@lru_cache
def get_settings() -> NotepadSettings:
    """
    获取配置单例

    使用 lru_cache 确保只加载一次配置。
    """
    return NotepadSettings()


def reload_settings() -> NotepadSettings:
    """
    重新加载配置

    清除缓存并重新加载配置。
    """
    get_settings.cache_clear()
    return get_settings()
