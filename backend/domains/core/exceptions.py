"""
笔记应用异常

所有可预期的失败都表示为 ApplicationError 子类，
由 HTTP 层按 category 转换为状态码，由 CLI 转换为退出码：

    ValidationError    -> 400  标题为空等输入问题
    NotFoundError      -> 404  笔记不存在
    SessionStateError  -> 409  编辑会话当前状态不允许该操作
    PersistenceError   -> 502  键值后端读写失败
    ConfigurationError -> 500  配置无效
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(str, Enum):
    """错误分类"""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    EXTERNAL = "external"      # 持久化后端
    INTERNAL = "internal"


_HTTP_STATUS = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.EXTERNAL: 502,
    ErrorCategory.INTERNAL: 500,
}


@dataclass
class ApplicationError(Exception):
    """
    应用异常基类

    Attributes:
        code: 机器可读的错误码，如 NOT_FOUND
        message: 面向用户的错误信息
        category: 错误分类，决定 HTTP 状态码
        details: 附加上下文（字段名、笔记 ID、后端名等）
        cause: 被包装的底层异常
    """
    code: str
    message: str
    category: ErrorCategory = ErrorCategory.INTERNAL
    details: Optional[Dict[str, Any]] = None
    cause: Optional[BaseException] = None

    def __post_init__(self):
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def http_status_code(self) -> int:
        return _HTTP_STATUS.get(self.category, 500)

    def to_dict(self) -> Dict[str, Any]:
        """错误响应体"""
        body: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(ApplicationError):
    """资源不存在"""

    def __init__(self, resource_type: str, resource_id: Any):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            "NOT_FOUND",
            f"{resource_type}不存在: {resource_id}",
            ErrorCategory.NOT_FOUND,
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class NoteNotFoundError(NotFoundError):
    """笔记不存在"""

    def __init__(self, note_id: Any):
        self.note_id = note_id
        super().__init__("笔记", note_id)


class ValidationError(ApplicationError):
    """输入校验失败；field 指向出错的表单字段"""

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        field: Optional[str] = None,
    ):
        self.errors = errors
        self.field = field
        context = {k: v for k, v in (("field", field), ("validation_errors", errors)) if v}
        super().__init__("VALIDATION_ERROR", message, ErrorCategory.VALIDATION, context or None)


class SessionStateError(ApplicationError):
    """编辑会话状态冲突，例如已在新建时再次打开新建表单"""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(
            "SESSION_STATE_ERROR",
            f"当前会话状态 {state} 不允许操作: {action}",
            ErrorCategory.CONFLICT,
            {"action": action, "state": state},
        )


class PersistenceError(ApplicationError):
    """
    键值后端读写失败

    operation 为 "load" 或 "save"。不做重试，由调用方决定如何呈现。
    """

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.operation = operation
        super().__init__(
            "PERSISTENCE_ERROR",
            f"持久化{operation}失败: {message}",
            ErrorCategory.EXTERNAL,
            details or {"operation": operation},
            cause,
        )


class ConfigurationError(ApplicationError):
    """配置项取值无效"""

    def __init__(self, config_key: str, message: str):
        self.config_key = config_key
        super().__init__(
            "CONFIGURATION_ERROR",
            f"配置错误 [{config_key}]: {message}",
            ErrorCategory.INTERNAL,
            {"config_key": config_key},
        )


__all__ = [
    "ErrorCategory",
    "ApplicationError",
    "NotFoundError",
    "NoteNotFoundError",
    "ValidationError",
    "SessionStateError",
    "PersistenceError",
    "ConfigurationError",
]
