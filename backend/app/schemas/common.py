"""Response envelopes shared by every route."""

from datetime import datetime
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful response: payload in ``data``, optional human message."""

    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    """Error body produced by the exception handlers."""

    success: bool = False
    error: str = Field(..., description="面向用户的错误信息")
    code: str = Field("INTERNAL_ERROR", description="机器可读的错误码")
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.now)
