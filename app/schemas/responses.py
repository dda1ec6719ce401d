"""Standardized Response Schemas"""

from typing import Generic, TypeVar, Optional, Any
from pydantic import BaseModel


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.

    Example:
        {
            "success": true,
            "data": {...},
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: Optional[T] = None
    message: str = "Operation successful"


class ErrorCode:
    """Failure categories carried by OperationResult.code"""
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    FAILED = "failed"


class OperationResult(BaseModel, Generic[T]):
    """
    Outcome of a service operation.

    Callers branch on ``success``. Failures carry a human-readable ``error``
    and a coarse ``code`` for picking an HTTP status.

    Example:
        {
            "success": false,
            "error": "Bill already exists for Ali for 2026-01",
            "code": "duplicate"
        }
    """
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def ok(cls, message: Optional[str] = None, data: Any = None) -> "OperationResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, code: str = ErrorCode.FAILED) -> "OperationResult":
        return cls(success=False, error=error, code=code)
