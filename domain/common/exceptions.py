"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class UserAlreadyExistsException(BusinessException):
    def __init__(self, email: str):
        super().__init__(
            code=BusinessCode.USER_ALREADY_EXISTS,
            message="User already exists",
            error_type="UserAlreadyExists",
            details={"email": email},
            field="email",
        )


class InvalidCredentialsException(BusinessException):
    def __init__(self):
        super().__init__(
            code=BusinessCode.PASSWORD_ERROR,
            message="Invalid credentials",
            error_type="InvalidCredentials",
        )


class EventNotFoundException(BusinessException):
    def __init__(self, event_id: Optional[int] = None, *, require_approved: bool = False):
        details = {"event_id": event_id} if event_id is not None else None
        super().__init__(
            code=BusinessCode.EVENT_NOT_APPROVED if require_approved else BusinessCode.EVENT_NOT_FOUND,
            message="Event not found or not approved" if require_approved else "Event not found",
            error_type="EventNotFound",
            details=details,
        )


class PermissionDeniedException(BusinessException):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            code=BusinessCode.FORBIDDEN,
            message=message,
            error_type="PermissionDenied",
        )


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )
