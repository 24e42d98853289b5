"""
Shared business codes used across layers (Domain/Core/API).

Single source of truth for the `code` field of the unified response envelope.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """业务状态码定义（单一来源）"""

    # 成功
    SUCCESS = 0

    # 参数错误 (1xxxx)
    PARAM_VALIDATION_ERROR = 10003

    # 业务错误 (2xxxx)
    USER_ALREADY_EXISTS = 20002
    PASSWORD_ERROR = 20003
    TOKEN_EXPIRED = 20005
    NOT_FOUND = 20006  # 资源未找到（通用）
    EVENT_NOT_FOUND = 20101
    EVENT_NOT_APPROVED = 20102

    # 权限错误 (3xxxx)
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # 系统错误 (4xxxx)
    SYSTEM_ERROR = 40000
    SERVICE_UNAVAILABLE = 40003


__all__ = ["BusinessCode"]
