"""
用户领域实体 - 包含核心业务规则
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email


class UserRole(str, Enum):
    ATTENDEE = "ATTENDEE"
    ORGANIZER = "ORGANIZER"
    ADMIN = "ADMIN"


@dataclass
class UserSummary:
    """嵌入到事件/RSVP视图中的用户摘要"""
    id: int
    email: str


@dataclass
class User:
    """用户实体 - 领域核心"""

    id: Optional[int]
    email: str
    hashed_password: str
    role: UserRole = UserRole.ATTENDEE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """初始化后的业务规则验证"""
        self.role = UserRole(self.role)
        self.validate_email()

    def validate_email(self) -> None:
        """业务规则：邮箱格式验证（不做 DNS 投递检查）"""
        try:
            validate_email(self.email, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError(f"Invalid email format: {self.email}") from exc

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def can_organize(self) -> bool:
        """业务规则：只有组织者和管理员可以创建活动"""
        return self.role in (UserRole.ORGANIZER, UserRole.ADMIN)

    def promote_to_admin(self) -> None:
        self.role = UserRole.ADMIN
        self.updated_at = datetime.now(timezone.utc)
