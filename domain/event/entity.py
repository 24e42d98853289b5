"""
活动领域实体 - 包含核心业务规则
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from domain.user.entity import User, UserSummary

if TYPE_CHECKING:
    from domain.rsvp.entity import RSVP


@dataclass
class Event:
    """活动实体"""

    id: Optional[int]
    title: str
    description: str
    date: datetime
    location: str
    organizer_id: int
    approved: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # 读取视图时由仓储填充
    organizer: Optional[UserSummary] = None
    rsvps: List["RSVP"] = field(default_factory=list)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """业务规则：标题、描述、地点不能为空"""
        for name in ("title", "description", "location"):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValueError(f"{name} must not be empty")
        # 统一存 UTC：SQLite 的 DateTime 写入时会丢弃时区偏移
        if self.date.tzinfo is None:
            self.date = self.date.replace(tzinfo=timezone.utc)
        else:
            self.date = self.date.astimezone(timezone.utc)

    def can_be_modified_by(self, user: User) -> bool:
        """业务规则：管理员或活动组织者可以修改/删除"""
        return user.is_admin or self.organizer_id == user.id

    def apply_changes(
        self,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        date: Optional[datetime] = None,
        location: Optional[str] = None,
    ) -> None:
        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if date is not None:
            self.date = date
        if location is not None:
            self.location = location
        self.validate()
        self.updated_at = datetime.now(timezone.utc)

    def approve(self) -> None:
        """业务规则：审核通过（重复审核无副作用）"""
        self.approved = True
        self.updated_at = datetime.now(timezone.utc)
