"""
RSVP 领域实体
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from domain.user.entity import UserSummary

if TYPE_CHECKING:
    from domain.event.entity import Event


class RSVPStatus(str, Enum):
    GOING = "GOING"
    MAYBE = "MAYBE"
    NOT_GOING = "NOT_GOING"


@dataclass
class RSVP:
    """用户对活动的回复，(user_id, event_id) 唯一"""

    id: Optional[int]
    user_id: int
    event_id: int
    status: RSVPStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    event: Optional["Event"] = None

    def __post_init__(self):
        self.status = RSVPStatus(self.status)
