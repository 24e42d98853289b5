"""
RSVP 仓储接口
"""
from abc import ABC, abstractmethod

from .entity import RSVP, RSVPStatus


class RSVPRepository(ABC):

    @abstractmethod
    async def upsert(self, user_id: int, event_id: int, status: RSVPStatus) -> RSVP:
        """按 (user_id, event_id) 创建或更新状态，返回填充了 user 与 event 的实体"""
        pass
