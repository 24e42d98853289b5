"""
活动仓储接口
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import Event


class EventRepository(ABC):
    """活动仓储抽象接口；读取方法返回的实体均已填充 organizer"""

    @abstractmethod
    async def create(self, event: Event) -> Event:
        """创建活动"""
        pass

    @abstractmethod
    async def get_by_id(self, event_id: int, *, approved_only: bool = False) -> Optional[Event]:
        """根据ID获取活动"""
        pass

    @abstractmethod
    async def list_approved(self) -> List[Event]:
        """已审核活动列表（按日期升序，填充 rsvps 与其用户）"""
        pass

    @abstractmethod
    async def update(self, event: Event) -> Event:
        """更新活动"""
        pass

    @abstractmethod
    async def delete(self, event_id: int) -> bool:
        """删除活动（级联删除其 RSVP）"""
        pass
