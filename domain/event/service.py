"""
活动领域服务 - 权限规则与活动/RSVP 的业务流程
"""
from datetime import datetime, timezone
from typing import List, Optional

from domain.user.entity import User
from domain.rsvp.entity import RSVP, RSVPStatus
from domain.rsvp.repository import RSVPRepository
from domain.common.exceptions import (
    DomainValidationException,
    EventNotFoundException,
    PermissionDeniedException,
)
from .entity import Event
from .repository import EventRepository


class EventDomainService:
    """活动领域服务"""

    def __init__(self, event_repository: EventRepository, rsvp_repository: RSVPRepository):
        self.event_repository = event_repository
        self.rsvp_repository = rsvp_repository

    async def list_approved(self) -> List[Event]:
        return await self.event_repository.list_approved()

    async def get_event(self, event_id: int) -> Event:
        event = await self.event_repository.get_by_id(event_id)
        if not event:
            raise EventNotFoundException(event_id)
        return event

    async def create_event(self, user: User, *, title: str, description: str,
                           date: datetime, location: str) -> Event:
        """创建活动；管理员创建的活动自动审核通过"""
        if not user.can_organize():
            raise PermissionDeniedException()

        now = datetime.now(timezone.utc)
        try:
            event = Event(
                id=None,
                title=title,
                description=description,
                date=date,
                location=location,
                organizer_id=user.id,
                approved=user.is_admin,
                created_at=now,
                updated_at=now,
            )
        except ValueError as exc:
            raise DomainValidationException(str(exc))
        return await self.event_repository.create(event)

    async def update_event(self, user: User, event_id: int, *,
                           title: Optional[str] = None,
                           description: Optional[str] = None,
                           date: Optional[datetime] = None,
                           location: Optional[str] = None) -> Event:
        event = await self._get_modifiable(user, event_id)
        try:
            event.apply_changes(title=title, description=description, date=date, location=location)
        except ValueError as exc:
            raise DomainValidationException(str(exc))
        return await self.event_repository.update(event)

    async def delete_event(self, user: User, event_id: int) -> None:
        await self._get_modifiable(user, event_id)
        await self.event_repository.delete(event_id)

    async def approve_event(self, user: User, event_id: int) -> Event:
        if not user.is_admin:
            raise PermissionDeniedException("Admin access required")
        event = await self.event_repository.get_by_id(event_id)
        if not event:
            raise EventNotFoundException(event_id)
        event.approve()
        return await self.event_repository.update(event)

    async def rsvp(self, user: User, event_id: int, status: RSVPStatus) -> RSVP:
        """只能回复已审核的活动"""
        event = await self.event_repository.get_by_id(event_id, approved_only=True)
        if not event:
            raise EventNotFoundException(event_id, require_approved=True)
        return await self.rsvp_repository.upsert(user.id, event_id, status)

    async def _get_modifiable(self, user: User, event_id: int) -> Event:
        event = await self.event_repository.get_by_id(event_id)
        if not event:
            raise EventNotFoundException(event_id)
        if not event.can_be_modified_by(user):
            raise PermissionDeniedException()
        return event
