"""
活动应用服务 - 编排活动/RSVP 用例，并在事务提交后推送实时通知
"""
from typing import Callable, List

from domain.user.entity import User
from domain.event.service import EventDomainService
from domain.common.unit_of_work import AbstractUnitOfWork
from application.dto import (
    EventCreateDTO,
    EventUpdateDTO,
    EventResponseDTO,
    RSVPRequestDTO,
    RSVPResponseDTO,
)
from application.ports.realtime import BroadcastPort
from core.logging_config import get_logger


logger = get_logger(__name__)


class EventApplicationService:
    """活动应用服务

    所有变更先提交事务，再调用 broadcaster；广播不会抛出异常，
    因此推送失败不会影响已成功的请求。
    """

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork], broadcaster: BroadcastPort):
        self._uow_factory = uow_factory
        self._broadcaster = broadcaster

    @staticmethod
    def _domain(uow: AbstractUnitOfWork) -> EventDomainService:
        return EventDomainService(uow.event_repository, uow.rsvp_repository)

    async def list_events(self) -> List[EventResponseDTO]:
        async with self._uow_factory(readonly=True) as uow:
            events = await self._domain(uow).list_approved()
        return [EventResponseDTO.model_validate(e) for e in events]

    async def get_event(self, event_id: int) -> EventResponseDTO:
        async with self._uow_factory(readonly=True) as uow:
            event = await self._domain(uow).get_event(event_id)
        return EventResponseDTO.model_validate(event)

    async def create_event(self, user: User, data: EventCreateDTO) -> EventResponseDTO:
        async with self._uow_factory() as uow:
            event = await self._domain(uow).create_event(
                user,
                title=data.title,
                description=data.description,
                date=data.date,
                location=data.location,
            )
        dto = EventResponseDTO.model_validate(event)
        logger.info("event_created", event_id=dto.id, organizer_id=user.id, approved=dto.approved)
        self._broadcaster.broadcast_event_created(dto.model_dump(mode="json"))
        return dto

    async def update_event(self, user: User, event_id: int, data: EventUpdateDTO) -> EventResponseDTO:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        async with self._uow_factory() as uow:
            event = await self._domain(uow).update_event(user, event_id, **changes)
        dto = EventResponseDTO.model_validate(event)
        logger.info("event_updated", event_id=event_id, user_id=user.id, fields=sorted(changes))
        self._broadcaster.broadcast_event_updated(dto.model_dump(mode="json"))
        return dto

    async def delete_event(self, user: User, event_id: int) -> None:
        async with self._uow_factory() as uow:
            await self._domain(uow).delete_event(user, event_id)
        logger.info("event_deleted", event_id=event_id, user_id=user.id)
        self._broadcaster.broadcast_event_deleted(event_id)

    async def approve_event(self, user: User, event_id: int) -> EventResponseDTO:
        async with self._uow_factory() as uow:
            event = await self._domain(uow).approve_event(user, event_id)
        dto = EventResponseDTO.model_validate(event)
        logger.info("event_approved", event_id=event_id, admin_id=user.id)
        self._broadcaster.broadcast_event_updated(dto.model_dump(mode="json"))
        return dto

    async def rsvp(self, user: User, event_id: int, data: RSVPRequestDTO) -> RSVPResponseDTO:
        async with self._uow_factory() as uow:
            rsvp = await self._domain(uow).rsvp(user, event_id, data.status)
        dto = RSVPResponseDTO.model_validate(rsvp)
        logger.info("rsvp_updated", event_id=event_id, user_id=user.id, status=dto.status.value)
        self._broadcaster.broadcast_rsvp_updated(dto.model_dump(mode="json"))
        return dto
