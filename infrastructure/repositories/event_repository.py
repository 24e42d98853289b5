"""
活动仓储实现 - 使用SQLAlchemy实现数据访问
"""
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.common.exceptions import EventNotFoundException
from domain.event.entity import Event
from domain.event.repository import EventRepository
from domain.rsvp.entity import RSVP
from domain.user.entity import UserSummary
from infrastructure.models.event import EventModel
from infrastructure.models.rsvp import RSVPModel
from infrastructure.models.user import UserModel


def user_summary(model: Optional[UserModel]) -> Optional[UserSummary]:
    if model is None:
        return None
    return UserSummary(id=model.id, email=model.email)


def event_to_entity(model: EventModel, *, with_rsvps: bool = False) -> Event:
    """将数据库模型转换为领域实体；organizer 需已预加载"""
    event = Event(
        id=model.id,
        title=model.title,
        description=model.description,
        date=model.date,
        location=model.location,
        organizer_id=model.organizer_id,
        approved=model.approved,
        created_at=model.created_at,
        updated_at=model.updated_at,
        organizer=user_summary(model.organizer),
    )
    if with_rsvps:
        event.rsvps = [
            RSVP(
                id=r.id,
                user_id=r.user_id,
                event_id=r.event_id,
                status=r.status,
                created_at=r.created_at,
                updated_at=r.updated_at,
                user=user_summary(r.user),
            )
            for r in model.rsvps
        ]
    return event


class SQLAlchemyEventRepository(EventRepository):
    """活动仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self, *, with_rsvps: bool = False):
        # 异步会话下不能懒加载，关联对象一律预加载
        options = [selectinload(EventModel.organizer)]
        if with_rsvps:
            options.append(selectinload(EventModel.rsvps).selectinload(RSVPModel.user))
        return select(EventModel).options(*options).execution_options(populate_existing=True)

    async def _load(self, event_id: int, *, approved_only: bool = False,
                    with_rsvps: bool = False) -> Optional[EventModel]:
        query = self._select(with_rsvps=with_rsvps).where(EventModel.id == event_id)
        if approved_only:
            query = query.where(EventModel.approved.is_(True))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(self, event: Event) -> Event:
        db_event = EventModel(
            title=event.title,
            description=event.description,
            date=event.date,
            location=event.location,
            organizer_id=event.organizer_id,
            approved=event.approved,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )
        self.session.add(db_event)
        await self.session.flush()
        return event_to_entity(await self._load(db_event.id, with_rsvps=True), with_rsvps=True)

    async def get_by_id(self, event_id: int, *, approved_only: bool = False) -> Optional[Event]:
        db_event = await self._load(event_id, approved_only=approved_only, with_rsvps=True)
        return event_to_entity(db_event, with_rsvps=True) if db_event else None

    async def list_approved(self) -> List[Event]:
        query = (
            self._select(with_rsvps=True)
            .where(EventModel.approved.is_(True))
            .order_by(EventModel.date.asc(), EventModel.id.asc())
        )
        result = await self.session.execute(query)
        return [event_to_entity(m, with_rsvps=True) for m in result.scalars().all()]

    async def update(self, event: Event) -> Event:
        db_event = await self._load(event.id)
        if db_event is None:
            raise EventNotFoundException(event.id)

        db_event.title = event.title
        db_event.description = event.description
        db_event.date = event.date
        db_event.location = event.location
        db_event.approved = event.approved
        db_event.updated_at = event.updated_at

        await self.session.flush()
        return event_to_entity(await self._load(event.id, with_rsvps=True), with_rsvps=True)

    async def delete(self, event_id: int) -> bool:
        """显式删除 RSVP 再删除活动，不依赖数据库的级联设置"""
        await self.session.execute(delete(RSVPModel).where(RSVPModel.event_id == event_id))
        result = await self.session.execute(delete(EventModel).where(EventModel.id == event_id))
        return result.rowcount > 0
