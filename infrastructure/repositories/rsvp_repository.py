"""
RSVP 仓储实现
"""
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.rsvp.entity import RSVP, RSVPStatus
from domain.rsvp.repository import RSVPRepository
from infrastructure.models.event import EventModel
from infrastructure.models.rsvp import RSVPModel
from core.logging_config import get_logger
from .event_repository import event_to_entity, user_summary


logger = get_logger(__name__)


class SQLAlchemyRSVPRepository(RSVPRepository):
    """RSVP 仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(self, user_id: int, event_id: int, status: RSVPStatus) -> RSVP:
        result = await self.session.execute(
            select(RSVPModel).where(
                RSVPModel.user_id == user_id,
                RSVPModel.event_id == event_id,
            )
        )
        db_rsvp = result.scalar_one_or_none()
        now = datetime.now(timezone.utc)

        if db_rsvp is None:
            db_rsvp = RSVPModel(
                user_id=user_id,
                event_id=event_id,
                status=status.value,
                created_at=now,
                updated_at=now,
            )
            self.session.add(db_rsvp)
        else:
            logger.debug("rsvp_status_changed", user_id=user_id, event_id=event_id,
                         old=db_rsvp.status, new=status.value)
            db_rsvp.status = status.value
            db_rsvp.updated_at = now
        await self.session.flush()

        loaded = await self.session.execute(
            select(RSVPModel)
            .options(
                selectinload(RSVPModel.user),
                selectinload(RSVPModel.event).selectinload(EventModel.organizer),
            )
            .where(RSVPModel.id == db_rsvp.id)
            .execution_options(populate_existing=True)
        )
        db_rsvp = loaded.scalar_one()
        return RSVP(
            id=db_rsvp.id,
            user_id=db_rsvp.user_id,
            event_id=db_rsvp.event_id,
            status=db_rsvp.status,
            created_at=db_rsvp.created_at,
            updated_at=db_rsvp.updated_at,
            user=user_summary(db_rsvp.user),
            event=event_to_entity(db_rsvp.event),
        )
