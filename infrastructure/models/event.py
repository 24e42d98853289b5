"""
活动数据库模型
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Index
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .base import Base


class EventModel(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=False)
    approved = Column(Boolean, default=False, nullable=False, comment="是否审核通过")
    organizer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    organizer = relationship("UserModel", back_populates="events")
    rsvps = relationship("RSVPModel", back_populates="event", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("ix_events_approved_date", "approved", "date"),
    )

    def __repr__(self):
        return f"<EventModel(id={self.id}, title='{self.title}', approved={self.approved})>"
