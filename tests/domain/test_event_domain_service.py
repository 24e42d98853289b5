from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from domain.common.exceptions import (
    DomainValidationException,
    EventNotFoundException,
    PermissionDeniedException,
)
from domain.event.entity import Event
from domain.event.repository import EventRepository
from domain.event.service import EventDomainService
from domain.rsvp.entity import RSVP, RSVPStatus
from domain.rsvp.repository import RSVPRepository
from domain.user.entity import User, UserRole
from shared.codes import BusinessCode


class InMemoryEventRepository(EventRepository):
    def __init__(self):
        self.items: Dict[int, Event] = {}
        self._next = 1

    async def create(self, event: Event) -> Event:  # type: ignore[override]
        event.id = self._next
        self._next += 1
        self.items[event.id] = event
        return event

    async def get_by_id(self, event_id: int, *, approved_only: bool = False) -> Optional[Event]:  # type: ignore[override]
        event = self.items.get(event_id)
        if event is None or (approved_only and not event.approved):
            return None
        return event

    async def list_approved(self) -> List[Event]:  # type: ignore[override]
        return sorted((e for e in self.items.values() if e.approved), key=lambda e: e.date)

    async def update(self, event: Event) -> Event:  # type: ignore[override]
        self.items[event.id] = event
        return event

    async def delete(self, event_id: int) -> bool:  # type: ignore[override]
        return self.items.pop(event_id, None) is not None


class InMemoryRSVPRepository(RSVPRepository):
    def __init__(self):
        self.items: Dict[tuple, RSVP] = {}

    async def upsert(self, user_id: int, event_id: int, status: RSVPStatus) -> RSVP:  # type: ignore[override]
        key = (user_id, event_id)
        rsvp = self.items.get(key)
        if rsvp is None:
            rsvp = RSVP(id=len(self.items) + 1, user_id=user_id, event_id=event_id, status=status)
            self.items[key] = rsvp
        else:
            rsvp.status = status
        return rsvp


def _user(user_id: int, role: UserRole) -> User:
    return User(id=user_id, email=f"u{user_id}@example.com", hashed_password="x", role=role)


ADMIN = _user(1, UserRole.ADMIN)
ORGANIZER = _user(2, UserRole.ORGANIZER)
OTHER_ORGANIZER = _user(3, UserRole.ORGANIZER)
ATTENDEE = _user(4, UserRole.ATTENDEE)

EVENT_FIELDS = dict(
    title="Meetup",
    description="Monthly meetup",
    date=datetime(2030, 5, 1, 18, 0, tzinfo=timezone.utc),
    location="Hall A",
)


@pytest.fixture
def service():
    return EventDomainService(InMemoryEventRepository(), InMemoryRSVPRepository())


@pytest.mark.asyncio
async def test_attendee_cannot_create_event(service):
    with pytest.raises(PermissionDeniedException):
        await service.create_event(ATTENDEE, **EVENT_FIELDS)


@pytest.mark.asyncio
async def test_admin_events_are_auto_approved(service):
    by_admin = await service.create_event(ADMIN, **EVENT_FIELDS)
    by_organizer = await service.create_event(ORGANIZER, **EVENT_FIELDS)
    assert by_admin.approved is True
    assert by_organizer.approved is False
    assert [e.id for e in await service.list_approved()] == [by_admin.id]


@pytest.mark.asyncio
async def test_blank_title_is_rejected(service):
    with pytest.raises(DomainValidationException):
        await service.create_event(ORGANIZER, **{**EVENT_FIELDS, "title": "   "})


@pytest.mark.asyncio
async def test_only_owner_or_admin_can_modify(service):
    event = await service.create_event(ORGANIZER, **EVENT_FIELDS)

    with pytest.raises(PermissionDeniedException):
        await service.update_event(OTHER_ORGANIZER, event.id, title="Hijacked")

    updated = await service.update_event(ORGANIZER, event.id, title="Renamed")
    assert updated.title == "Renamed"
    updated = await service.update_event(ADMIN, event.id, location="Hall B")
    assert updated.location == "Hall B"

    with pytest.raises(PermissionDeniedException):
        await service.delete_event(ATTENDEE, event.id)
    await service.delete_event(ADMIN, event.id)
    with pytest.raises(EventNotFoundException):
        await service.get_event(event.id)


@pytest.mark.asyncio
async def test_approve_requires_admin(service):
    event = await service.create_event(ORGANIZER, **EVENT_FIELDS)
    with pytest.raises(PermissionDeniedException):
        await service.approve_event(ORGANIZER, event.id)
    approved = await service.approve_event(ADMIN, event.id)
    assert approved.approved is True
    with pytest.raises(EventNotFoundException):
        await service.approve_event(ADMIN, 999)


@pytest.mark.asyncio
async def test_rsvp_requires_approved_event_and_upserts(service):
    event = await service.create_event(ORGANIZER, **EVENT_FIELDS)

    with pytest.raises(EventNotFoundException) as exc_info:
        await service.rsvp(ATTENDEE, event.id, RSVPStatus.GOING)
    assert exc_info.value.code == BusinessCode.EVENT_NOT_APPROVED

    await service.approve_event(ADMIN, event.id)
    first = await service.rsvp(ATTENDEE, event.id, RSVPStatus.GOING)
    second = await service.rsvp(ATTENDEE, event.id, RSVPStatus.MAYBE)
    assert first.id == second.id
    assert second.status is RSVPStatus.MAYBE


def test_naive_event_date_is_treated_as_utc():
    event = Event(id=None, organizer_id=1, **{**EVENT_FIELDS, "date": datetime(2030, 1, 1, 9, 0)})
    assert event.date.tzinfo is timezone.utc


def test_event_date_is_normalized_to_utc():
    offset = timezone(timedelta(hours=5))
    event = Event(
        id=None, title="t", description="d", location="l", organizer_id=1,
        date=datetime(2030, 6, 1, 18, 0, tzinfo=offset),
    )
    assert event.date == datetime(2030, 6, 1, 13, 0, tzinfo=timezone.utc)
    assert event.date.utcoffset() == timedelta(0)

    event.apply_changes(date=datetime(2030, 6, 2, 9, 30, tzinfo=timezone(timedelta(hours=-4))))
    assert event.date == datetime(2030, 6, 2, 13, 30, tzinfo=timezone.utc)
    assert event.date.tzinfo == timezone.utc
