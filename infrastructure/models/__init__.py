"""Infrastructure models package exports."""
from .base import Base, metadata
from .user import UserModel
from .event import EventModel
from .rsvp import RSVPModel

__all__ = [
    "Base",
    "metadata",
    "UserModel",
    "EventModel",
    "RSVPModel",
]
