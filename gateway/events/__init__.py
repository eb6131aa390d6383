"""
Event Retention

Event model and the bounded stores that keep recent events.
"""

from .base import BaseEventStore
from .memory import MemoryEventStore
from .models import Event, EventEnvelope, EventStatus, Skill

__all__ = [
    "BaseEventStore",
    "MemoryEventStore",
    "Event",
    "EventEnvelope",
    "EventStatus",
    "Skill",
]
