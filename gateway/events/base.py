"""Base interface for event stores."""

from abc import ABC, abstractmethod
from uuid import UUID

from .models import Event, EventStatus


class BaseEventStore(ABC):
    """Abstract base class for event stores."""

    @property
    @abstractmethod
    def capacity(self) -> int:
        """Return the maximum number of events retained."""
        pass

    @abstractmethod
    def save(self, event: Event) -> None:
        """Store an event."""
        pass

    @abstractmethod
    def get(self, event_id: UUID) -> Event:
        """Return the event with this id, or raise EventNotFoundError."""
        pass

    @abstractmethod
    def list(self, limit: int, offset: int = 0) -> list[Event]:
        """Return up to ``limit`` events newest-first, skipping ``offset``."""
        pass

    @abstractmethod
    def update_status(self, event_id: UUID, status: EventStatus) -> None:
        """Change the status of a stored event, or raise EventNotFoundError."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of events currently stored."""
        pass
