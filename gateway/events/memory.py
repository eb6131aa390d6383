"""In-memory event store backed by a fixed-size ring buffer."""

import threading
from uuid import UUID

from gateway.errors import DuplicateEventError, EventNotFoundError, InvalidCapacityError

from .base import BaseEventStore
from .models import Event, EventStatus


class MemoryEventStore(BaseEventStore):
    """Ring buffer of the most recent ``capacity`` events with an id index.

    ``save``, ``get`` and ``update_status`` are O(1). Once full, each save
    overwrites the oldest event and drops its id from the index. Buffer,
    index, head and count are guarded together by one lock, held for the
    whole of every operation. Events are copied on the way in and out.
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacityError(capacity)
        self._capacity = capacity
        self._buf: list[Event | None] = [None] * capacity
        self._index: dict[UUID, int] = {}
        self._head = 0  # next write position
        self._count = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def save(self, event: Event) -> None:
        stored = event.model_copy(deep=True)
        with self._lock:
            if stored.id in self._index:
                raise DuplicateEventError(stored.id)

            if self._count == self._capacity:
                oldest = self._buf[self._head]
                del self._index[oldest.id]

            self._buf[self._head] = stored
            self._index[stored.id] = self._head

            self._head = (self._head + 1) % self._capacity
            if self._count < self._capacity:
                self._count += 1

    def get(self, event_id: UUID) -> Event:
        with self._lock:
            slot = self._index.get(event_id)
            if slot is None:
                raise EventNotFoundError(event_id)
            return self._buf[slot].model_copy(deep=True)

    def list(self, limit: int, offset: int = 0) -> list[Event]:
        if limit <= 0:
            return []
        offset = max(offset, 0)

        with self._lock:
            end = min(offset + limit, self._count)
            # i-th most recent event lives at (head - 1 - i) mod capacity
            return [
                self._buf[(self._head - 1 - i) % self._capacity].model_copy(deep=True)
                for i in range(offset, end)
            ]

    def update_status(self, event_id: UUID, status: EventStatus) -> None:
        with self._lock:
            slot = self._index.get(event_id)
            if slot is None:
                raise EventNotFoundError(event_id)
            self._buf[slot].status = EventStatus(status)

    def count(self) -> int:
        with self._lock:
            return self._count
