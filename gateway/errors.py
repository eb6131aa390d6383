"""Gateway error types and shared error-parsing utilities."""

import json
from uuid import UUID


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigError(GatewayError):
    """Configuration could not be loaded or failed validation."""


# --- Event store ---


class StoreError(GatewayError):
    """Base class for event store errors."""


class InvalidCapacityError(StoreError, ValueError):
    def __init__(self, capacity: object):
        self.capacity = capacity
        super().__init__(f"capacity must be greater than zero, got {capacity!r}")


class EventNotFoundError(StoreError, KeyError):
    def __init__(self, event_id: UUID):
        self.event_id = event_id
        super().__init__(f"event not found: {event_id}")

    def __str__(self) -> str:
        # KeyError quotes its argument by default
        return self.args[0]


class DuplicateEventError(StoreError):
    """An event with the same id is already retained by the store."""

    def __init__(self, event_id: UUID):
        self.event_id = event_id
        super().__init__(f"event already stored: {event_id}")


# --- Channels and agents ---


class ChannelError(GatewayError):
    """An inbound request was rejected by its channel."""

    def __init__(self, message: str, status_code: int = 400):
        self.status_code = status_code
        super().__init__(message)


class AgentError(GatewayError):
    """Forwarding an envelope to the agent backend failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def parse_agent_error(response_text: str) -> str:
    """Extract a readable message from an agent backend error response.

    Backends return JSON like {"error": "..."}, {"error": {"message": "..."}}
    or FastAPI-style {"detail": "..."}. Returns the message when parseable,
    raw text otherwise.
    """
    try:
        body = json.loads(response_text)
    except ValueError:
        return response_text
    if not isinstance(body, dict):
        return response_text

    err = body.get("error")
    if isinstance(err, dict):
        msg = err.get("message", "")
        code = err.get("code", "")
        if msg:
            return f"{code}: {msg}" if code else msg
    elif isinstance(err, str) and err:
        return err

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    return response_text
