"""Base channel interface for inbound webhooks."""

from abc import ABC, abstractmethod

from fastapi import Request

from gateway.events.models import Event

REDACTED = "[redacted]"
_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def canonical_header(name: str) -> str:
    """Title-case a header name: ``content-type`` -> ``Content-Type``."""
    return "-".join(part.capitalize() for part in name.split("-"))


def extract_headers(request: Request) -> dict[str, str]:
    """Copy request headers into event metadata, first value wins.

    Credentials are redacted so they are never retained with the event.
    """
    headers: dict[str, str] = {}
    for name, value in request.headers.items():
        key = canonical_header(name)
        if key in headers:
            continue
        headers[key] = REDACTED if name.lower() in _SENSITIVE_HEADERS else value
    return headers


class BaseChannel(ABC):
    """Abstract base class for inbound webhook channels."""

    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the config type this channel is built from."""
        pass

    @abstractmethod
    def validate_request(self, request: Request) -> None:
        """Raise ChannelError if the request must be rejected."""
        pass

    @abstractmethod
    async def parse_request(self, request: Request) -> Event:
        """Read the request and build a freshly received Event."""
        pass
