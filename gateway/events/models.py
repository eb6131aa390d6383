"""Event data model shared by channels, the store and agent clients."""

import base64
import json
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import (
    BaseModel,
    Field,
    SerializationInfo,
    field_serializer,
    model_serializer,
    model_validator,
)

ENVELOPE_VERSION = "1"

# How raw_body is carried in JSON output
ENCODING_JSON = "json"
ENCODING_TEXT = "text"
ENCODING_BASE64 = "base64"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def encode_raw_body(raw_body: bytes) -> tuple[Any, str]:
    """Return ``(value, encoding)`` for carrying a body inside a JSON document.

    Valid JSON bodies are embedded as JSON values, other UTF-8 bodies as
    strings, anything else as base64.
    """
    try:
        text = raw_body.decode("utf-8")
    except UnicodeDecodeError:
        return base64.b64encode(raw_body).decode("ascii"), ENCODING_BASE64
    try:
        return json.loads(text, parse_constant=_reject_constant), ENCODING_JSON
    except ValueError:
        return text, ENCODING_TEXT


def decode_raw_body(value: Any, encoding: str) -> bytes:
    """Reverse ``encode_raw_body``.

    JSON bodies come back in compact form, equal as JSON to the original.
    """
    if encoding == ENCODING_JSON:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    if not isinstance(value, str):
        raise ValueError(f"raw_body must be a string for encoding {encoding!r}")
    if encoding == ENCODING_TEXT:
        return value.encode("utf-8")
    if encoding == ENCODING_BASE64:
        return base64.b64decode(value, validate=True)
    raise ValueError(f"unknown raw_body encoding: {encoding!r}")


class EventStatus(str, Enum):
    RECEIVED = "received"
    FORWARDED = "forwarded"
    FAILED = "failed"
    COMPLETED = "completed"


class Skill(BaseModel):
    """A registered skill that can handle events."""
    name: str
    description: str = ""
    path: str = ""


class Event(BaseModel):
    """One ingested webhook request.

    Only ``status`` changes after creation, and only through the store's
    ``update_status``. In JSON, ``raw_body`` is paired with
    ``raw_body_encoding`` so the original bytes can be recovered.
    """
    id: UUID = Field(default_factory=uuid.uuid4)
    channel_id: str
    raw_body: bytes = b""
    headers: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=_utcnow)
    status: EventStatus = EventStatus.RECEIVED

    @model_validator(mode="before")
    @classmethod
    def _decode_raw_body(cls, data: Any) -> Any:
        if isinstance(data, dict) and "raw_body_encoding" in data:
            data = dict(data)
            encoding = data.pop("raw_body_encoding")
            data["raw_body"] = decode_raw_body(data.get("raw_body"), encoding)
        return data

    @field_serializer("raw_body", when_used="json")
    def _serialize_raw_body(self, raw_body: bytes) -> Any:
        return encode_raw_body(raw_body)[0]

    @model_serializer(mode="wrap")
    def _serialize(self, handler, info: SerializationInfo) -> dict[str, Any]:
        data = handler(self)
        if info.mode_is_json() and "raw_body" in data:
            data["raw_body_encoding"] = encode_raw_body(self.raw_body)[1]
        return data


class EventEnvelope(BaseModel):
    """An event wrapped with routing metadata for the agent backend."""
    version: str = ENVELOPE_VERSION
    event: Event
    channel: str
    skills: list[Skill] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def wrap(cls, event: Event, skills: list[Skill]) -> "EventEnvelope":
        return cls(event=event, channel=event.channel_id, skills=list(skills))
