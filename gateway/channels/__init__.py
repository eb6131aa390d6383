"""
Inbound Channels

Adapters that validate webhook requests and turn them into events.
"""

import logging

from gateway.config import ChannelConfig

from .base import BaseChannel
from .dummy import DummyChannel
from .grafana import GrafanaChannel

logger = logging.getLogger(__name__)

__all__ = ["BaseChannel", "DummyChannel", "GrafanaChannel", "build_channels"]


def build_channels(configs: list[ChannelConfig]) -> dict[str, BaseChannel]:
    """Build channels keyed by name; unknown types fall back to DummyChannel."""
    channels: dict[str, BaseChannel] = {}
    for cfg in configs:
        if cfg.type == "grafana":
            channels[cfg.name] = GrafanaChannel(cfg.name, cfg.auth)
        elif cfg.type == "dummy":
            channels[cfg.name] = DummyChannel(cfg.name)
        else:
            logger.warning(
                "Unknown channel type %r for %s, using dummy", cfg.type, cfg.name,
                extra={"channel": cfg.name},
            )
            channels[cfg.name] = DummyChannel(cfg.name)
    return channels
