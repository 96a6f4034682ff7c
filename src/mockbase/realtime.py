"""Realtime emulator: named channels with synchronous, gated event dispatch."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Literal

logger = logging.getLogger(__name__)

RealtimeCallback = Callable[[Any], None]
StatusCallback = Callable[[str], None]
SendStatus = Literal["ok", "timed out", "error"]


class ChannelState(str, Enum):
    CREATED = "created"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


def handler_key(event: str, filter_: dict[str, Any] | None) -> str:
    """Composite registration key: event type plus canonical JSON of the filter."""
    return f"{event}:{json.dumps(filter_ or {}, sort_keys=True, default=str)}"


class RealtimeChannel:
    """One named channel.

    State machine: created -> subscribed -> unsubscribed (terminal). Events are
    only dispatched while subscribed, synchronously and in registration order.
    """

    def __init__(self, name: str, config: dict[str, Any] | None = None) -> None:
        self.name = name
        self.config = dict(config or {})
        self.state = ChannelState.CREATED
        self._handlers: dict[str, list[RealtimeCallback]] = {}

    @property
    def subscribed(self) -> bool:
        return self.state is ChannelState.SUBSCRIBED

    def on(
        self, event: str, filter_: dict[str, Any] | None, callback: RealtimeCallback
    ) -> RealtimeChannel:
        self._handlers.setdefault(handler_key(event, filter_), []).append(callback)
        return self

    def subscribe(self, callback: StatusCallback | None = None) -> RealtimeChannel:
        if self.state is ChannelState.UNSUBSCRIBED:
            logger.debug("channel %s is closed; subscribe ignored", self.name)
            if callback is not None:
                callback("CLOSED")
            return self
        self.state = ChannelState.SUBSCRIBED
        logger.debug("channel %s subscribed", self.name)
        if callback is not None:
            callback("SUBSCRIBED")
        return self

    def unsubscribe(self) -> SendStatus:
        self.state = ChannelState.UNSUBSCRIBED
        self._handlers.clear()
        return "ok"

    def send(self, event: str, payload: Any) -> SendStatus:
        """Dispatch ``payload`` to callbacks registered for ``event`` with no filter."""
        if not self.subscribed:
            logger.debug("send on %s rejected: channel is %s", self.name, self.state.value)
            return "error"
        self._dispatch(handler_key(event, None), payload)
        return "ok"

    def trigger(self, event: str, filter_: dict[str, Any] | None, payload: Any) -> int:
        """Deliver a server-side event; returns the number of callbacks invoked."""
        if not self.subscribed:
            return 0
        return self._dispatch(handler_key(event, filter_), payload)

    def handler_count(self, event: str | None = None) -> int:
        if event is None:
            return sum(len(cbs) for cbs in self._handlers.values())
        prefix = f"{event}:"
        return sum(len(cbs) for key, cbs in self._handlers.items() if key.startswith(prefix))

    def _dispatch(self, key: str, payload: Any) -> int:
        callbacks = list(self._handlers.get(key, []))
        for callback in callbacks:
            callback(payload)
        return len(callbacks)

    def __repr__(self) -> str:
        return f"RealtimeChannel(name={self.name!r}, state={self.state.value!r})"


class RealtimeEmulator:
    """``client.realtime``: one channel per name."""

    def __init__(self) -> None:
        self._channels: dict[str, RealtimeChannel] = {}

    def channel(self, name: str, config: dict[str, Any] | None = None) -> RealtimeChannel:
        existing = self._channels.get(name)
        if existing is not None and existing.state is not ChannelState.UNSUBSCRIBED:
            return existing
        created = RealtimeChannel(name, config)
        self._channels[name] = created
        return created

    def get_channels(self) -> list[RealtimeChannel]:
        return list(self._channels.values())

    def remove_channel(self, channel: RealtimeChannel) -> SendStatus:
        if self._channels.get(channel.name) is not channel:
            channel.unsubscribe()
            return "error"
        channel.unsubscribe()
        del self._channels[channel.name]
        return "ok"

    def remove_all_channels(self) -> list[SendStatus]:
        statuses = [ch.unsubscribe() for ch in self._channels.values()]
        self._channels.clear()
        return statuses

    def trigger_event(
        self, channel_name: str, event: str, filter_: dict[str, Any] | None, payload: Any
    ) -> int:
        """Test hook: inject a server-pushed event, bypassing ``send``."""
        channel = self._channels.get(channel_name)
        if channel is None:
            return 0
        delivered = channel.trigger(event, filter_, payload)
        logger.debug("trigger %s %s -> %d callback(s)", channel_name, event, delivered)
        return delivered

    def reset(self) -> None:
        self.remove_all_channels()
