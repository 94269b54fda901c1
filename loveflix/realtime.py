"""In-process change notification: channels of row-level events per table."""

import logging
from collections import defaultdict
from typing import Callable

from loveflix.models import ChangeEvent, Table

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[ChangeEvent], None]


class Channel:
    """A named subscription. Register handlers with on(), then subscribe()."""

    def __init__(self, hub: "RealtimeHub", name: str) -> None:
        self.hub = hub
        self.name = name
        self.subscribed = False
        self._handlers: dict[Table, list[ChangeCallback]] = defaultdict(list)

    def on(self, table: Table | str, callback: ChangeCallback) -> "Channel":
        self._handlers[Table(table)].append(callback)
        return self

    @property
    def tables(self) -> set[Table]:
        return set(self._handlers)

    def subscribe(self) -> "Channel":
        self.subscribed = True
        logger.debug("Channel %s subscribed to %s", self.name, sorted(t.value for t in self.tables))
        return self

    def unsubscribe(self) -> None:
        self.subscribed = False

    def dispatch(self, event: ChangeEvent) -> None:
        if not self.subscribed:
            return
        for callback in self._handlers.get(event.table, []):
            try:
                callback(event)
            except Exception:
                logger.exception("Change handler failed on %s for %s", self.name, event.table.value)


class RealtimeHub:
    """Broker between the store's committed writes and open channels."""

    def __init__(self) -> None:
        self._channels: list[Channel] = []

    def channel(self, name: str) -> Channel:
        ch = Channel(self, name)
        self._channels.append(ch)
        return ch

    def remove_channel(self, channel: Channel) -> bool:
        """Release a channel. Returns False if it was already released."""
        if channel not in self._channels:
            return False
        channel.unsubscribe()
        self._channels.remove(channel)
        logger.debug("Channel %s removed", channel.name)
        return True

    @property
    def channels(self) -> list[Channel]:
        return list(self._channels)

    def publish(self, event: ChangeEvent) -> None:
        for ch in list(self._channels):
            ch.dispatch(event)
