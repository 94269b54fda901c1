"""Content store adapter: local state for settings, photos, videos and chapters.

Change notifications are invalidation signals only. A settings event carries
the new row and is applied directly; any other table is re-read in full and
local state is replaced (on_remote_change(table) -> reload(table)). The
adapter only talks to the store and a channel, so any pub/sub transport that
delivers ChangeEvents can stand in for the in-process hub.
"""

import logging
from typing import Any, Callable

from pydantic import ValidationError

from loveflix.cache import CHAPTERS_KEY, PHOTOS_KEY, SETTINGS_KEY, VIDEOS_KEY, LocalCache
from loveflix.config import Config
from loveflix.db import ContentDB
from loveflix.models import (
    DEFAULT_CHAPTERS,
    DEFAULT_SETTINGS,
    ROW_MODELS,
    ChangeEvent,
    PhotoItem,
    SiteSettings,
    StoryChapter,
    Table,
    VideoItem,
)
from loveflix.realtime import Channel, RealtimeHub

logger = logging.getLogger(__name__)

COLLECTIONS = (Table.GALLERY, Table.VIDEOS, Table.CHAPTERS)

CACHE_KEYS = {
    Table.SITE_SETTINGS: SETTINGS_KEY,
    Table.GALLERY: PHOTOS_KEY,
    Table.VIDEOS: VIDEOS_KEY,
    Table.CHAPTERS: CHAPTERS_KEY,
}

_ATTRS = {
    Table.GALLERY: "photos",
    Table.VIDEOS: "videos",
    Table.CHAPTERS: "chapters",
}


def default_items(table: Table) -> list[Any]:
    if table == Table.CHAPTERS:
        return [c.model_copy() for c in DEFAULT_CHAPTERS]
    return []


class ContentStoreAdapter:
    """Reads the four collections on mount and keeps them in sync with the store."""

    def __init__(
        self,
        db: ContentDB,
        hub: RealtimeHub,
        config: Config | None = None,
        cache: LocalCache | None = None,
    ) -> None:
        self.db = db
        self.hub = hub
        self.config = config or Config()
        self.cache = cache if self.config.features.local_cache else None

        self.settings: SiteSettings = DEFAULT_SETTINGS.model_copy(deep=True)
        self.photos: list[PhotoItem] = []
        self.videos: list[VideoItem] = []
        self.chapters: list[StoryChapter] = default_items(Table.CHAPTERS)
        self.loaded = False

        self._seeded: set[Table] = set()
        self._channel: Channel | None = None
        self._listeners: list[Callable[[Table], None]] = []

    # --- Listeners ---

    def subscribe(self, listener: Callable[[Table], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Table], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _changed(self, table: Table) -> None:
        if self.cache is not None:
            self._write_cache(table)
        for listener in list(self._listeners):
            listener(table)

    # --- Lifecycle ---

    def mount(self) -> None:
        if self.cache is not None:
            self._seed_from_cache()
        self.load_all()
        self._channel = self.hub.channel(self.config.realtime_channel)
        for table in (Table.SITE_SETTINGS, *COLLECTIONS):
            self._channel.on(table, self.on_remote_change)
        self._channel.subscribe()

    def unmount(self) -> None:
        if self._channel is None:
            return
        self.hub.remove_channel(self._channel)
        self._channel = None

    @property
    def subscribed(self) -> bool:
        return self._channel is not None

    # --- Reads ---

    def load_all(self) -> None:
        """Initial load. Each read is independent.

        An empty or failed read falls back to the built-in default, except that
        a failed read keeps whatever the local cache supplied.
        """
        self._load_settings()
        for table in COLLECTIONS:
            try:
                items = self._read(table)
            except Exception as e:
                logger.warning("Initial read of %s failed: %s", table.value, e)
                if table in self._seeded:
                    continue
                items = []
            self._set(table, items or default_items(table))
        self.loaded = True

    def _load_settings(self) -> None:
        try:
            settings = self.db.get_settings()
        except Exception as e:
            logger.warning("Initial read of site_settings failed: %s", e)
            if Table.SITE_SETTINGS in self._seeded:
                return
            settings = None
        self.settings = settings or DEFAULT_SETTINGS.model_copy(deep=True)
        self._changed(Table.SITE_SETTINGS)

    def _read(self, table: Table) -> list[Any]:
        model = ROW_MODELS[table]
        return [model(**row) for row in self.db.select(table)]

    def reload(self, table: Table) -> bool:
        """Re-read a whole table and replace local state. Keeps last-known state on error."""
        table = Table(table)
        if table == Table.SITE_SETTINGS:
            try:
                settings = self.db.get_settings()
            except Exception as e:
                logger.warning("Reload of site_settings failed: %s", e)
                return False
            if settings is not None:
                self.settings = settings
                self._changed(table)
            return True
        try:
            items = self._read(table)
        except Exception as e:
            logger.warning("Reload of %s failed: %s", table.value, e)
            return False
        self._set(table, items)
        return True

    def on_remote_change(self, event: ChangeEvent) -> None:
        if event.table == Table.SITE_SETTINGS:
            data = (event.new or {}).get("data")
            if data is None:
                return
            try:
                self.settings = SiteSettings(**data)
            except ValidationError as e:
                logger.warning("Ignoring malformed settings push: %s", e)
                return
            self._changed(Table.SITE_SETTINGS)
            return
        self.reload(event.table)

    # --- Local mirror for admin edits ---

    def _set(self, table: Table, items: list[Any]) -> None:
        if table == Table.GALLERY and self.config.features.photos_newest_first:
            items = list(reversed(items))
        setattr(self, _ATTRS[table], list(items))
        self._changed(table)

    def items(self, table: Table) -> list[Any]:
        return getattr(self, _ATTRS[Table(table)])

    def mirror_upsert(self, table: Table, row: dict[str, Any]) -> None:
        """Apply a just-written row locally ahead of the authoritative re-read."""
        table = Table(table)
        item = ROW_MODELS[table](**row)
        current = self.items(table)
        for i, existing in enumerate(current):
            if existing.id == item.id:
                current = [*current[:i], item, *current[i + 1:]]
                break
        else:
            if table == Table.GALLERY and self.config.features.photos_newest_first:
                current = [item, *current]
            else:
                current = [*current, item]
        setattr(self, _ATTRS[table], current)
        self._changed(table)

    def mirror_remove(self, table: Table, row_id: str) -> None:
        table = Table(table)
        setattr(self, _ATTRS[table], [i for i in self.items(table) if i.id != row_id])
        self._changed(table)

    def apply_settings(self, settings: SiteSettings) -> None:
        self.settings = settings
        self._changed(Table.SITE_SETTINGS)

    # --- Local cache ---

    def _seed_from_cache(self) -> None:
        if self.cache is None:
            return
        raw = self.cache.get(SETTINGS_KEY)
        if raw:
            try:
                self.settings = SiteSettings(**raw)
                self._seeded.add(Table.SITE_SETTINGS)
            except (TypeError, ValidationError):
                logger.warning("Ignoring cached settings")
        for table in COLLECTIONS:
            rows = self.cache.get(CACHE_KEYS[table])
            if rows is None:
                continue
            try:
                setattr(self, _ATTRS[table], [ROW_MODELS[table](**r) for r in rows])
                self._seeded.add(table)
            except (TypeError, ValidationError):
                logger.warning("Ignoring cached %s", table.value)

    def _write_cache(self, table: Table) -> None:
        if self.cache is None:
            return
        if table == Table.SITE_SETTINGS:
            self.cache.set(SETTINGS_KEY, self.settings.model_dump(mode="json"))
        else:
            self.cache.set(CACHE_KEYS[table], [i.model_dump(mode="json") for i in self.items(table)])
