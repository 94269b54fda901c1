"""SQLite content store: photos, videos, chapters and the settings singleton."""

import json
import logging
import sqlite3
import uuid
from typing import Any

from pydantic import BaseModel

from loveflix.config import Config
from loveflix.models import (
    ROW_MODELS,
    ChangeEvent,
    ChangeType,
    PhotoItem,
    SiteSettings,
    StoryChapter,
    Table,
    VideoItem,
)
from loveflix.realtime import RealtimeHub

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS gallery (
    id TEXT PRIMARY KEY,
    src TEXT NOT NULL DEFAULT '',
    caption TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS videos (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL DEFAULT '',
    description TEXT,
    thumbnail TEXT NOT NULL DEFAULT '',
    video_url TEXT NOT NULL DEFAULT '',
    category TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS chapters (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL DEFAULT '',
    text TEXT NOT NULL DEFAULT '',
    side TEXT NOT NULL DEFAULT 'left' CHECK (side IN ('left', 'right', 'center')),
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE TABLE IF NOT EXISTS site_settings (
    id INTEGER PRIMARY KEY,
    data TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_gallery_created ON gallery(created_at);
CREATE INDEX IF NOT EXISTS idx_videos_created ON videos(created_at);
CREATE INDEX IF NOT EXISTS idx_chapters_created ON chapters(created_at);
"""

# Columns a caller may write; id and created_at are assigned by the store.
WRITABLE_COLUMNS: dict[Table, tuple[str, ...]] = {
    Table.GALLERY: ("src", "caption"),
    Table.VIDEOS: ("title", "description", "thumbnail", "video_url", "category"),
    Table.CHAPTERS: ("title", "text", "side"),
}


def _collection(table: Table | str) -> Table:
    t = Table(table)
    if t not in WRITABLE_COLUMNS:
        raise ValueError(f"{t.value} is not a collection table")
    return t


class ContentDB:
    """SQLite wrapper exposing the hosted-store contract: select, insert, update, delete, upsert."""

    def __init__(self, config: Config, hub: RealtimeHub | None = None) -> None:
        self.db_path = config.resolved_db_path
        self.hub = hub
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call init_db() first.")
        return self._conn

    def init_db(self) -> None:
        """Create database and tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(SCHEMA_SQL)
        logger.info("Database initialized at %s", self.db_path)

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _publish(
        self,
        table: Table,
        change: ChangeType,
        new: dict[str, Any] | None = None,
        old: dict[str, Any] | None = None,
    ) -> None:
        if self.hub is not None:
            self.hub.publish(ChangeEvent(table=table, type=change, new=new, old=old))

    # --- Collection operations ---

    def select(self, table: Table | str) -> list[dict[str, Any]]:
        """All rows of a collection, oldest first."""
        t = _collection(table)
        rows = self.conn.execute(
            f"SELECT * FROM {t.value} ORDER BY created_at, rowid"
        ).fetchall()
        return [dict(r) for r in rows]

    def get_row(self, table: Table | str, row_id: str) -> dict[str, Any] | None:
        t = _collection(table)
        row = self.conn.execute(
            f"SELECT * FROM {t.value} WHERE id = ?", (row_id,)
        ).fetchone()
        return dict(row) if row else None

    def _clean(self, table: Table, values: dict[str, Any]) -> dict[str, Any]:
        unknown = set(values) - set(WRITABLE_COLUMNS[table])
        if unknown:
            raise ValueError(f"Unknown columns for {table.value}: {sorted(unknown)}")
        cleaned = dict(values)
        if "side" in cleaned and cleaned["side"] is not None:
            cleaned["side"] = getattr(cleaned["side"], "value", cleaned["side"])
        return cleaned

    def insert(self, table: Table | str, values: dict[str, Any] | None = None) -> dict[str, Any]:
        """Insert a row. The store assigns id and created_at. Returns the stored row."""
        t = _collection(table)
        cleaned = self._clean(t, values or {})
        row_id = uuid.uuid4().hex
        columns = ["id", *cleaned]
        placeholders = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO {t.value} ({', '.join(columns)}) VALUES ({placeholders})",
            [row_id, *cleaned.values()],
        )
        self.conn.commit()
        row = self.get_row(t, row_id)
        logger.debug("Inserted %s into %s", row_id, t.value)
        self._publish(t, ChangeType.INSERT, new=row)
        return row  # type: ignore[return-value]

    def update(self, table: Table | str, row_id: str, values: dict[str, Any]) -> dict[str, Any] | None:
        """Update a row by id. Returns the new row, or None if no such id."""
        t = _collection(table)
        cleaned = self._clean(t, values)
        old = self.get_row(t, row_id)
        if old is None:
            return None
        if not cleaned:
            return old
        assignments = ", ".join(f"{col} = ?" for col in cleaned)
        self.conn.execute(
            f"UPDATE {t.value} SET {assignments} WHERE id = ?",
            [*cleaned.values(), row_id],
        )
        self.conn.commit()
        new = self.get_row(t, row_id)
        self._publish(t, ChangeType.UPDATE, new=new, old=old)
        return new

    def delete(self, table: Table | str, row_id: str) -> bool:
        t = _collection(table)
        old = self.get_row(t, row_id)
        cursor = self.conn.execute(f"DELETE FROM {t.value} WHERE id = ?", (row_id,))
        self.conn.commit()
        if cursor.rowcount == 0:
            return False
        self._publish(t, ChangeType.DELETE, old=old)
        return True

    # --- Typed readers ---

    def _typed(self, table: Table) -> list[BaseModel]:
        model = ROW_MODELS[table]
        return [model(**r) for r in self.select(table)]

    def list_photos(self) -> list[PhotoItem]:
        return self._typed(Table.GALLERY)  # type: ignore[return-value]

    def list_videos(self) -> list[VideoItem]:
        return self._typed(Table.VIDEOS)  # type: ignore[return-value]

    def list_chapters(self) -> list[StoryChapter]:
        return self._typed(Table.CHAPTERS)  # type: ignore[return-value]

    # --- Settings singleton ---

    def get_settings(self) -> SiteSettings | None:
        row = self.conn.execute(
            "SELECT data FROM site_settings WHERE id = ?", (SETTINGS_ROW_ID,)
        ).fetchone()
        if not row:
            return None
        return SiteSettings(**json.loads(row["data"]))

    def upsert_settings(self, settings: SiteSettings) -> SiteSettings:
        """Write the settings row. Concurrent saves simply overwrite each other."""
        data = settings.model_dump(mode="json")
        existed = self.conn.execute(
            "SELECT 1 FROM site_settings WHERE id = ?", (SETTINGS_ROW_ID,)
        ).fetchone()
        self.conn.execute(
            """INSERT INTO site_settings (id, data) VALUES (?, ?)
               ON CONFLICT(id) DO UPDATE SET data = excluded.data,
                   updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now')""",
            (SETTINGS_ROW_ID, json.dumps(data, ensure_ascii=False)),
        )
        self.conn.commit()
        logger.info("Settings saved")
        self._publish(
            Table.SITE_SETTINGS,
            ChangeType.UPDATE if existed else ChangeType.INSERT,
            new={"id": SETTINGS_ROW_ID, "data": data},
        )
        return settings

    def counts(self) -> dict[str, int]:
        return {
            t.value: self.conn.execute(f"SELECT COUNT(*) FROM {t.value}").fetchone()[0]
            for t in WRITABLE_COLUMNS
        }
