"""Admin editor: explicit per-action writes against the store, mirrored locally.

Every intent issues exactly one store call. Collection edits are mirrored
into the adapter right away; the change notification that follows triggers
the authoritative re-read.
"""

import logging
import sqlite3
from typing import Any, Callable

from loveflix.content import ContentStoreAdapter
from loveflix.db import ContentDB
from loveflix.models import DEFAULT_CATEGORY, ChapterSide, SiteSettings, Table
from loveflix.storage import MEMORIES_BUCKET, VIDEOS_BUCKET, MediaStorage, UploadError

logger = logging.getLogger(__name__)

TABS = ("photos", "videos", "chapters", "settings")

EMPTY_MESSAGES = {
    "photos": "ยังไม่มีรูปภาพ กดเพิ่มรูปเพื่อเริ่มต้น",
    "videos": "ยังไม่มีวิดีโอ กดเพิ่มวิดีโอเพื่อเริ่มต้น",
    "chapters": "ยังไม่มีเรื่องราว กดเพิ่มบทเพื่อเริ่มเล่า",
}

SAVE_OK_MESSAGE = "บันทึกการตั้งค่าเรียบร้อยแล้ว!"
SAVE_FAILED_PREFIX = "เกิดข้อผิดพลาด: "
UPLOAD_FAILED_PREFIX = "Upload failed: "

SIDE_LABELS = {
    ChapterSide.LEFT: "ซ้าย",
    ChapterSide.RIGHT: "ขวา",
    ChapterSide.CENTER: "กลาง",
}


class AdminEditor:
    """Tabbed editor over photos, videos, chapters and settings."""

    def __init__(
        self,
        content: ContentStoreAdapter,
        db: ContentDB,
        storage: MediaStorage,
        notify: Callable[[str], None],
        on_saved: Callable[[SiteSettings], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.content = content
        self.db = db
        self.storage = storage
        self.notify = notify
        self.on_saved = on_saved
        self.on_close = on_close
        self.active_tab = "photos"
        self.draft: SiteSettings = content.settings.model_copy(deep=True)
        self.is_uploading = False

    def select_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab {tab!r}")
        self.active_tab = tab

    def empty_message(self, tab: str | None = None) -> str | None:
        tab = tab or self.active_tab
        items = {
            "photos": self.content.photos,
            "videos": self.content.videos,
            "chapters": self.content.chapters,
        }.get(tab)
        if items is None or items:
            return None
        return EMPTY_MESSAGES[tab]

    def close(self) -> None:
        if self.on_close:
            self.on_close()

    # --- Generic writes ---

    def _insert(self, table: Table, values: dict[str, Any]) -> str | None:
        try:
            row = self.db.insert(table, values)
        except sqlite3.Error as e:
            logger.warning("Insert into %s failed: %s", table.value, e)
            return None
        self.content.mirror_upsert(table, row)
        return row["id"]

    def _update(self, table: Table, row_id: str, values: dict[str, Any]) -> bool:
        try:
            row = self.db.update(table, row_id, values)
        except sqlite3.Error as e:
            logger.warning("Update of %s/%s failed: %s", table.value, row_id, e)
            return False
        if row is None:
            return False
        self.content.mirror_upsert(table, row)
        return True

    def _remove(self, table: Table, row_id: str) -> bool:
        try:
            removed = self.db.delete(table, row_id)
        except sqlite3.Error as e:
            logger.warning("Delete of %s/%s failed: %s", table.value, row_id, e)
            return False
        self.content.mirror_remove(table, row_id)
        return removed

    def _upload(self, bucket: str, filename: str, data: bytes) -> str | None:
        self.is_uploading = True
        try:
            return self.storage.upload_file(bucket, filename, data)
        except UploadError as e:
            logger.warning("Upload to %s failed: %s", bucket, e)
            self.notify(f"{UPLOAD_FAILED_PREFIX}{e}")
            return None
        finally:
            self.is_uploading = False

    # --- Photos ---

    def add_photo(self, src: str = "", caption: str = "") -> str | None:
        return self._insert(Table.GALLERY, {"src": src, "caption": caption})

    def remove_photo(self, photo_id: str) -> bool:
        return self._remove(Table.GALLERY, photo_id)

    def set_photo_caption(self, photo_id: str, caption: str) -> bool:
        return self._update(Table.GALLERY, photo_id, {"caption": caption})

    def upload_photo_image(self, photo_id: str, filename: str, data: bytes) -> str | None:
        url = self._upload(MEMORIES_BUCKET, filename, data)
        if url and self._update(Table.GALLERY, photo_id, {"src": url}):
            return url
        return None

    # --- Videos ---

    def add_video(self) -> str | None:
        return self._insert(Table.VIDEOS, {
            "title": "",
            "description": "",
            "thumbnail": "",
            "video_url": "",
            "category": DEFAULT_CATEGORY,
        })

    def update_video(self, video_id: str, **fields: Any) -> bool:
        return self._update(Table.VIDEOS, video_id, fields)

    def remove_video(self, video_id: str) -> bool:
        return self._remove(Table.VIDEOS, video_id)

    def upload_video_file(self, video_id: str, filename: str, data: bytes) -> str | None:
        url = self._upload(VIDEOS_BUCKET, filename, data)
        if url and self._update(Table.VIDEOS, video_id, {"video_url": url}):
            return url
        return None

    def upload_video_thumbnail(self, video_id: str, filename: str, data: bytes) -> str | None:
        url = self._upload(MEMORIES_BUCKET, filename, data)
        if url and self._update(Table.VIDEOS, video_id, {"thumbnail": url}):
            return url
        return None

    # --- Chapters ---

    def add_chapter(self, title: str = "", text: str = "", side: ChapterSide | str = ChapterSide.LEFT) -> str | None:
        return self._insert(Table.CHAPTERS, {"title": title, "text": text, "side": ChapterSide(side)})

    def update_chapter(self, chapter_id: str, **fields: Any) -> bool:
        if "side" in fields:
            fields["side"] = ChapterSide(fields["side"])
        return self._update(Table.CHAPTERS, chapter_id, fields)

    def remove_chapter(self, chapter_id: str) -> bool:
        return self._remove(Table.CHAPTERS, chapter_id)

    # --- Settings ---

    def edit_settings(self, **fields: Any) -> SiteSettings:
        """Change the local draft. Nothing is written or validated until save_settings()."""
        self.draft = self.draft.model_copy(update=fields)
        return self.draft

    def save_settings(self) -> bool:
        self.is_uploading = True
        try:
            settings = SiteSettings.model_validate(self.draft.model_dump(warnings=False))
            self.db.upsert_settings(settings)
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Saving settings failed: %s", e)
            self.notify(f"{SAVE_FAILED_PREFIX}{e}")
            return False
        finally:
            self.is_uploading = False
        self.notify(SAVE_OK_MESSAGE)
        self.content.apply_settings(settings)
        if self.on_saved:
            self.on_saved(settings)
        return True
