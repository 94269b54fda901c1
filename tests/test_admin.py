"""Tests for the admin editor."""

import io
import sqlite3
from unittest.mock import MagicMock

import pytest
from PIL import Image
from pydantic import ValidationError

from loveflix.admin import (
    EMPTY_MESSAGES,
    SAVE_FAILED_PREFIX,
    SAVE_OK_MESSAGE,
    UPLOAD_FAILED_PREFIX,
    AdminEditor,
)
from loveflix.models import DEFAULT_CATEGORY, ChapterSide, SiteSettings, Table


def _png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 3), "red").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def notices():
    return []


@pytest.fixture()
def editor(adapter, populated_db, storage, notices):
    return AdminEditor(adapter, populated_db, storage, notices.append)


class TestTabs:
    def test_select_tab(self, editor):
        editor.select_tab("chapters")
        assert editor.active_tab == "chapters"
        with pytest.raises(ValueError):
            editor.select_tab("music")

    def test_empty_message(self, editor, adapter):
        assert editor.empty_message("photos") is None
        adapter.photos = []
        assert editor.empty_message("photos") == EMPTY_MESSAGES["photos"]
        assert editor.empty_message("settings") is None

    def test_close(self, adapter, populated_db, storage):
        closed = []
        ed = AdminEditor(adapter, populated_db, storage, print, on_close=lambda: closed.append(1))
        ed.close()
        assert closed == [1]


class TestCollections:
    def test_add_photo(self, editor, adapter, populated_db):
        new_id = editor.add_photo("https://cdn.test/x.jpg", "hi")
        assert new_id in [p.id for p in adapter.photos]
        assert populated_db.get_row(Table.GALLERY, new_id)["caption"] == "hi"

    def test_remove_photo(self, editor, adapter):
        target = adapter.photos[1].id
        assert editor.remove_photo(target)
        assert target not in [p.id for p in adapter.photos]
        assert len(adapter.photos) == 2

    def test_remove_photo_issues_one_delete(self, adapter, populated_db, storage, notices, monkeypatch):
        calls = []
        real_delete = populated_db.delete

        def delete(table, row_id):
            calls.append((table, row_id))
            return real_delete(table, row_id)

        monkeypatch.setattr(populated_db, "delete", delete)
        ed = AdminEditor(adapter, populated_db, storage, notices.append)
        target = adapter.photos[0].id
        assert ed.remove_photo(target)
        assert calls == [(Table.GALLERY, target)]
        assert target not in [p.id for p in adapter.photos]
        assert len(adapter.photos) == 2

    def test_remove_issues_one_delete(self, adapter, storage, notices):
        db = MagicMock()
        db.delete.return_value = True
        ed = AdminEditor(adapter, db, storage, notices.append)
        target = adapter.chapters[0].id
        assert ed.remove_chapter(target)
        db.delete.assert_called_once_with(Table.CHAPTERS, target)
        db.insert.assert_not_called()
        db.update.assert_not_called()
        assert target not in [c.id for c in adapter.chapters]

    def test_set_caption(self, editor, adapter):
        target = adapter.photos[0].id
        assert editor.set_photo_caption(target, "sunset")
        assert adapter.photos[0].caption == "sunset"

    def test_update_missing_row(self, editor):
        assert not editor.set_photo_caption("missing", "x")

    def test_add_video_defaults(self, editor, populated_db):
        new_id = editor.add_video()
        row = populated_db.get_row(Table.VIDEOS, new_id)
        assert row["category"] == DEFAULT_CATEGORY
        assert row["title"] == ""

    def test_update_video(self, editor, adapter):
        target = adapter.videos[1].id
        assert editor.update_video(target, title="Party", category="Fun")
        video = next(v for v in adapter.videos if v.id == target)
        assert (video.title, video.category) == ("Party", "Fun")

    def test_update_video_unknown_field(self, editor, adapter):
        with pytest.raises(ValueError):
            editor.update_video(adapter.videos[0].id, rating=5)

    def test_chapter_crud(self, editor, adapter):
        new_id = editor.add_chapter("Third", "More.", "right")
        chapter = adapter.chapters[-1]
        assert (chapter.id, chapter.side) == (new_id, ChapterSide.RIGHT)
        assert editor.update_chapter(new_id, side="center")
        assert adapter.chapters[-1].side == ChapterSide.CENTER
        assert editor.remove_chapter(new_id)
        assert len(adapter.chapters) == 2

    def test_bad_side(self, editor):
        with pytest.raises(ValueError):
            editor.add_chapter("x", "y", "top")

    def test_store_error_is_reported_as_failure(self, adapter, storage, notices):
        db = MagicMock()
        db.insert.side_effect = sqlite3.OperationalError("locked")
        ed = AdminEditor(adapter, db, storage, notices.append)
        assert ed.add_photo("a.jpg") is None
        assert len(adapter.photos) == 3


class TestUploads:
    def test_photo_upload_sets_src(self, editor, adapter):
        target = adapter.photos[0].id
        url = editor.upload_photo_image(target, "IMG_1.PNG", _png())
        assert url.startswith("https://cdn.test/public/memories/")
        assert url.endswith(".png")
        assert adapter.photos[0].src == url
        assert not editor.is_uploading

    def test_bad_image_notifies(self, editor, adapter, notices):
        target = adapter.photos[0].id
        before = adapter.photos[0].src
        assert editor.upload_photo_image(target, "fake.jpg", b"not an image") is None
        assert notices[0].startswith(UPLOAD_FAILED_PREFIX)
        assert adapter.photos[0].src == before
        assert not editor.is_uploading

    def test_video_upload(self, editor, adapter):
        target = adapter.videos[0].id
        url = editor.upload_video_file(target, "clip.mp4", b"\x00\x00\x00\x18ftypmp42")
        assert "/videos/" in url
        assert adapter.videos[0].video_url == url

    def test_video_thumbnail_upload(self, editor, adapter):
        target = adapter.videos[1].id
        url = editor.upload_video_thumbnail(target, "thumb.png", _png())
        assert "/memories/" in url
        video = next(v for v in adapter.videos if v.id == target)
        assert video.thumbnail == url


class TestSettings:
    def test_draft_not_written_until_save(self, editor, populated_db, adapter):
        editor.edit_settings(name1="Zed")
        assert populated_db.get_settings().name1 == "Ann"
        assert adapter.settings.name1 == "Ann"

    def test_save(self, adapter, populated_db, storage, notices):
        saved = []
        ed = AdminEditor(adapter, populated_db, storage, notices.append, on_saved=saved.append)
        ed.edit_settings(view_password="new", start_date="2024-02-14")
        assert ed.save_settings()
        assert notices == [SAVE_OK_MESSAGE]
        assert populated_db.get_settings().view_password == "new"
        assert adapter.settings.start_date == "2024-02-14"
        assert saved[0].view_password == "new"

    def test_save_failure(self, adapter, storage, notices):
        db = MagicMock()
        db.upsert_settings.side_effect = sqlite3.OperationalError("readonly")
        ed = AdminEditor(adapter, db, storage, notices.append)
        ed.edit_settings(name1="X")
        assert not ed.save_settings()
        assert notices == [f"{SAVE_FAILED_PREFIX}readonly"]
        assert adapter.settings.name1 == "Ann"
        assert not ed.is_uploading

    def test_draft_is_a_copy(self, editor, adapter):
        editor.draft.profiles[0].name = "Changed"
        assert adapter.settings.profiles[0].name != "Changed"

    def test_saved_settings_validate(self, editor):
        editor.edit_settings(profiles=[{"name": "Solo"}])
        assert editor.save_settings()
        assert isinstance(editor.content.settings, SiteSettings)
        assert editor.content.settings.profiles[0].name == "Solo"

    def test_bad_start_date_refused(self, editor, populated_db, adapter, notices):
        editor.edit_settings(start_date="soon")
        assert not editor.save_settings()
        assert len(notices) == 1
        assert notices[0].startswith(SAVE_FAILED_PREFIX)
        assert "Invalid start date" in notices[0]
        assert populated_db.get_settings().start_date == "2025-12-02"
        assert adapter.settings.start_date == "2025-12-02"
        assert not editor.is_uploading


class TestSiteSettingsValidation:
    def test_start_date_must_parse(self):
        with pytest.raises(ValidationError):
            SiteSettings(start_date="soon")

    def test_start_date_kept_as_given(self):
        assert SiteSettings(start_date="2024-02-14").start_date == "2024-02-14"
        assert SiteSettings(start_date="2024-02-14T18:30:00Z").start_date == "2024-02-14T18:30:00Z"
