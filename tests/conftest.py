"""Shared test fixtures for loveflix tests."""

import pytest

from loveflix.config import Config, FeatureFlags, StorageConfig
from loveflix.content import ContentStoreAdapter
from loveflix.db import ContentDB
from loveflix.models import ChapterSide, SiteSettings, Table
from loveflix.realtime import RealtimeHub
from loveflix.scheduling import ManualScheduler
from loveflix.storage import MediaStorage

# 2026-01-03T00:00:00Z
JAN_3_2026 = 1767398400.0


@pytest.fixture()
def config(tmp_path):
    return Config(
        db_path=str(tmp_path / "test.db"),
        cache_path=str(tmp_path / "cache.json"),
        storage=StorageConfig(root_dir=str(tmp_path / "storage"), public_base_url="https://cdn.test/public"),
        features=FeatureFlags(music=True, admin=True, local_cache=False),
    )


@pytest.fixture()
def hub():
    return RealtimeHub()


@pytest.fixture()
def tmp_db(config, hub):
    """A ContentDB backed by a temp file and wired to the hub."""
    db = ContentDB(config, hub)
    db.init_db()
    yield db
    db.close()


@pytest.fixture()
def populated_db(tmp_db):
    """Store with settings, 3 photos, 3 videos in 2 categories and 2 chapters."""
    db = tmp_db
    db.upsert_settings(SiteSettings(
        view_password="love",
        admin_password="admin",
        start_date="2025-12-02",
        music_url="https://cdn.test/song.mp3",
        name1="Ann",
        name2="Ben",
    ))
    db.insert(Table.GALLERY, {"src": "https://cdn.test/a.jpg", "caption": "beach"})
    db.insert(Table.GALLERY, {"src": "https://cdn.test/b.jpg", "caption": ""})
    db.insert(Table.GALLERY, {"src": "https://cdn.test/c.jpg", "caption": "dinner"})
    db.insert(Table.VIDEOS, {"title": "Trip", "thumbnail": "https://cdn.test/t1.jpg",
                             "video_url": "https://cdn.test/v1.mp4", "category": "Travel"})
    db.insert(Table.VIDEOS, {"title": "Birthday", "thumbnail": "", "video_url": "https://cdn.test/v2.mp4"})
    db.insert(Table.VIDEOS, {"title": "Road", "thumbnail": "", "video_url": "https://cdn.test/v3.mp4",
                             "category": "Travel"})
    db.insert(Table.CHAPTERS, {"title": "Hello", "text": "We met.", "side": ChapterSide.LEFT})
    db.insert(Table.CHAPTERS, {"title": "Later", "text": "We stayed.", "side": ChapterSide.CENTER})
    return db


@pytest.fixture()
def scheduler():
    return ManualScheduler(start=JAN_3_2026)


@pytest.fixture()
def storage(config):
    return MediaStorage(config)


@pytest.fixture()
def adapter(populated_db, hub, config):
    content = ContentStoreAdapter(populated_db, hub, config)
    content.mount()
    yield content
    content.unmount()
