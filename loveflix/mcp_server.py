#!/usr/bin/env python3
"""Loveflix MCP server: read and curate the memories."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from loveflix.config import load_config
from loveflix.db import ContentDB
from loveflix.duration import calc_duration
from loveflix.models import ChapterSide, SiteSettings, Table

mcp = FastMCP("loveflix")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_db: ContentDB | None = None
_config = None

_TABLES = {"photos": Table.GALLERY, "videos": Table.VIDEOS, "chapters": Table.CHAPTERS}


def _get_config():
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_db() -> ContentDB:
    global _db
    if _db is None:
        _db = ContentDB(_get_config())
        _db.init_db()
    return _db


def _settings() -> SiteSettings:
    try:
        return _get_db().get_settings() or SiteSettings()
    except ValueError as e:
        logger.warning("Stored settings are invalid, using defaults: %s", e)
        return SiteSettings()


@mcp.tool()
def get_duration(at: Optional[str] = None) -> str:
    """Time together since the start date. Optional ISO timestamp to evaluate at."""
    from datetime import datetime

    try:
        now = datetime.fromisoformat(at) if at else None
        d = calc_duration(_settings().start_date, now)
        return json.dumps(d.model_dump())
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_overview() -> str:
    """Couple names, start date and how many photos, videos and chapters exist."""
    s = _settings()
    return json.dumps({
        "names": [s.name1, s.name2],
        "start_date": s.start_date,
        "counts": _get_db().counts(),
    }, ensure_ascii=False)


@mcp.tool()
def list_photos() -> str:
    """List gallery photos, oldest first."""
    return json.dumps([p.model_dump() for p in _get_db().list_photos()], ensure_ascii=False)


@mcp.tool()
def list_videos() -> str:
    """List videos, oldest first."""
    return json.dumps([v.model_dump() for v in _get_db().list_videos()], ensure_ascii=False)


@mcp.tool()
def list_chapters() -> str:
    """List story chapters in timeline order."""
    return json.dumps([c.model_dump(mode="json") for c in _get_db().list_chapters()], ensure_ascii=False)


@mcp.tool()
def add_chapter(title: str, text: str, side: str = "left") -> str:
    """Append a story chapter. side is left, right or center."""
    try:
        row = _get_db().insert(Table.CHAPTERS, {"title": title, "text": text, "side": ChapterSide(side)})
        return json.dumps(row, ensure_ascii=False)
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def remove_item(collection: str, item_id: str) -> str:
    """Delete a photo, video or chapter by id. collection is photos, videos or chapters."""
    table = _TABLES.get(collection)
    if table is None:
        return json.dumps({"error": f"Unknown collection {collection!r}"})
    if not _get_db().delete(table, item_id):
        return json.dumps({"error": f"No {collection} row with id {item_id}"})
    return json.dumps({"removed": item_id})


if __name__ == "__main__":
    mcp.run()
