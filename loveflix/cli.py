"""CLI entry point for loveflix."""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from loveflix.config import load_config
from loveflix.db import ContentDB
from loveflix.duration import DURATION_LABELS, calc_duration
from loveflix.gate import match_password
from loveflix.models import ChapterSide, Phase, SiteSettings, Table
from loveflix.realtime import RealtimeHub
from loveflix.scheduling import ManualScheduler
from loveflix.storage import BUCKETS, MediaStorage, UploadError

logger = logging.getLogger(__name__)

SETTINGS_KEYS = (
    "view_password", "admin_password", "start_date", "music_url", "video_url", "name1", "name2",
)
PROFILE_FIELDS = ("name", "avatar", "color")


def _apply_setting(settings: SiteSettings, key: str, value: str) -> SiteSettings:
    """Set a top-level field, or profileN.field for N in 1..2."""
    if key in SETTINGS_KEYS:
        return SiteSettings(**{**settings.model_dump(), key: value})
    if key.startswith("profile") and "." in key:
        head, field = key.split(".", 1)
        try:
            index = int(head[len("profile"):]) - 1
        except ValueError:
            index = -1
        if field in PROFILE_FIELDS and 0 <= index < len(settings.profiles):
            data = settings.model_dump()
            data["profiles"][index][field] = value
            return SiteSettings(**data)
    raise ValueError(f"Unknown setting {key!r}")


def _render(config, db: ContentDB, hub: RealtimeHub, output: Path, phase: str) -> Path:
    from loveflix.output.html import write_snapshot
    from loveflix.page import SurprisePage

    scheduler = ManualScheduler(start=datetime.now(timezone.utc).timestamp())
    page = SurprisePage(config, db, hub, scheduler, MediaStorage(config))
    page.mount()
    try:
        if phase != Phase.ENTRANCE.value:
            page.phases.enter()
            scheduler.advance(10)
        if phase == Phase.NETFLIX.value:
            page.phases.continue_to_netflix()
            page.view.select_profile(0)  # type: ignore[union-attr]
            scheduler.advance(1)
        return write_snapshot(page, output)
    finally:
        page.unmount()


def main() -> None:
    parser = argparse.ArgumentParser(description="Loveflix")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show content counts and elapsed time")

    duration_parser = sub.add_parser("duration", help="Show time since the start date")
    duration_parser.add_argument("--at", default=None, help="ISO timestamp to evaluate at (default: now)")

    settings_parser = sub.add_parser("settings", help="Show or change site settings")
    settings_parser.add_argument("action", choices=["show", "set"])
    settings_parser.add_argument("key", nargs="?", help="e.g. start_date or profile1.name")
    settings_parser.add_argument("value", nargs="?")

    for name, help_text in (
        ("photos", "Manage gallery photos"),
        ("videos", "Manage videos"),
        ("chapters", "Manage story chapters"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("action", choices=["list", "add", "rm"])
        p.add_argument("id", nargs="?", help="Row id for rm")
        if name == "photos":
            p.add_argument("--src", default="")
            p.add_argument("--caption", default="")
        elif name == "videos":
            p.add_argument("--title", default="")
            p.add_argument("--description", default="")
            p.add_argument("--thumbnail", default="")
            p.add_argument("--video-url", default="")
            p.add_argument("--category", default=None)
        else:
            p.add_argument("--title", default="")
            p.add_argument("--text", default="")
            p.add_argument("--side", choices=[s.value for s in ChapterSide], default="left")

    upload_parser = sub.add_parser("upload", help="Upload a file to a storage bucket")
    upload_parser.add_argument("bucket", choices=BUCKETS)
    upload_parser.add_argument("file", type=Path)

    unlock_parser = sub.add_parser("unlock", help="Check which role a password unlocks")
    unlock_parser.add_argument("password")

    render_parser = sub.add_parser("render", help="Write a static HTML snapshot")
    render_parser.add_argument("output", type=Path)
    render_parser.add_argument(
        "--phase", choices=[p.value for p in Phase], default=Phase.JOURNEY.value,
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    hub = RealtimeHub()
    db = ContentDB(config, hub)
    db.init_db()

    try:
        try:
            settings = db.get_settings() or SiteSettings()
        except ValueError as e:
            logger.warning("Stored settings are invalid, using defaults: %s", e)
            settings = SiteSettings()

        if args.command == "status":
            counts = db.counts()
            print(f"{settings.name1} & {settings.name2}, since {settings.start_date}")
            try:
                print(f"  together: {calc_duration(settings.start_date).compact}")
            except ValueError as e:
                print(f"  together: unknown ({e})")
            print(
                f"  {counts['gallery']} photos, {counts['videos']} videos, "
                f"{counts['chapters']} chapters"
            )

        elif args.command == "duration":
            try:
                now = datetime.fromisoformat(args.at) if args.at else None
                d = calc_duration(settings.start_date, now)
            except ValueError as e:
                print(str(e))
                sys.exit(1)
            for value, label in zip(d.values(), DURATION_LABELS):
                print(f"  {value:02d} {label}")

        elif args.command == "settings":
            if args.action == "show":
                print(json.dumps(settings.model_dump(mode="json"), ensure_ascii=False, indent=2))
            else:
                if not args.key or args.value is None:
                    print("Usage: settings set KEY VALUE")
                    sys.exit(2)
                try:
                    updated = _apply_setting(settings, args.key, args.value)
                except ValueError as e:
                    print(str(e))
                    sys.exit(2)
                db.upsert_settings(updated)
                print(f"Saved {args.key}")

        elif args.command in ("photos", "videos", "chapters"):
            table = {"photos": Table.GALLERY, "videos": Table.VIDEOS, "chapters": Table.CHAPTERS}[args.command]
            if args.action == "list":
                rows = db.select(table)
                if not rows:
                    print(f"No {args.command} yet.")
                for r in rows:
                    label = r.get("title") or r.get("caption") or r.get("src") or ""
                    print(f"  {r['id']}  {label}")
            elif args.action == "add":
                if table == Table.GALLERY:
                    values = {"src": args.src, "caption": args.caption}
                elif table == Table.VIDEOS:
                    values = {
                        "title": args.title, "description": args.description,
                        "thumbnail": args.thumbnail, "video_url": args.video_url,
                        "category": args.category,
                    }
                else:
                    values = {"title": args.title, "text": args.text, "side": args.side}
                row = db.insert(table, values)
                print(row["id"])
            else:
                if not args.id:
                    print("Usage: <collection> rm ID")
                    sys.exit(2)
                if not db.delete(table, args.id):
                    print(f"No {args.command} row with id {args.id}")
                    sys.exit(1)
                print(f"Removed {args.id}")

        elif args.command == "upload":
            storage = MediaStorage(config)
            try:
                url = storage.upload_file(args.bucket, args.file.name, args.file.read_bytes())
            except (UploadError, OSError) as e:
                print(f"Upload failed: {e}")
                sys.exit(1)
            print(url)

        elif args.command == "unlock":
            role = match_password(args.password, settings)
            print(role.value if role else "wrong password")

        elif args.command == "render":
            path = _render(config, db, hub, args.output, args.phase)
            print(f"Output: {path}")

        else:
            parser.print_help()
    finally:
        db.close()


if __name__ == "__main__":
    main()
