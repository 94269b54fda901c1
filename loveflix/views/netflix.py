"""Netflix-style browser: profile pick, hero billboard, category rows and overlays.

Overlays (player, lightbox, story) are mutually exclusive and sit above the
browse view; closing any of them returns to browsing.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from loveflix.config import TimingConfig
from loveflix.content import ContentStoreAdapter
from loveflix.duration import DurationTicker
from loveflix.media import MediaElement
from loveflix.models import Duration, PhotoItem, Profile, Table, VideoItem
from loveflix.scheduling import Component, Scheduler
from loveflix.views.lightbox import PhotoLightbox
from loveflix.views.player import VideoPlayer
from loveflix.views.scroll_row import ScrollRow

logger = logging.getLogger(__name__)

BRAND = "LOVEFLIX"
PROFILE_PROMPT = "ใครกำลังดูอยู่?"
HERO_TAGLINE = "ทุกวินาทีที่ผ่านไป คือเรื่องราวที่เราสร้างร่วมกัน..."
PHOTO_ROW_TITLE = "ความทรงจำของเรา"
CHAPTER_ROW_TITLE = "บทแห่งความทรงจำ"
STORY_TITLE = "เรื่องราวของเรา"
EMPTY_TITLE = "ยังไม่มีเนื้อหา"
EMPTY_HINT = "เพิ่มรูปภาพ วิดีโอ และเรื่องราวได้ในหน้า Admin"
HEADER_SCROLL_THRESHOLD = 50


class View(str, Enum):
    PROFILES = "profiles"
    BROWSE = "browse"
    PLAYER = "player"
    LIGHTBOX = "lightbox"
    STORY = "story"


@dataclass
class Hero:
    kind: str  # "video", "photo" or "plain"
    image: str | None
    featured: VideoItem | None
    tagline: str


def group_videos_by_category(videos: list[VideoItem]) -> dict[str, list[VideoItem]]:
    """Rows keyed by category, in order of first appearance."""
    groups: dict[str, list[VideoItem]] = {}
    for video in videos:
        groups.setdefault(video.category_label, []).append(video)
    return groups


def pick_hero(videos: list[VideoItem], photos: list[PhotoItem]) -> Hero:
    featured = videos[0] if videos else None
    tagline = (featured.description if featured and featured.description else HERO_TAGLINE)
    if featured and featured.thumbnail:
        return Hero("video", featured.thumbnail, featured, tagline)
    if photos and photos[0].src:
        return Hero("photo", photos[0].src, featured, tagline)
    return Hero("plain", None, featured, tagline)


class NetflixBrowser(Component):
    def __init__(
        self,
        scheduler: Scheduler,
        content: ContentStoreAdapter,
        on_back: Callable[[], None],
        timing: TimingConfig | None = None,
        element_factory: Callable[[], MediaElement] | None = None,
    ) -> None:
        super().__init__(scheduler)
        self.content = content
        self.on_back = on_back
        self.timing = timing or TimingConfig()
        self.element_factory = element_factory
        self.view = View.PROFILES
        self.entering = False
        self.scrolled = False
        self.player: VideoPlayer | None = None
        self.lightbox: PhotoLightbox | None = None
        self.ticker = DurationTicker(scheduler, content.settings.start_date, tick=self.timing.duration_tick)
        self._rows: dict[tuple[str, str], ScrollRow] = {}

    def mount(self) -> None:
        super().mount()
        self.content.subscribe(self._on_content)
        self.ticker.mount()

    def unmount(self) -> None:
        self._drop_player()
        self.ticker.unmount()
        self.content.unsubscribe(self._on_content)
        super().unmount()

    def _on_content(self, table: Table) -> None:
        if table == Table.SITE_SETTINGS:
            self.ticker.set_start_date(self.content.settings.start_date)
        elif table == Table.GALLERY and self.view == View.LIGHTBOX and not self.content.photos:
            self.close_overlay()

    # --- Profile pick ---

    @property
    def profiles(self) -> list[Profile]:
        return self.content.settings.profiles

    def select_profile(self, index: int = 0) -> bool:
        if self.view != View.PROFILES or self.entering:
            return False
        if not 0 <= index < len(self.profiles):
            raise ValueError(f"No profile at index {index}")
        self.entering = True
        self.schedule(self.timing.profile_enter_delay, self._enter_browse)
        return True

    def _enter_browse(self) -> None:
        self.entering = False
        self.view = View.BROWSE

    # --- Overlays ---

    def play(self, video: VideoItem | None = None) -> bool:
        if self.view != View.BROWSE:
            return False
        video = video or self.hero().featured
        if video is None:
            return False
        element = self.element_factory() if self.element_factory else None
        self.player = VideoPlayer(
            self.scheduler, video, self.close_overlay,
            element=element, hide_delay=self.timing.controls_hide_delay,
        )
        self.player.mount()
        self.view = View.PLAYER
        return True

    def open_photo(self, index: int) -> bool:
        if self.view != View.BROWSE or not self.content.photos:
            return False
        self.lightbox = PhotoLightbox(self.content.photos, index, self.close_overlay)
        self.view = View.LIGHTBOX
        return True

    def open_story(self) -> bool:
        if self.view != View.BROWSE:
            return False
        self.view = View.STORY
        return True

    def _drop_player(self) -> None:
        if self.player is not None:
            self.player.unmount()
            self.player = None

    def close_overlay(self) -> None:
        if self.view in (View.PROFILES, View.BROWSE):
            return
        self._drop_player()
        self.lightbox = None
        self.view = View.BROWSE

    def handle_key(self, key: str) -> bool:
        if self.view == View.LIGHTBOX and self.lightbox is not None:
            return self.lightbox.handle_key(key)
        return False

    # --- Browse content ---

    def on_window_scroll(self, scroll_y: float) -> None:
        self.scrolled = scroll_y > HEADER_SCROLL_THRESHOLD

    @property
    def duration(self) -> Duration:
        return self.ticker.duration

    def hero(self) -> Hero:
        return pick_hero(self.content.videos, self.content.photos)

    def _row(self, kind: str, title: str, items: list) -> ScrollRow:
        # Rows keep their scroll state across re-renders.
        row = self._rows.get((kind, title))
        if row is None:
            row = ScrollRow(title, items)
            self._rows[(kind, title)] = row
        else:
            row.items = list(items)
        return row

    def rows(self) -> list[ScrollRow]:
        """Photo row, one row per video category, then the chapters row."""
        rows = []
        if self.content.photos:
            rows.append(self._row("photos", PHOTO_ROW_TITLE, self.content.photos))
        for category, videos in group_videos_by_category(self.content.videos).items():
            rows.append(self._row("videos", category, videos))
        if self.content.chapters:
            rows.append(self._row("chapters", CHAPTER_ROW_TITLE, self.content.chapters))
        return rows

    @property
    def is_empty(self) -> bool:
        return not (self.content.videos or self.content.photos or self.content.chapters)

    def back(self) -> None:
        self.on_back()
