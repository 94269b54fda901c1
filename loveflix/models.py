"""Pydantic models for the loveflix content store."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_CATEGORY = "Our Collection"


class Phase(str, Enum):
    ENTRANCE = "entrance"
    JOURNEY = "journey"
    NETFLIX = "netflix"


class ChapterSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class Table(str, Enum):
    GALLERY = "gallery"
    VIDEOS = "videos"
    CHAPTERS = "chapters"
    SITE_SETTINGS = "site_settings"


class ChangeType(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


# --- Settings (singleton row, stored as a JSON blob) ---


class Profile(BaseModel):
    name: str
    avatar: str = ""
    color: str = "hsl(345, 50%, 25%)"

    @property
    def initial(self) -> str:
        return self.name[:1].upper()


def _default_profiles() -> list[Profile]:
    return [
        Profile(name="My Love", color="hsl(345, 50%, 25%)"),
        Profile(name="Darling", color="hsl(350, 60%, 30%)"),
    ]


class SiteSettings(BaseModel):
    """Everything the admin editor can change in one save."""
    view_password: str = "021267"
    admin_password: str = "06042552"
    start_date: str = "2025-12-02"
    music_url: str = ""
    video_url: str | None = None
    name1: str = "Chiramet"
    name2: str = "Kotchrada"
    profiles: list[Profile] = Field(default_factory=_default_profiles)

    @field_validator("start_date")
    @classmethod
    def check_start_date(cls, v: str) -> str:
        from loveflix.duration import parse_start_date

        parse_start_date(v)
        return v


DEFAULT_SETTINGS = SiteSettings()


# --- Collection rows ---


class PhotoItem(BaseModel):
    id: str
    src: str = ""
    caption: str | None = None
    created_at: str | None = None


class VideoItem(BaseModel):
    id: str
    title: str = ""
    description: str | None = None
    thumbnail: str = ""
    video_url: str = ""
    category: str | None = None
    created_at: str | None = None

    @property
    def category_label(self) -> str:
        return self.category or DEFAULT_CATEGORY


class StoryChapter(BaseModel):
    id: str
    title: str = ""
    text: str = ""
    side: ChapterSide = ChapterSide.LEFT
    created_at: str | None = None


DEFAULT_CHAPTERS: list[StoryChapter] = [
    StoryChapter(
        id="1",
        title="วันแรกที่เราเจอกัน",
        text=(
            "เค้ารู้สึกว่าเธอเป็นคนพิเศษมากว่าใคร แต่ตอนนั้นเธอเจ้าชู้เลยม่อยากจะเปิดใจให้ใครง่ายๆ "
            "แต่เค้าก็ไม่ยอมแพ้ และในที่สุดเธอก็ยอมให้โอกาสเราได้รู้จักกันมากขึ้น"
        ),
        side=ChapterSide.LEFT,
    ),
    StoryChapter(
        id="2",
        title="เดทแรกของเรา",
        text=(
            "เค้าได้ไปดูหนังกับครั้งเเรกเค้ารู้สึกอุ่นใจมากที่เธอคอยอ้อน "
            "คอยกอดเค้าไม่เคยได้รับความรู้สึกนั้นเลย"
        ),
        side=ChapterSide.RIGHT,
    ),
    StoryChapter(
        id="3",
        title="ตอนเธอขอให้เค้าขอเธอเป็นแฟน",
        text=(
            "เอาจริงๆ ตอนนั้นเค้ารู้สึกกับเธอมาตั้งนานแล้ว เพราะตลอดระยะเวลาที่เธอจีบเค้า"
            "เค้าคิดว่าเธอคือคนที่จะคอยอยู่ข้างเค้าตลอดคอยเป็นให้เค้าคอยกอดตลอด"
        ),
        side=ChapterSide.LEFT,
    ),
    StoryChapter(
        id="4",
        title="ครบรอบ 1 ปี",
        text=(
            "มันเป็นความรู้สึกที่เร็วมากที่เราผ่านมาด้วยกันได้ขนาดนี้ มันมีทั้งความสุขและความท้าทาย "
            "แต่เราก็ผ่านมันมาด้วยกัน และเค้ารู้สึกขอบคุณที่มีเธออยู่ข้างเค้า เค้ารักเธอมากๆนะคะ "
            "เค้าขะอยู๋เคียงข้างเธอไม่ว่าจะเป็นยังไงก็ตาม"
        ),
        side=ChapterSide.CENTER,
    ),
]

ROW_MODELS: dict[Table, type[BaseModel]] = {
    Table.GALLERY: PhotoItem,
    Table.VIDEOS: VideoItem,
    Table.CHAPTERS: StoryChapter,
}


# --- Derived values ---


class Duration(BaseModel):
    """Broken-down elapsed time. Months and years are approximate."""
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    total_seconds: int = 0

    def values(self) -> list[int]:
        return [self.years, self.months, self.days, self.hours, self.minutes, self.seconds]

    @property
    def compact(self) -> str:
        return f"{self.years}y {self.months}m {self.days}d"


# --- Change notification ---


class ChangeEvent(BaseModel):
    """Row-level change pushed by the store after a committed write."""
    table: Table
    type: ChangeType
    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None
