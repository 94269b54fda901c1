"""Journey phase: cinematic opening, elapsed-time counter, story timeline and gallery."""

import logging
from dataclasses import dataclass
from typing import Callable

from loveflix.config import TimingConfig
from loveflix.content import ContentStoreAdapter
from loveflix.duration import DurationTicker
from loveflix.models import ChapterSide, StoryChapter, Table
from loveflix.scheduling import Component, Scheduler
from loveflix.typewriter import Typewriter
from loveflix.views.lightbox import PhotoLightbox
from loveflix.views.reveal import ScrollReveal, reveal_direction

logger = logging.getLogger(__name__)

OPENING_LINE = "ทุกวินาทีที่ผ่านไป คือเรื่องราวที่เราสร้างร่วมกัน..."
GALLERY_EMPTY_MESSAGE = "ยังไม่มีรูปภาพ กดเพิ่มรูปได้ในหน้า Admin"
REVEAL_STAGGER = 0.1

_TEXT_ALIGN = {
    ChapterSide.LEFT: "right",
    ChapterSide.RIGHT: "left",
    ChapterSide.CENTER: "center",
}


@dataclass
class TimelineEntry:
    chapter: StoryChapter
    reveal: ScrollReveal

    @property
    def side(self) -> str:
        return self.chapter.side.value

    @property
    def text_align(self) -> str:
        return _TEXT_ALIGN[self.chapter.side]


class JourneyView(Component):
    def __init__(
        self,
        scheduler: Scheduler,
        content: ContentStoreAdapter,
        on_continue: Callable[[], None],
        timing: TimingConfig | None = None,
    ) -> None:
        super().__init__(scheduler)
        self.content = content
        self.on_continue = on_continue
        self.timing = timing or TimingConfig()
        self.show_typewriter = True
        self.typewriter = Typewriter(
            scheduler,
            OPENING_LINE,
            speed=self.timing.opening_typewriter_speed,
            on_complete=self._opening_done,
        )
        self.ticker = DurationTicker(scheduler, content.settings.start_date, tick=self.timing.duration_tick)
        self.duration_reveal = ScrollReveal()
        self.lightbox: PhotoLightbox | None = None
        self._reveals: dict[str, ScrollReveal] = {}

    def mount(self) -> None:
        super().mount()
        self.content.subscribe(self._on_content)
        self.typewriter.mount()
        self.ticker.mount()

    def unmount(self) -> None:
        self.typewriter.unmount()
        self.ticker.unmount()
        self.content.unsubscribe(self._on_content)
        super().unmount()

    def _on_content(self, table: Table) -> None:
        if table == Table.SITE_SETTINGS:
            self.ticker.set_start_date(self.content.settings.start_date)
        elif table == Table.GALLERY and self.lightbox and not self.content.photos:
            self.lightbox = None

    def _opening_done(self) -> None:
        self.schedule(self.timing.typewriter_linger, self._hide_typewriter)

    def _hide_typewriter(self) -> None:
        self.show_typewriter = False

    @property
    def opening_text(self) -> str:
        return self.typewriter.displayed if self.show_typewriter else OPENING_LINE

    @property
    def couple_names(self) -> tuple[str, str]:
        return self.content.settings.name1, self.content.settings.name2

    @property
    def duration(self):
        return self.ticker.duration

    def timeline(self) -> list[TimelineEntry]:
        entries = []
        for i, chapter in enumerate(self.content.chapters):
            reveal = self._reveals.get(chapter.id)
            direction = reveal_direction(chapter.side)
            if reveal is None or reveal.direction != direction:
                reveal = ScrollReveal(direction=direction, delay=i * REVEAL_STAGGER)
                self._reveals[chapter.id] = reveal
            entries.append(TimelineEntry(chapter=chapter, reveal=reveal))
        return entries

    @property
    def gallery_empty_message(self) -> str | None:
        return None if self.content.photos else GALLERY_EMPTY_MESSAGE

    def open_photo(self, index: int) -> bool:
        if not self.content.photos:
            return False
        self.lightbox = PhotoLightbox(self.content.photos, index, self.close_photo)
        return True

    def close_photo(self) -> None:
        self.lightbox = None

    def continue_(self) -> None:
        self.on_continue()
