"""Full-screen video player with a custom scrub bar and auto-hiding controls."""

import logging
import math
from typing import Callable

from loveflix.media import AutoplayBlocked, HeadlessMediaElement, MediaElement
from loveflix.models import VideoItem
from loveflix.scheduling import Component, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class VideoPlayer(Component):
    def __init__(
        self,
        scheduler: Scheduler,
        video: VideoItem,
        on_close: Callable[[], None],
        element: MediaElement | None = None,
        hide_delay: float = 3.0,
    ) -> None:
        super().__init__(scheduler)
        self.video = video
        self.on_close = on_close
        self.element = element or HeadlessMediaElement()
        self.hide_delay = hide_delay
        self.is_playing = True
        self.is_muted = False
        self.progress = 0.0
        self.controls_visible = True
        self.autoplay_blocked = False
        self._hide_timer: TimerHandle | None = None

    def mount(self) -> None:
        super().mount()
        self.element.src = self.video.video_url
        try:
            self.element.play()
        except AutoplayBlocked:
            # Paused until the viewer presses play.
            self.autoplay_blocked = True
            self.is_playing = False
        self._hide_later()

    def _hide_later(self) -> None:
        if self._hide_timer:
            self._hide_timer.cancel()
        self._hide_timer = self.schedule(self.hide_delay, self._hide)

    def _hide(self) -> None:
        self.controls_visible = False

    def mouse_move(self) -> None:
        self.controls_visible = True
        self._hide_later()

    def toggle_play(self) -> None:
        if self.is_playing:
            self.element.pause()
            self.is_playing = False
            return
        try:
            self.element.play()
        except AutoplayBlocked:
            logger.warning("Playback of %s refused", self.video.video_url)
            return
        self.autoplay_blocked = False
        self.is_playing = True

    def toggle_mute(self) -> None:
        self.is_muted = not self.is_muted
        self.element.muted = self.is_muted

    def time_update(self) -> float:
        """Refresh progress (percent) from the element's clock."""
        duration = self.element.duration
        if not duration or math.isnan(duration):
            self.progress = 0.0
        else:
            pct = self.element.current_time / duration * 100
            self.progress = 0.0 if math.isnan(pct) else pct
        return self.progress

    def seek(self, fraction: float) -> None:
        """Jump to a point on the scrub bar, 0.0 is the start and 1.0 the end."""
        duration = self.element.duration
        if not duration or math.isnan(duration):
            return
        self.element.current_time = min(max(fraction, 0.0), 1.0) * duration
        self.time_update()

    def request_fullscreen(self) -> bool:
        request = getattr(self.element, "request_fullscreen", None)
        if request is None:
            return False
        request()
        return True

    def close(self) -> None:
        self.element.pause()
        self.on_close()
