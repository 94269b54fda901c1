"""Media elements and the blocked-autoplay retry."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class AutoplayBlocked(Exception):
    """Playback was refused until the user interacts with the page."""


class MediaElement(Protocol):
    src: str
    muted: bool
    paused: bool
    current_time: float
    duration: float

    def play(self) -> None:
        """Start playback. May raise AutoplayBlocked."""
        ...

    def pause(self) -> None:
        ...


class HeadlessMediaElement:
    """In-memory media element used for rendering and tests.

    The first blocked_attempts calls to play() are refused, the way browsers
    refuse unmuted autoplay before a user gesture.
    """

    def __init__(self, src: str = "", duration: float = float("nan"), blocked_attempts: int = 0) -> None:
        self.src = src
        self.muted = False
        self.paused = True
        self.current_time = 0.0
        self.duration = duration
        self.fullscreen = False
        self.blocked_attempts = blocked_attempts
        self.play_calls = 0

    def play(self) -> None:
        self.play_calls += 1
        if self.play_calls <= self.blocked_attempts:
            raise AutoplayBlocked("playback requires a user gesture")
        self.paused = False

    def pause(self) -> None:
        self.paused = True

    def request_fullscreen(self) -> None:
        self.fullscreen = True


class BackgroundMusic:
    """Loops the settings' music URL. A blocked start is retried once on the next click or keydown."""

    def __init__(self, element: MediaElement, url: str) -> None:
        self.element = element
        self.url = url
        self.waiting_for_interaction = False
        self.retried = False

    @property
    def playing(self) -> bool:
        return not self.element.paused

    def start(self) -> bool:
        if not self.url:
            return False
        self.element.src = self.url
        try:
            self.element.play()
        except AutoplayBlocked:
            logger.debug("Autoplay blocked for %s; waiting for interaction", self.url)
            self.waiting_for_interaction = True
            return False
        return True

    def on_user_interaction(self) -> bool:
        """Hook for click/keydown. Returns True if playback started on this call."""
        if not self.waiting_for_interaction:
            return False
        self.waiting_for_interaction = False
        self.retried = True
        try:
            self.element.play()
        except AutoplayBlocked:
            logger.warning("Background music still blocked after interaction")
            return False
        return True

    def stop(self) -> None:
        self.waiting_for_interaction = False
        self.element.pause()
