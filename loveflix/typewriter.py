"""One-shot, forward-only typewriter reveal."""

import logging
from typing import Callable

from loveflix.scheduling import Component, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class Typewriter(Component):
    """Reveal text one character per tick, then call on_complete once.

    The tick after the last character stops the timer and fires the
    completion callback, so it always runs after the full text is shown.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        text: str,
        speed: float = 0.06,
        delay: float = 0.0,
        on_complete: Callable[[], None] | None = None,
        on_update: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(scheduler)
        self.text = text
        self.speed = speed
        self.delay = delay
        self.on_complete = on_complete
        self.on_update = on_update
        self.displayed = ""
        self.started = False
        self.completed = False
        self.updates = 0
        self._index = 0
        self._interval: TimerHandle | None = None

    @property
    def show_cursor(self) -> bool:
        return self.started and len(self.displayed) < len(self.text)

    def mount(self) -> None:
        super().mount()
        self.schedule(self.delay, self._start)

    def _start(self) -> None:
        self.started = True
        self._interval = self.every(self.speed, self._tick)

    def _tick(self) -> None:
        if self._index < len(self.text):
            self._index += 1
            self.displayed = self.text[: self._index]
            self.updates += 1
            if self.on_update:
                self.on_update(self.displayed)
            return
        if self._interval:
            self._interval.cancel()
        if not self.completed:
            self.completed = True
            logger.debug("Typewriter finished %d chars", len(self.text))
            if self.on_complete:
                self.on_complete()
