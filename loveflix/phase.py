"""Session phase controller: entrance -> journey <-> netflix, plus the admin overlay."""

import logging
from typing import Callable

from loveflix.models import Phase

logger = logging.getLogger(__name__)

# Allowed phase moves, keyed by action name.
TRANSITIONS: dict[str, tuple[Phase, Phase]] = {
    "enter": (Phase.ENTRANCE, Phase.JOURNEY),
    "continue": (Phase.JOURNEY, Phase.NETFLIX),
    "back": (Phase.NETFLIX, Phase.JOURNEY),
}


class PhaseController:
    """Holds the current phase and whether the admin overlay is open.

    The overlay is independent of the phase: closing it leaves whatever
    phase was active. There is no terminal state.
    """

    def __init__(self) -> None:
        self.phase = Phase.ENTRANCE
        self.admin_visible = False
        self._listeners: list[Callable[["PhaseController"], None]] = []

    def subscribe(self, listener: Callable[["PhaseController"], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _move(self, action: str) -> bool:
        source, target = TRANSITIONS[action]
        if self.phase != source:
            logger.debug("Ignoring %r in phase %s", action, self.phase.value)
            return False
        self.phase = target
        logger.info("Phase %s -> %s", source.value, target.value)
        self._notify()
        return True

    def enter(self) -> bool:
        return self._move("enter")

    def enter_as_admin(self) -> bool:
        """Unlock with the admin password: journey behind an open admin overlay."""
        if self.phase != Phase.ENTRANCE:
            return False
        self.admin_visible = True
        return self._move("enter")

    def continue_to_netflix(self) -> bool:
        return self._move("continue")

    def back_to_journey(self) -> bool:
        return self._move("back")

    def open_admin(self) -> bool:
        if self.admin_visible:
            return False
        self.admin_visible = True
        self._notify()
        return True

    def close_admin(self) -> bool:
        if not self.admin_visible:
            return False
        self.admin_visible = False
        self._notify()
        return True

    @property
    def admin_trigger_visible(self) -> bool:
        """The hidden settings button only exists after the entrance."""
        return self.phase != Phase.ENTRANCE
