"""Entrance gate: a cosmetic soft lock in front of the journey.

This is NOT authentication. Both passwords are plain strings from the
settings record, which any client holding application state can read, and
the comparison is a plain equality check with no hashing, lockout or rate
limit. If the content ever needs protecting, verify credentials server-side
and never ship the secrets to the client; keep this gate as a separate,
clearly labelled soft lock.
"""

import logging
from enum import Enum
from typing import Callable

from loveflix.config import TimingConfig
from loveflix.models import SiteSettings
from loveflix.scheduling import Component, Scheduler

logger = logging.getLogger(__name__)

WRONG_PASSWORD_MESSAGE = "รหัสไม่ถูกต้อง ลองใหม่อีกครั้ง"


class GateRole(str, Enum):
    VIEW = "view"
    ADMIN = "admin"


class GateOutcome(str, Enum):
    IGNORED = "ignored"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


def match_password(password: str, settings: SiteSettings) -> GateRole | None:
    """Which role a password unlocks. The admin password wins if both match."""
    if password == settings.admin_password:
        return GateRole.ADMIN
    if password == settings.view_password:
        return GateRole.VIEW
    return None


class EntranceGate(Component):
    """Password form with a 3-2-1 countdown before handing over."""

    def __init__(
        self,
        scheduler: Scheduler,
        settings: Callable[[], SiteSettings],
        on_enter: Callable[[], None],
        on_admin: Callable[[], None],
        timing: TimingConfig | None = None,
    ) -> None:
        super().__init__(scheduler)
        self._settings = settings
        self.on_enter = on_enter
        self.on_admin = on_admin
        self.timing = timing or TimingConfig()

        self.password = ""
        self.error = ""
        self.shaking = False
        self.card_visible = False
        self.counting = False
        self.count = self.timing.countdown_from
        self.fade_out = False
        self.focus_requests = 0
        self.role: GateRole | None = None

    def mount(self) -> None:
        super().mount()
        self.schedule(self.timing.card_reveal_delay, self._reveal_card)

    def _reveal_card(self) -> None:
        self.card_visible = True

    def type(self, value: str) -> None:
        self.password = value
        self.error = ""

    def submit(self, password: str | None = None) -> GateOutcome:
        if password is not None:
            self.type(password)
        if self.counting:
            return GateOutcome.IGNORED

        role = match_password(self.password, self._settings())
        if role is None:
            self.error = WRONG_PASSWORD_MESSAGE
            self.shaking = True
            self.schedule(self.timing.shake_duration, self._stop_shake)
            self.password = ""
            self.focus_requests += 1
            logger.debug("Entrance gate rejected a password")
            return GateOutcome.REJECTED

        # The role is fixed here; typing during the countdown cannot change it.
        self.role = role
        self.counting = True
        self.count = self.timing.countdown_from
        logger.info("Entrance gate unlocked (%s)", role.value)
        self._step()
        return GateOutcome.ACCEPTED

    def _stop_shake(self) -> None:
        self.shaking = False

    def _step(self) -> None:
        if self.count <= 0:
            self.fade_out = True
            self.schedule(self.timing.fade_delay, self._finish)
            return
        self.schedule(self.timing.countdown_tick, self._decrement)

    def _decrement(self) -> None:
        self.count -= 1
        self._step()

    def _finish(self) -> None:
        if self.role == GateRole.ADMIN:
            self.on_admin()
        else:
            self.on_enter()
