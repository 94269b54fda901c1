"""Root page: owns the store adapter, the phase controller and the active view.

Exactly one phase view is mounted at a time. The admin editor is layered on
top when the overlay is open. Variants of the page (with or without music,
with or without admin wiring, with the local cache) are feature flags.
"""

import logging
from typing import Callable

from loveflix.admin import AdminEditor
from loveflix.cache import LocalCache
from loveflix.config import Config
from loveflix.content import ContentStoreAdapter
from loveflix.db import ContentDB
from loveflix.gate import EntranceGate
from loveflix.media import BackgroundMusic, HeadlessMediaElement, MediaElement
from loveflix.models import Phase, SiteSettings, Table
from loveflix.phase import PhaseController
from loveflix.realtime import RealtimeHub
from loveflix.scheduling import Component, Scheduler
from loveflix.storage import MediaStorage
from loveflix.views.journey import JourneyView
from loveflix.views.netflix import NetflixBrowser

logger = logging.getLogger(__name__)


class SurprisePage:
    def __init__(
        self,
        config: Config,
        db: ContentDB,
        hub: RealtimeHub,
        scheduler: Scheduler,
        storage: MediaStorage,
        cache: LocalCache | None = None,
        notify: Callable[[str], None] | None = None,
        element_factory: Callable[[], MediaElement] | None = None,
    ) -> None:
        self.config = config
        self.db = db
        self.scheduler = scheduler
        self.storage = storage
        self.notices: list[str] = []
        self._notify = notify
        self.element_factory = element_factory or HeadlessMediaElement
        if cache is None and config.features.local_cache:
            cache = LocalCache(config.resolved_cache_path)
        self.content = ContentStoreAdapter(db, hub, config, cache=cache)
        self.phases = PhaseController()
        self.view: Component | None = None
        self.admin: AdminEditor | None = None
        self.music: BackgroundMusic | None = None
        self.mounted = False

    # --- Lifecycle ---

    def mount(self) -> None:
        self.content.mount()
        self.content.subscribe(self._on_content)
        self.phases.subscribe(self._on_phase)
        self.mounted = True
        self._show_phase()
        self._start_music()

    def unmount(self) -> None:
        if not self.mounted:
            return
        self._drop_view()
        if self.music:
            self.music.stop()
        self.admin = None
        self.content.unsubscribe(self._on_content)
        self.content.unmount()
        self.mounted = False

    # --- Phase views ---

    @property
    def phase(self) -> Phase:
        return self.phases.phase

    def _drop_view(self) -> None:
        if self.view is not None:
            self.view.unmount()
            self.view = None

    def _build_view(self, phase: Phase) -> Component:
        timing = self.config.timing
        if phase == Phase.ENTRANCE:
            return EntranceGate(
                self.scheduler,
                lambda: self.content.settings,
                on_enter=self.phases.enter,
                on_admin=self._enter_as_admin,
                timing=timing,
            )
        if phase == Phase.JOURNEY:
            return JourneyView(self.scheduler, self.content, self.phases.continue_to_netflix, timing)
        return NetflixBrowser(
            self.scheduler, self.content, self.phases.back_to_journey, timing,
            element_factory=self.element_factory,
        )

    def _show_phase(self) -> None:
        self._drop_view()
        self.view = self._build_view(self.phases.phase)
        self.view.mount()

    def _on_phase(self, controller: PhaseController) -> None:
        if not self.mounted:
            return
        current = {EntranceGate: Phase.ENTRANCE, JourneyView: Phase.JOURNEY, NetflixBrowser: Phase.NETFLIX}
        if self.view is None or current.get(type(self.view)) != controller.phase:
            self._show_phase()
        self._sync_admin()

    def _enter_as_admin(self) -> None:
        if self.config.features.admin:
            self.phases.enter_as_admin()
        else:
            self.phases.enter()

    # --- Admin overlay ---

    @property
    def admin_trigger_visible(self) -> bool:
        return self.config.features.admin and self.phases.admin_trigger_visible

    def open_admin(self) -> bool:
        if not self.config.features.admin:
            return False
        return self.phases.open_admin()

    def close_admin(self) -> bool:
        return self.phases.close_admin()

    def _sync_admin(self) -> None:
        if self.phases.admin_visible and self.config.features.admin:
            if self.admin is None:
                self.admin = AdminEditor(
                    self.content, self.db, self.storage, self.notify,
                    on_saved=self._settings_saved, on_close=self.close_admin,
                )
        else:
            self.admin = None

    def _settings_saved(self, settings: SiteSettings) -> None:
        self.close_admin()

    def notify(self, message: str) -> None:
        """Blocking notice to the person at the admin editor."""
        self.notices.append(message)
        logger.info("Notice: %s", message)
        if self._notify:
            self._notify(message)

    # --- Music ---

    def _start_music(self) -> None:
        if not self.config.features.music:
            return
        url = self.content.settings.music_url
        if not url:
            if self.music is not None:
                self.music.stop()
                self.music = None
            return
        if self.music is None:
            self.music = BackgroundMusic(self.element_factory(), url)
        elif self.music.url == url:
            return
        else:
            self.music.stop()
            self.music.url = url
        self.music.start()

    def _on_content(self, table: Table) -> None:
        if table == Table.SITE_SETTINGS and self.mounted:
            self._start_music()

    def user_interaction(self) -> None:
        """Click or keydown anywhere on the page."""
        if self.music:
            self.music.on_user_interaction()
