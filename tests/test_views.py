"""Tests for the journey and netflix views and their overlays."""

import math

import pytest

from loveflix.media import HeadlessMediaElement
from loveflix.models import ChapterSide, PhotoItem, SiteSettings, Table, VideoItem
from loveflix.views.journey import GALLERY_EMPTY_MESSAGE, OPENING_LINE, JourneyView
from loveflix.views.lightbox import PhotoLightbox
from loveflix.views.netflix import (
    CHAPTER_ROW_TITLE,
    HERO_TAGLINE,
    PHOTO_ROW_TITLE,
    NetflixBrowser,
    View,
    group_videos_by_category,
    pick_hero,
)
from loveflix.views.player import VideoPlayer
from loveflix.views.reveal import ScrollReveal, reveal_direction
from loveflix.views.scroll_row import ScrollRow


def _photos(n):
    return [PhotoItem(id=str(i), src=f"{i}.jpg", caption=f"p{i}" if i % 2 else None) for i in range(n)]


class TestScrollRow:
    def test_arrows_follow_offset(self):
        row = ScrollRow("r")
        row.measure(0, 1000, 400)
        assert not row.can_scroll_left
        assert row.can_scroll_right
        row.on_scroll(595)
        assert row.can_scroll_left
        assert not row.can_scroll_right

    def test_edge_slack(self):
        row = ScrollRow("r")
        row.measure(10, 1000, 400)
        assert not row.can_scroll_left
        row.on_scroll(11)
        assert row.can_scroll_left

    def test_scroll_clamps(self):
        row = ScrollRow("r")
        row.measure(0, 1000, 400)
        assert row.scroll("right") == 400
        assert row.scroll("right") == 600
        assert row.scroll("left") == 200
        assert row.scroll("left") == 0

    def test_resize_recomputes(self):
        row = ScrollRow("r")
        row.measure(0, 1000, 400)
        row.on_resize(1200)
        assert not row.can_scroll_right

    def test_bad_direction(self):
        with pytest.raises(ValueError):
            ScrollRow("r").scroll("up")


class TestLightbox:
    def test_navigation_bounds(self):
        closed = []
        box = PhotoLightbox(_photos(3), 0, lambda: closed.append(1))
        assert not box.handle_key("ArrowLeft")
        assert box.handle_key("ArrowRight")
        assert box.counter == "2 / 3"
        box.next()
        assert not box.next()
        assert box.index == 2
        assert box.handle_key("Escape")
        assert closed == [1]

    def test_alt_text(self):
        box = PhotoLightbox(_photos(2), 0, lambda: None)
        assert box.alt_text == "Memory"
        box.next()
        assert box.alt_text == "p1"

    def test_initial_index_clamped(self):
        assert PhotoLightbox(_photos(2), 9, lambda: None).index == 1

    def test_needs_photos(self):
        with pytest.raises(ValueError):
            PhotoLightbox([], 0, lambda: None)


class TestReveal:
    def test_directions(self):
        assert reveal_direction(ChapterSide.LEFT) == "left"
        assert reveal_direction("right") == "right"
        assert reveal_direction("center") == "up"

    def test_latches(self):
        r = ScrollReveal("left")
        assert r.animation == "hidden"
        assert not r.observe(0.1)
        assert r.observe(0.15)
        assert r.observe(0.0)
        assert r.animation == "slide-in-left"


class TestVideoPlayer:
    def _video(self):
        return VideoItem(id="v", title="T", video_url="https://cdn.test/v.mp4")

    def test_autoplay_and_controls_hide(self, scheduler):
        player = VideoPlayer(scheduler, self._video(), lambda: None)
        player.mount()
        assert player.element.src == "https://cdn.test/v.mp4"
        assert player.is_playing
        scheduler.advance(2)
        player.mouse_move()
        scheduler.advance(2)
        assert player.controls_visible
        scheduler.advance(1.5)
        assert not player.controls_visible
        player.unmount()

    def test_blocked_autoplay_waits_for_play(self, scheduler):
        element = HeadlessMediaElement(blocked_attempts=1)
        player = VideoPlayer(scheduler, self._video(), lambda: None, element=element)
        player.mount()
        assert player.autoplay_blocked
        assert not player.is_playing
        player.toggle_play()
        assert player.is_playing
        assert not element.paused
        player.toggle_play()
        assert element.paused
        player.unmount()

    def test_progress_and_seek(self, scheduler):
        element = HeadlessMediaElement(duration=200.0)
        player = VideoPlayer(scheduler, self._video(), lambda: None, element=element)
        player.mount()
        element.current_time = 50
        assert player.time_update() == 25.0
        player.seek(0.5)
        assert element.current_time == 100.0
        assert player.progress == 50.0
        player.seek(2)
        assert element.current_time == 200.0
        player.unmount()

    def test_unknown_duration(self, scheduler):
        player = VideoPlayer(scheduler, self._video(), lambda: None)
        player.mount()
        assert math.isnan(player.element.duration)
        assert player.time_update() == 0.0
        player.seek(0.5)
        assert player.element.current_time == 0.0
        player.unmount()

    def test_mute_fullscreen_close(self, scheduler):
        closed = []
        player = VideoPlayer(scheduler, self._video(), lambda: closed.append(1))
        player.mount()
        player.toggle_mute()
        assert player.element.muted
        assert player.request_fullscreen()
        assert player.element.fullscreen
        player.close()
        assert player.element.paused
        assert closed == [1]
        player.unmount()


class TestJourneyView:
    @pytest.fixture()
    def journey(self, scheduler, adapter):
        calls = []
        view = JourneyView(scheduler, adapter, lambda: calls.append("continue"))
        view.calls = calls
        view.mount()
        yield view
        view.unmount()

    def test_opening_typewriter_then_hidden(self, journey, scheduler):
        assert journey.opening_text == ""
        scheduler.advance(0.5)
        assert 0 < len(journey.opening_text) < len(OPENING_LINE)
        scheduler.advance(10)
        assert journey.typewriter.completed
        assert not journey.show_typewriter
        assert journey.opening_text == OPENING_LINE

    def test_names_and_duration(self, journey):
        assert journey.couple_names == ("Ann", "Ben")
        assert (journey.duration.months, journey.duration.days) == (1, 1)

    def test_start_date_change_updates_counter(self, journey, adapter):
        adapter.apply_settings(SiteSettings(start_date="2026-01-02"))
        assert journey.duration.total_seconds == 86400

    def test_timeline(self, journey):
        entries = journey.timeline()
        assert [e.chapter.title for e in entries] == ["Hello", "Later"]
        assert [e.reveal.direction for e in entries] == ["left", "up"]
        assert [e.text_align for e in entries] == ["right", "center"]
        assert entries[1].reveal.delay == pytest.approx(0.1)
        entries[0].reveal.observe(1.0)
        assert journey.timeline()[0].reveal.visible

    def test_gallery_and_lightbox(self, journey, adapter):
        assert journey.gallery_empty_message is None
        assert journey.open_photo(2)
        assert journey.lightbox.current.caption == "dinner"
        journey.lightbox.handle_key("Escape")
        assert journey.lightbox is None
        adapter.photos = []
        assert journey.gallery_empty_message == GALLERY_EMPTY_MESSAGE
        assert not journey.open_photo(0)

    def test_continue(self, journey):
        journey.continue_()
        assert journey.calls == ["continue"]

    def test_unmount_stops_children(self, scheduler, adapter):
        view = JourneyView(scheduler, adapter, lambda: None)
        view.mount()
        scheduler.advance(0.3)
        view.unmount()
        assert scheduler.pending == 0


class TestNetflixHelpers:
    def test_group_by_category_in_first_seen_order(self):
        videos = [
            VideoItem(id="1", category="B"),
            VideoItem(id="2"),
            VideoItem(id="3", category="B"),
        ]
        groups = group_videos_by_category(videos)
        assert list(groups) == ["B", "Our Collection"]
        assert [v.id for v in groups["B"]] == ["1", "3"]

    def test_hero_prefers_video_thumbnail(self):
        hero = pick_hero([VideoItem(id="1", thumbnail="t.jpg", description="d")], _photos(1))
        assert (hero.kind, hero.image, hero.tagline) == ("video", "t.jpg", "d")

    def test_hero_falls_back_to_photo(self):
        hero = pick_hero([VideoItem(id="1")], _photos(1))
        assert (hero.kind, hero.image) == ("photo", "0.jpg")
        assert hero.featured.id == "1"
        assert hero.tagline == HERO_TAGLINE

    def test_hero_plain(self):
        hero = pick_hero([], [])
        assert hero.kind == "plain"
        assert hero.featured is None


class TestNetflixBrowser:
    @pytest.fixture()
    def browser(self, scheduler, adapter):
        backs = []
        b = NetflixBrowser(scheduler, adapter, lambda: backs.append(1), element_factory=HeadlessMediaElement)
        b.backs = backs
        b.mount()
        yield b
        b.unmount()

    def _browse(self, browser, scheduler):
        browser.select_profile(0)
        scheduler.advance(0.85)
        assert browser.view == View.BROWSE

    def test_profile_pick_delay(self, browser, scheduler):
        assert browser.view == View.PROFILES
        assert browser.select_profile(1)
        assert not browser.select_profile(0)
        scheduler.advance(0.5)
        assert browser.view == View.PROFILES
        scheduler.advance(0.35)
        assert browser.view == View.BROWSE

    def test_bad_profile_index(self, browser):
        with pytest.raises(ValueError):
            browser.select_profile(5)

    def test_rows(self, browser, scheduler):
        self._browse(browser, scheduler)
        titles = [r.title for r in browser.rows()]
        assert titles == [PHOTO_ROW_TITLE, "Travel", "Our Collection", CHAPTER_ROW_TITLE]
        assert [v.title for v in browser.rows()[1].items] == ["Trip", "Road"]

    def test_rows_keep_scroll_state(self, browser, adapter, populated_db):
        row = browser.rows()[0]
        row.measure(0, 2000, 500)
        row.scroll("right")
        populated_db.insert(Table.GALLERY, {"src": "z.jpg"})
        again = browser.rows()[0]
        assert again is row
        assert again.scroll_left == 400
        assert len(again.items) == 4

    def test_hero_and_play(self, browser, scheduler):
        assert not browser.play()
        self._browse(browser, scheduler)
        assert browser.hero().featured.title == "Trip"
        assert browser.play()
        assert browser.view == View.PLAYER
        assert browser.player.element.src == "https://cdn.test/v1.mp4"
        assert not browser.open_story()
        browser.player.close()
        assert browser.view == View.BROWSE
        assert browser.player is None

    def test_lightbox_overlay(self, browser, scheduler):
        self._browse(browser, scheduler)
        assert browser.open_photo(0)
        assert browser.view == View.LIGHTBOX
        assert browser.handle_key("ArrowRight")
        assert browser.handle_key("Escape")
        assert browser.view == View.BROWSE
        assert not browser.handle_key("Escape")

    def test_lightbox_closes_when_photos_vanish(self, browser, scheduler, populated_db):
        self._browse(browser, scheduler)
        browser.open_photo(0)
        for row in populated_db.select(Table.GALLERY):
            populated_db.delete(Table.GALLERY, row["id"])
        assert browser.view == View.BROWSE
        assert browser.lightbox is None

    def test_story_overlay(self, browser, scheduler):
        self._browse(browser, scheduler)
        assert browser.open_story()
        assert browser.view == View.STORY
        browser.close_overlay()
        assert browser.view == View.BROWSE

    def test_header_scroll(self, browser):
        browser.on_window_scroll(50)
        assert not browser.scrolled
        browser.on_window_scroll(51)
        assert browser.scrolled

    def test_empty_state(self, browser, adapter):
        assert not browser.is_empty
        adapter.photos, adapter.videos, adapter.chapters = [], [], []
        assert browser.is_empty
        assert browser.rows() == []

    def test_back(self, browser):
        browser.back()
        assert browser.backs == [1]

    def test_unmount_drops_player(self, scheduler, adapter):
        b = NetflixBrowser(scheduler, adapter, lambda: None)
        b.mount()
        b.select_profile(0)
        scheduler.advance(1)
        b.play(VideoItem(id="x", video_url="u"))
        b.unmount()
        assert b.player is None
        assert scheduler.pending == 0
