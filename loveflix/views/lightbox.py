"""Full-screen photo viewer with keyboard navigation."""

from typing import Callable

from loveflix.models import PhotoItem


class PhotoLightbox:
    def __init__(self, photos: list[PhotoItem], initial_index: int, on_close: Callable[[], None]) -> None:
        if not photos:
            raise ValueError("Lightbox needs at least one photo")
        self.photos = photos
        self.index = min(max(initial_index, 0), len(photos) - 1)
        self.on_close = on_close

    @property
    def current(self) -> PhotoItem:
        return self.photos[self.index]

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < len(self.photos) - 1

    @property
    def counter(self) -> str:
        return f"{self.index + 1} / {len(self.photos)}"

    @property
    def alt_text(self) -> str:
        return self.current.caption or "Memory"

    def previous(self) -> bool:
        if not self.has_previous:
            return False
        self.index -= 1
        return True

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.index += 1
        return True

    def close(self) -> None:
        self.on_close()

    def handle_key(self, key: str) -> bool:
        """ArrowLeft/ArrowRight move, Escape closes. Returns True if handled."""
        if key == "Escape":
            self.close()
            return True
        if key == "ArrowLeft":
            return self.previous()
        if key == "ArrowRight":
            return self.next()
        return False
