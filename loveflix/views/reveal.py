"""Scroll-linked reveal: an element animates in the first time it is in view."""

from loveflix.models import ChapterSide

REVEAL_THRESHOLD = 0.15

_DIRECTIONS = {
    ChapterSide.LEFT: "left",
    ChapterSide.RIGHT: "right",
    ChapterSide.CENTER: "up",
}

ANIMATIONS = {
    "left": "slide-in-left",
    "right": "slide-in-right",
    "up": "fade-in-up",
}


def reveal_direction(side: ChapterSide | str) -> str:
    return _DIRECTIONS[ChapterSide(side)]


class ScrollReveal:
    """Latches visible once the intersection ratio reaches the threshold."""

    def __init__(self, direction: str = "up", delay: float = 0.0, threshold: float = REVEAL_THRESHOLD) -> None:
        if direction not in ANIMATIONS:
            raise ValueError(f"Unknown reveal direction {direction!r}")
        self.direction = direction
        self.delay = delay
        self.threshold = threshold
        self.visible = False

    def observe(self, intersection_ratio: float) -> bool:
        if intersection_ratio >= self.threshold:
            self.visible = True
        return self.visible

    @property
    def animation(self) -> str:
        return ANIMATIONS[self.direction] if self.visible else "hidden"
