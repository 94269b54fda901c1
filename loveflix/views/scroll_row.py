"""Horizontal row that shows arrows only where it can scroll further."""

SCROLL_STEP = 400
EDGE_SLACK = 10


class ScrollRow:
    def __init__(self, title: str, items: list | None = None) -> None:
        self.title = title
        self.items = list(items or [])
        self.scroll_left = 0.0
        self.scroll_width = 0.0
        self.client_width = 0.0
        self.can_scroll_left = False
        self.can_scroll_right = False

    def measure(self, scroll_left: float, scroll_width: float, client_width: float) -> None:
        """Recompute arrow state. Called on scroll and on viewport resize."""
        self.scroll_left = scroll_left
        self.scroll_width = scroll_width
        self.client_width = client_width
        self.can_scroll_left = scroll_left > EDGE_SLACK
        self.can_scroll_right = scroll_left < scroll_width - client_width - EDGE_SLACK

    def on_scroll(self, scroll_left: float) -> None:
        self.measure(scroll_left, self.scroll_width, self.client_width)

    def on_resize(self, client_width: float, scroll_width: float | None = None) -> None:
        self.measure(self.scroll_left, self.scroll_width if scroll_width is None else scroll_width, client_width)

    def scroll(self, direction: str) -> float:
        """Scroll one step left or right and return the new offset."""
        if direction not in ("left", "right"):
            raise ValueError(f"Unknown direction {direction!r}")
        step = -SCROLL_STEP if direction == "left" else SCROLL_STEP
        max_left = max(self.scroll_width - self.client_width, 0.0)
        self.on_scroll(min(max(self.scroll_left + step, 0.0), max_left))
        return self.scroll_left
