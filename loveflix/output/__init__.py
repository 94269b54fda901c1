"""Static renderings of the page."""
