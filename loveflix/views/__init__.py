"""Presentation views: journey scroller, netflix-style browser and their overlays."""
