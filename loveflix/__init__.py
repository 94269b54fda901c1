"""Loveflix: a password-gated love story, timeline and memory browser."""
