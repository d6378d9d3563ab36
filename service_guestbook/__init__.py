"""Guestbook service package."""
