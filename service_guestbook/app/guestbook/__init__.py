"""
Guestbook domain package.
"""

from .manager import GuestbookManager

__all__ = ["GuestbookManager"]
