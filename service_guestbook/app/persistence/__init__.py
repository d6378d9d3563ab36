"""
Persistence package for Guestbook Service.
"""

from .postgres import PostgresGuestbookStore, SEPARATOR, encode_entries, decode_entries

__all__ = ["PostgresGuestbookStore", "SEPARATOR", "encode_entries", "decode_entries"]
