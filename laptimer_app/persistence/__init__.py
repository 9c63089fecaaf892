"""
Session persistence.

A small key-value port with in-memory and SQLite implementations, the lap
sequence codec, and the session store that maps clock and ledger state onto
storage keys.
"""
from .base import KeyValueStore
from .codec import decode_laps, encode_laps
from .memory_store import MemoryKeyValueStore
from .session_store import SessionStore
from .sqlite_store import SqliteKeyValueStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "SessionStore",
    "encode_laps",
    "decode_laps",
]
