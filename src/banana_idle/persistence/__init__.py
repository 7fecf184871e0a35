"""Persistence subsystem for Banana Idle.

This package provides:
- A codec projecting GameState to a JSON-friendly snapshot and back
- Tolerant decoding: absent or malformed optional fields fall back to defaults
- A SnapshotStore that handles atomic disk I/O, a backup copy, and
  corruption recovery (falls back to a fresh game instead of crashing)
"""

from .codec import decode_snapshot, deserialize, encode_snapshot, serialize
from .errors import CorruptSnapshotError, SnapshotError
from .storage import SnapshotStore, default_save_root

__all__ = [
    "decode_snapshot",
    "deserialize",
    "encode_snapshot",
    "serialize",
    "CorruptSnapshotError",
    "SnapshotError",
    "SnapshotStore",
    "default_save_root",
]
