from __future__ import annotations

import logging
import os
import shutil
import threading
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

from ..catalog import Catalog
from ..state import GameState
from .codec import decode_snapshot
from .errors import SnapshotError

logger = logging.getLogger(__name__)

APP_NAME = "banana-idle"


def default_save_root() -> Path:
    """Platform-specific data directory, e.g. ~/.local/share/banana-idle on Linux."""
    return Path(user_data_dir(APP_NAME, appauthor=False))


class SnapshotStore:
    """Filesystem-backed storage for the single game snapshot.

    Writes are atomic (temp file + fsync + replace) and the previous snapshot
    is kept as a .bak copy so a torn or corrupted primary can be recovered.
    The store only ever sees encoded text; it never holds the live state.
    """

    def __init__(self, root: Optional[Path] = None, filename: str = "snapshot.json") -> None:
        self.root = Path(root) if root is not None else default_save_root()
        self.save_dir = self.root / "save"
        self.path = self.save_dir / filename
        self.backup_path = self.path.with_suffix(self.path.suffix + ".bak")
        self._lock = threading.Lock()

    def exists(self) -> bool:
        return self.path.exists()

    def write_text(self, text: str) -> Path:
        """Write snapshot text atomically.

        Raises OSError on failure.
        """
        with self._lock:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            logger.debug("Writing snapshot to temporary file: %s", tmp_path)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            if self.path.exists():
                shutil.copy2(self.path, self.backup_path)
            os.replace(tmp_path, self.path)
            logger.debug("Snapshot written to %s", self.path)
            return self.path

    def read_text(self, path: Optional[Path] = None) -> str:
        path = path or self.path
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError as e:
            raise SnapshotError(f"Snapshot file not found: {path}") from e

    def load(self, catalog: Catalog) -> Optional[GameState]:
        """Load the saved game, or None when there is nothing usable.

        A corrupt primary falls back to the backup copy; if both are unusable
        the error is logged and None is returned so the caller starts fresh.
        """
        if not self.path.exists() and not self.backup_path.exists():
            logger.info("No snapshot at %s; starting a new game", self.path)
            return None
        for candidate in (self.path, self.backup_path):
            if not candidate.exists():
                continue
            try:
                state = decode_snapshot(self.read_text(candidate), catalog)
            except (SnapshotError, OSError, UnicodeDecodeError) as e:
                logger.error("Failed to read snapshot %s: %s", candidate, e)
                continue
            logger.info("Loaded snapshot from %s", candidate)
            return state
        logger.error("No readable snapshot in %s; starting from a fresh game", self.save_dir)
        return None

    def clear(self) -> None:
        for path in (self.path, self.backup_path):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
