from ..errors import BananaIdleError


class SnapshotError(BananaIdleError):
    """Base exception for save/load errors."""


class CorruptSnapshotError(SnapshotError):
    """Raised when snapshot text cannot be parsed into a snapshot mapping."""
