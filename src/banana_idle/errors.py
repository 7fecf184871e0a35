class BananaIdleError(Exception):
    """Base error for Banana Idle domain exceptions."""


class PreconditionError(BananaIdleError, ValueError):
    """Raised when a caller breaks an operation's contract (negative quantity, etc.)."""


class UnknownIdError(BananaIdleError, KeyError):
    """Raised when a producer, upgrade or achievement id is not in the catalog."""


class CatalogError(BananaIdleError):
    """Raised when catalog data fails validation."""


class ConfigError(BananaIdleError):
    """Raised when engine configuration values are invalid."""
