"""Error types raised by the WAN core."""


class WANError(Exception):
    """Base class for all WAN network errors."""


class InvalidConfigurationError(WANError, ValueError):
    """Raised when generation or connection parameters are out of range."""


class InvalidArgumentError(WANError, ValueError):
    """Raised when a caller passes a missing node reference."""


class NetworkNotGeneratedError(WANError, RuntimeError):
    """Raised when a route is requested before any network was generated."""
