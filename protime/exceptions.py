"""Error types raised by the Protime automation."""


class ProtimeError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(ProtimeError):
    """Required configuration (e.g. PROTIME_URL) is missing or invalid."""


class BrowserNotInitializedError(ProtimeError):
    """A browser interaction was attempted before init() or after close()."""


class ClockingError(ProtimeError):
    """An expected element of the calendar page could not be used."""
