"""Exception types shared by the loader, viewer and exporter."""


class DeckError(Exception):
    """Base class for deck errors."""


class ConfigError(DeckError):
    """The slide configuration is missing or malformed."""


class FetchError(DeckError):
    """A configuration or fragment fetch failed."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"Failed to load {location}: {reason}")
        self.location = location
        self.reason = reason


class ExportError(DeckError):
    """PDF export could not complete."""
