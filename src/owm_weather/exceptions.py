"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""


class WeatherParseError(Exception):
    """Raised when a provider response is not valid JSON of the expected shape."""


class WeatherProviderError(Exception):
    """Raised when a weather provider request fails or returns a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
