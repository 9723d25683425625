"""Exceptions raised by the TimePRO MCP server."""


class TimeProError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(TimeProError):
    """A required setting is missing or invalid. Fatal at startup."""


class ValidationError(TimeProError, ValueError):
    """Tool arguments were rejected before any remote call was made.

    Subclasses ValueError so pydantic validators can raise it directly.
    """

    def __init__(self, message: str, fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.fields = tuple(fields)


class InvalidTimeRange(ValidationError):
    """A negative break, or net worked time that would be zero or negative."""

    def __init__(self, start: str, end: str, break_minutes: float):
        self.start = start
        self.end = end
        self.break_minutes = break_minutes
        super().__init__(
            f"Invalid time range: start {start}, end {end}, break {break_minutes:g} minutes. "
            "End must be after start and the break must be shorter than the time between them.",
            fields=("start_time", "end_time", "break_minutes"),
        )


class RemoteServiceError(TimeProError):
    """TimePRO answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"TimePRO API error ({status_code}): {body}")
