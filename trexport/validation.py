"""Validation of user supplied options."""

from datetime import UTC, date, datetime

from trexport.config import TimelineConfig


class InputValidationError(Exception):
    """One or more user supplied values are invalid."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors if errors else [message]

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return self.errors[0]
        return f"{self.message}: {', '.join(self.errors)}"


def parse_since(value: str | None) -> int:
    """Convert a ``--since`` value to epoch seconds.

    Accepts epoch seconds, a date (``2025-01-31``, midnight UTC) or an
    ISO-8601 timestamp with offset. Empty means no lower bound.
    """
    if value is None or not value.strip():
        return 0

    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)

    try:
        day = date.fromisoformat(value)
    except ValueError:
        pass
    else:
        return int(datetime(day.year, day.month, day.day, tzinfo=UTC).timestamp())

    try:
        moment = datetime.fromisoformat(value)
    except ValueError as e:
        raise InputValidationError(
            f"Invalid --since value '{value}': expected epoch seconds, YYYY-MM-DD "
            "or an ISO-8601 timestamp"
        ) from e

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp())


def validate_timeline_config(config: TimelineConfig) -> None:
    """Collect every problem with the timeline settings before raising."""
    errors: list[str] = []

    if config.detail_timeout_seconds <= 0:
        errors.append(
            f"detail_timeout_seconds must be positive, got {config.detail_timeout_seconds}"
        )
    if config.max_concurrent_details is not None and config.max_concurrent_details < 1:
        errors.append(
            f"max_concurrent_details must be at least 1, got {config.max_concurrent_details}"
        )
    now = int(datetime.now(tz=UTC).timestamp())
    if config.since_timestamp > now:
        errors.append(f"since_timestamp {config.since_timestamp} lies in the future")

    if errors:
        raise InputValidationError("Invalid timeline configuration", errors)
