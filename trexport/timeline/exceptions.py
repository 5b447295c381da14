"""Exceptions raised by the timeline pipeline."""


class ProcessingError(Exception):
    """Timeline processing failed as a whole.

    Raised for the one systemic condition (no details received at all) and
    for any unexpected error, which is chained as ``__cause__``.
    """

    pass


class TimestampParseError(ValueError):
    """Event timestamp could not be parsed as an instant."""

    pass
