from __future__ import annotations

import math
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import TimestampParseError


def _parse_instant(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp has no UTC offset: {value}")
    return parsed.astimezone(UTC)


def parse_timestamp(value: str | None) -> datetime:
    """Parse a Trade Republic timestamp such as ``2025-07-16T12:37:00.707+0000``.

    The ``+0000`` offset is rewritten to ``Z`` before parsing. If that fails
    the raw string is parsed as-is.

    Raises:
        TimestampParseError: If neither form is an offset-aware ISO-8601 instant
    """
    if not isinstance(value, str) or not value:
        raise TimestampParseError(f"Missing timestamp: {value!r}")

    try:
        return _parse_instant(value.replace("+0000", "Z"))
    except ValueError:
        try:
            return _parse_instant(value)
        except ValueError as e:
            raise TimestampParseError(f"Unparseable timestamp: {value!r}") from e


class Amount(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    value: Decimal = Decimal(0)
    currency: str | None = None

    def __str__(self) -> str:
        return f"{self.value:.2f} {self.currency}"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Amount:
        if not isinstance(data, dict):
            raise TypeError(f"Amount must be an object, got {type(data).__name__}")
        value = data.get("value")
        return cls(value=Decimal(0) if value is None else value, currency=data.get("currency"))


class TransactionEvent(BaseModel):
    """One entry of the timeline transactions or activity log feed.

    Numeric scalars in text fields are kept as their string form.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    title: str | None = None
    subtitle: str | None = None
    timestamp: str | None = None
    event_type: str | None = Field(default=None, alias="eventType")
    amount: Amount | None = None
    status: str | None = None
    details: Any = None

    @property
    def has_amount(self) -> bool:
        """Monetary events carry an amount and are enriched with details."""
        return self.amount is not None

    def timestamp_as_datetime(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def epoch_seconds(self) -> int:
        return math.floor(self.timestamp_as_datetime().timestamp())

    def attach_details(self, details: Any) -> None:
        self.details = details

    def __str__(self) -> str:
        return (
            f"TransactionEvent(id='{self.id}', title='{self.title}', "
            f"timestamp='{self.timestamp}', event_type='{self.event_type}', "
            f"amount={self.amount})"
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TransactionEvent:
        if not isinstance(data, dict):
            raise TypeError(f"Event item must be an object, got {type(data).__name__}")

        raw_id = data.get("id")
        raw_amount = data.get("amount")
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            title=data.get("title"),
            subtitle=data.get("subtitle"),
            timestamp=data.get("timestamp"),
            event_type=data.get("eventType"),
            amount=Amount.from_api(raw_amount) if raw_amount is not None else None,
            status=data.get("status"),
            details=data.get("details"),
        )


class ProcessingStats(BaseModel):
    """Counters of one timeline run."""

    total_events: int = 0
    details_requested: int = 0
    details_received: int = 0

    def __str__(self) -> str:
        return (
            f"Events: {self.total_events}, "
            f"Details requested: {self.details_requested}, "
            f"Details received: {self.details_received}"
        )
