"""Builders and an in-memory timeline API shared by the tests."""

import asyncio
from datetime import UTC, datetime
from typing import Any

# 2025-01-01T00:00:00Z
SINCE = 1735689600


def tr_timestamp(epoch: int) -> str:
    """Format epoch seconds the way Trade Republic does (``...707+0000``)."""
    return datetime.fromtimestamp(epoch, tz=UTC).strftime("%Y-%m-%dT%H:%M:%S.707+0000")


def make_item(
    event_id: str,
    epoch: int = SINCE + 3600,
    amount: float | None = None,
    currency: str = "EUR",
    **extra: Any,
) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": event_id,
        "title": f"Event {event_id}",
        "subtitle": "Savings plan",
        "timestamp": tr_timestamp(epoch),
        "eventType": "TRADE_INVOICE",
        "status": "EXECUTED",
    }
    if amount is not None:
        item["amount"] = {"value": amount, "currency": currency}
    item.update(extra)
    return item


def make_page(items: list[Any], after: str | None = None) -> dict[str, Any]:
    return {"data": {"items": items, "cursors": {"after": after}}}


class FakeTimelineApi:
    """In-memory TimelineApi keyed by cursor; unknown cursors yield an empty page."""

    def __init__(
        self,
        timeline: dict[str | None, Any] | None = None,
        activity: dict[str | None, Any] | None = None,
        details: dict[str, Any] | None = None,
        failing_details: set[str] | None = None,
        slow_details: set[str] | None = None,
        detail_delay: float = 0.0,
    ):
        self.timeline = timeline or {}
        self.activity = activity or {}
        self.details = details or {}
        self.failing_details = failing_details or set()
        self.slow_details = slow_details or set()
        self.detail_delay = detail_delay

        self.timeline_cursors: list[str | None] = []
        self.activity_cursors: list[str | None] = []
        self.detail_requests: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_timeline_page(self, cursor: str | None = None) -> dict[str, Any]:
        self.timeline_cursors.append(cursor)
        return self.timeline.get(cursor, make_page([]))

    async def fetch_activity_page(self, cursor: str | None = None) -> dict[str, Any]:
        self.activity_cursors.append(cursor)
        return self.activity.get(cursor, make_page([]))

    async def fetch_detail(self, event_id: str) -> dict[str, Any]:
        self.detail_requests.append(event_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if event_id in self.slow_details:
                await asyncio.sleep(3600)
            await asyncio.sleep(self.detail_delay)
            if event_id in self.failing_details:
                raise RuntimeError(f"detail request for {event_id} failed")
            if event_id in self.details:
                return self.details[event_id]
            return {"data": {"id": event_id, "sections": [{"title": "Overview"}]}}
        finally:
            self.in_flight -= 1


