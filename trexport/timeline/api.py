"""Contract of the remote API consumed by the timeline processor."""

from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

PageFetcher = Callable[[str | None], Awaitable[dict[str, Any]]]


@runtime_checkable
class TimelineApi(Protocol):
    """Async source of timeline pages and event details.

    Page responses have the envelope
    ``{"data": {"items": [...], "cursors": {"after": str | None}}}``,
    detail responses ``{"data": {...}}``.
    """

    async def fetch_timeline_page(self, cursor: str | None = None) -> dict[str, Any]: ...

    async def fetch_activity_page(self, cursor: str | None = None) -> dict[str, Any]: ...

    async def fetch_detail(self, event_id: str) -> dict[str, Any]: ...
