"""Timeline processing: paginate both feeds, filter by time, enrich with details."""

import asyncio
import contextlib
import logging
from datetime import UTC, datetime
from typing import Any

from .api import PageFetcher, TimelineApi
from .exceptions import ProcessingError, TimestampParseError
from .models import ProcessingStats, TransactionEvent

logger = logging.getLogger(__name__)

DETAIL_TIMEOUT_SECONDS = 60.0


class TimelineProcessor:
    """Collects transaction events from the timeline and activity log feeds.

    Usage:
        processor = TimelineProcessor(client, since_timestamp=1735689600)
        events = await processor.process_timeline()
        logger.info(processor.get_statistics())
    """

    def __init__(
        self,
        api: TimelineApi,
        since_timestamp: int = 0,
        include_pending: bool = False,
        detail_timeout_seconds: float = DETAIL_TIMEOUT_SECONDS,
        max_concurrent_details: int | None = None,
    ):
        """Initialize the processor.

        Args:
            api: Source of timeline pages and event details
            since_timestamp: Lower bound in epoch seconds, <= 0 disables it
            include_pending: Reserved, pending events are not excluded yet
            detail_timeout_seconds: Overall deadline for all detail fetches
            max_concurrent_details: Cap on in-flight detail fetches, None for no cap
        """
        self.api = api
        self.since_timestamp = since_timestamp
        self.include_pending = include_pending
        self.detail_timeout_seconds = detail_timeout_seconds
        self.max_concurrent_details = max_concurrent_details

        self._events: list[TransactionEvent] = []
        self._requested_details = 0
        self._received_details = 0

    async def process_timeline(self) -> list[TransactionEvent]:
        """Load both feeds and enrich monetary events with their details.

        Returns:
            Events in append order: timeline transactions, then activity log

        Raises:
            ProcessingError: If no detail was received although some were
                requested, or if anything else fails along the way
        """
        logger.info(f"Starting timeline processing from timestamp: {self.since_timestamp}")
        self._events = []
        self._requested_details = 0
        self._received_details = 0

        try:
            logger.info("Requesting timeline transactions with pagination...")
            await self._paginate("timeline transactions", self.api.fetch_timeline_page)

            logger.info("Requesting timeline activity log with pagination...")
            await self._paginate("timeline activity log", self.api.fetch_activity_page)

            await self._request_all_details()

            logger.info(
                f"Timeline processing completed. Found {len(self._events)} events, "
                f"{self._received_details} with details"
            )

            if self._requested_details > 0 and self._received_details == 0:
                raise ProcessingError("Failed to receive any transaction details")

            return list(self._events)

        except ProcessingError:
            raise
        except Exception as e:
            raise ProcessingError(f"Timeline processing failed: {e}") from e

    async def _paginate(self, feed: str, fetch_page: PageFetcher) -> int:
        """Follow ``data.cursors.after`` until the feed ends or stops being relevant.

        Feeds are newest first, so the first page without a single in-range
        event ends the loop. That page is still filtered into the results.

        Returns:
            Number of pages fetched
        """
        cursor: str | None = None
        page_count = 0
        has_more_data = True
        found_relevant_data = True

        while has_more_data and found_relevant_data:
            page_count += 1
            cursor_info = f" (cursor: {cursor[:8]}...)" if cursor is not None else ""
            logger.info(f"Loading {feed} page {page_count}{cursor_info}")

            response = await fetch_page(cursor)

            data = response.get("data") if isinstance(response, dict) else None
            if not isinstance(data, dict):
                logger.warning(f"No 'data' field in {feed} response")
                break
            if "items" not in data:
                logger.warning(f"No 'items' field in {feed} data")
                break

            items = data["items"]
            item_count = len(items) if isinstance(items, list) else 0
            logger.info(f"Processing {item_count} {feed} items from page {page_count}")

            found_relevant_data = self._process_items(feed, items)

            cursor = self._next_cursor(data)
            has_more_data = cursor is not None

        logger.info(f"{feed.capitalize()} pagination completed after {page_count} pages")
        return page_count

    @staticmethod
    def _next_cursor(data: dict[str, Any]) -> str | None:
        cursors = data.get("cursors")
        if not isinstance(cursors, dict):
            return None
        after = cursors.get("after")
        if after is None:
            return None
        return str(after)

    def _process_items(self, feed: str, items: Any) -> bool:
        """Parse and filter one page of items.

        Returns:
            True if any item on the page lies within the time range
        """
        found_relevant_data = False

        if not isinstance(items, list):
            return found_relevant_data

        for item in items:
            try:
                event = TransactionEvent.from_api(item)
            except (TypeError, ValueError) as e:
                logger.warning(f"Could not parse {feed} event: {e}")
                continue

            if self.is_event_within_time_range(event):
                found_relevant_data = True

            if self.should_include_event(event):
                self._events.append(event)
                logger.debug(f"Added {feed} event: {event.id}")

        return found_relevant_data

    def is_event_within_time_range(self, event: TransactionEvent) -> bool:
        """Pagination stop check. Unparseable timestamps count as in range."""
        if self.since_timestamp <= 0:
            return True

        try:
            return event.epoch_seconds() >= self.since_timestamp
        except TimestampParseError:
            logger.warning(f"Could not parse timestamp for event: {event.id}")
            return True

    def should_include_event(self, event: TransactionEvent) -> bool:
        """Inclusion filter. Unparseable timestamps are included."""
        if self.since_timestamp > 0:
            try:
                event_seconds = event.epoch_seconds()
            except TimestampParseError:
                logger.warning(f"Could not parse timestamp for event: {event.id}")
            else:
                if event_seconds < self.since_timestamp:
                    since = datetime.fromtimestamp(self.since_timestamp, tz=UTC)
                    logger.debug(
                        f"Filtering out event {event.id} from {event.timestamp} "
                        f"(before since timestamp {since.isoformat()})"
                    )
                    return False

        # Status filtering (include_pending) is left to the export step
        return True

    async def _request_all_details(self) -> None:
        monetary_events = [event for event in self._events if event.has_amount]
        if not monetary_events:
            return

        semaphore = (
            asyncio.Semaphore(self.max_concurrent_details)
            if self.max_concurrent_details
            else None
        )

        tasks: list[asyncio.Task[None]] = []
        for event in monetary_events:
            self._requested_details += 1
            tasks.append(
                asyncio.create_task(
                    self._request_event_details(event, semaphore),
                    name=f"details-{event.id}",
                )
            )

        _, pending = await asyncio.wait(tasks, timeout=self.detail_timeout_seconds)

        if pending:
            logger.warning(
                f"Timeout waiting for transaction details. Proceeding with "
                f"{self._received_details} of {self._requested_details} details received"
            )
            for task in pending:
                task.cancel()

    async def _request_event_details(
        self, event: TransactionEvent, semaphore: asyncio.Semaphore | None
    ) -> None:
        try:
            async with semaphore or contextlib.nullcontext():
                response = await self.api.fetch_detail(event.id)
        except Exception as e:
            logger.warning(f"Failed to get details for event: {event.id}: {e}")
            return

        details = response.get("data") if isinstance(response, dict) else None
        if details is None:
            logger.debug(f"No details in response for event: {event.id}")
            return

        event.attach_details(details)
        self._received_details += 1
        logger.debug(f"Received details for event: {event.id}")

    @property
    def stats(self) -> ProcessingStats:
        return ProcessingStats(
            total_events=len(self._events),
            details_requested=self._requested_details,
            details_received=self._received_details,
        )

    def get_statistics(self) -> str:
        """Human-readable processing statistics."""
        return str(self.stats)
