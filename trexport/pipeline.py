"""Timeline run orchestration: settings -> client -> processor."""

import logging

from pydantic import BaseModel, Field

from trexport.config import Settings, TimelineConfig
from trexport.services.traderepublic import (
    TradeRepublicClient,
    TradeRepublicConfig,
    create_trade_republic_client,
)
from trexport.timeline import ProcessingStats, TimelineApi, TimelineProcessor, TransactionEvent
from trexport.validation import validate_timeline_config

logger = logging.getLogger("trexport.pipeline")


class TimelineResult(BaseModel):
    events: list[TransactionEvent] = Field(default_factory=list)
    stats: ProcessingStats = Field(default_factory=ProcessingStats)


def build_client(settings: Settings) -> TradeRepublicClient:
    config = TradeRepublicConfig(
        base_url=settings.api.base_url,
        timeout_seconds=settings.api.timeout_seconds,
        max_retries=settings.api.max_retries,
        retry_backoff_seconds=settings.api.retry_backoff_seconds,
        max_connections=settings.api.max_connections,
        max_keepalive_connections=settings.api.max_keepalive_connections,
    )
    return create_trade_republic_client(settings.tr_session_token or None, config)


async def process(api: TimelineApi, config: TimelineConfig) -> TimelineResult:
    """Run one timeline processing pass against an already opened API."""
    validate_timeline_config(config)

    processor = TimelineProcessor(
        api,
        since_timestamp=config.since_timestamp,
        include_pending=config.include_pending,
        detail_timeout_seconds=config.detail_timeout_seconds,
        max_concurrent_details=config.max_concurrent_details,
    )
    try:
        events = await processor.process_timeline()
    finally:
        logger.info(f"Timeline statistics: {processor.get_statistics()}")

    return TimelineResult(events=events, stats=processor.stats)


async def run_timeline(settings: Settings) -> TimelineResult:
    """Fetch and enrich the timeline using the configured Trade Republic session."""
    if not settings.tr_session_token:
        logger.warning("TR_SESSION_TOKEN not set - requests will likely be rejected")

    async with build_client(settings) as client:
        return await process(client, settings.timeline)
