from .api import TimelineApi
from .exceptions import ProcessingError, TimestampParseError
from .models import Amount, ProcessingStats, TransactionEvent, parse_timestamp
from .processor import DETAIL_TIMEOUT_SECONDS, TimelineProcessor

__all__ = [
    "TimelineApi",
    "TimelineProcessor",
    "DETAIL_TIMEOUT_SECONDS",
    "ProcessingError",
    "TimestampParseError",
    "Amount",
    "ProcessingStats",
    "TransactionEvent",
    "parse_timestamp",
]
