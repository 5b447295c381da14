from .client import TradeRepublicClient, create_trade_republic_client
from .config import TradeRepublicConfig
from .exceptions import (
    TradeRepublicAPIError,
    TradeRepublicAuthError,
    TradeRepublicNotFoundError,
    TradeRepublicRateLimitError,
)
from .models import ApiError, ApiResponse

__all__ = [
    "TradeRepublicClient",
    "create_trade_republic_client",
    "TradeRepublicConfig",
    "TradeRepublicAPIError",
    "TradeRepublicAuthError",
    "TradeRepublicNotFoundError",
    "TradeRepublicRateLimitError",
    "ApiError",
    "ApiResponse",
]
