class TradeRepublicAPIError(Exception):
    """Base exception for Trade Republic API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class TradeRepublicAuthError(TradeRepublicAPIError):
    """Session token missing, expired or rejected."""

    pass


class TradeRepublicRateLimitError(TradeRepublicAPIError):
    """Rate limit exceeded."""

    pass


class TradeRepublicNotFoundError(TradeRepublicAPIError):
    """Resource not found."""

    pass
