from pydantic import BaseModel


class TradeRepublicConfig(BaseModel):
    """Configuration for the Trade Republic timeline client."""

    base_url: str = "https://api.traderepublic.com/api/v1"
    timeline_transactions_path: str = "timeline/transactions"
    timeline_activity_path: str = "timeline/activity-log"
    timeline_detail_path: str = "timeline/details/{event_id}"
    session_cookie_name: str = "tr_session"
    timeout_seconds: float = 30.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0
