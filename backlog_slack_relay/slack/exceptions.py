"""Custom exceptions for Slack delivery."""


class DeliveryError(Exception):
    """Raised when a Slack webhook answers with a non-2xx status or cannot be reached."""

    def __init__(self, status_code: int, body: str) -> None:
        """Initializes the exception with the HTTP status code and response body."""
        super().__init__(f"Slack webhook delivery failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.delivered = 0
