from typing import Any, Optional


class DarajaError(Exception):
    """Base exception for Daraja API errors"""

    def __init__(self, message: str, detail: Optional[Any] = None):
        """
        Args:
            message: Human readable description
            detail: Provider response body (or error text) when available
        """
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class AccessTokenError(DarajaError):
    """Raised when an OAuth access token cannot be obtained"""
    pass


class StkPushError(DarajaError):
    """Raised when the STK push request fails at the network or HTTP level"""
    pass
