from typing import Any, Dict, Optional

from fastapi import status


class TradeDeskError(Exception):
    """Base class for errors raised by the service layer.

    Each subclass carries the HTTP status and a stable error code so callers
    can branch on the kind of failure rather than on the message text.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            },
        }


class NotFoundError(TradeDeskError):
    """Referenced entity does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class InvalidArgumentError(TradeDeskError):
    """Malformed or out-of-range input"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_ARGUMENT"


class ConflictError(TradeDeskError):
    """Invalid state transition or duplicate resource"""
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class InsufficientFundsError(TradeDeskError):
    """Wallet debit exceeds the available balance"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INSUFFICIENT_FUNDS"


class AuthenticationError(TradeDeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_FAILED"


class PermissionDeniedError(TradeDeskError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "PERMISSION_DENIED"
