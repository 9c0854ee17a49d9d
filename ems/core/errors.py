"""
Domain failures raised by the lifecycle services.

Each carries the HTTP status it maps to; ems.main renders them as
{"detail": message}, the same shape FastAPI uses for HTTPException.
"""
from fastapi import status


class EMSError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(EMSError):
    """Malformed input: empty name, bad date range, unknown role."""


class NotFoundFailure(EMSError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ConflictFailure(EMSError):
    """Manager already assigned elsewhere, department already staffed."""


class InsufficientBalanceFailure(EMSError):
    def __init__(self, message: str, *, remaining: int, requested: int):
        super().__init__(message)
        self.remaining = remaining
        self.requested = requested


class InternalFailure(EMSError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
