"""Errors raised by the ledger store and request parsing, each carrying its HTTP status."""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Request data is missing or malformed."""
    status_code = 400


class DuplicateError(LedgerError):
    """Attempted to insert a duplicate entity."""
    status_code = 400


class AuthenticationError(LedgerError):
    """Credentials did not match."""
    status_code = 401


class ForbiddenError(LedgerError):
    """Entity belongs to another user."""
    status_code = 403


class NotFoundError(LedgerError):
    """Entity not found in storage."""
    status_code = 404
