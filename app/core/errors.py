"""
Domain errors raised by the rental store, identity check and rent advisor.

Each error carries the HTTP status it maps to so `app.main` can render all of
them through a single exception handler.
"""
from typing import Dict, Optional


class RentalAppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class ValidationError(RentalAppError):
    """One or more fields are missing or out of range. Nothing was persisted."""
    status_code = 422

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        super().__init__(message or "Invalid rental data")

    def to_dict(self) -> dict:
        return {"detail": self.message, "errors": self.errors}


class AuthError(RentalAppError):
    status_code = 401


class NotFoundError(RentalAppError):
    status_code = 404


class StoreError(RentalAppError):
    status_code = 502


class SuggestionFailed(RentalAppError):
    status_code = 502


class SuggestionUnavailable(SuggestionFailed):
    status_code = 503


class ServiceUnavailable(RentalAppError):
    """A backing service (Supabase client, identity provider) is not configured."""
    status_code = 503
