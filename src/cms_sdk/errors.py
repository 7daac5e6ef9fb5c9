"""SDK error types."""

from __future__ import annotations


class CMSSDKError(RuntimeError):
    """Base SDK error."""


class AuthorizationError(CMSSDKError):
    """Caller has no identity or lacks administrator privilege."""


class InputValidationError(CMSSDKError):
    """Command input could not be turned into a valid request."""


class TransportError(CMSSDKError):
    """Server could not be reached or rejected the call."""


class RequestError(TransportError):
    """Server returned a structured HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | None = None,
        error_context: list[str] | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.error_context = error_context or []
        self.body = body


class UserLookupError(CMSSDKError, LookupError):
    """Requested user does not exist."""


class PaywallError(CMSSDKError):
    """Paywall fee could not be paid."""
