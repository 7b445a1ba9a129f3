"""Relay error taxonomy.

Each error carries the HTTP status and machine-readable code it is reported
with, and renders itself as a RelayResponse.
"""

from fastapi import status

from services.rank_relay.app.core.schemas import AttemptResult, RelayResponse

ALL_ATTEMPTS_FAILED_HINT = (
    "Every upstream endpoint rejected the change. Check that the API key has "
    "group write scope for this group, that the upstream endpoints are "
    "reachable, and that groupId, userId and roleId exist and the role is "
    "assignable."
)


class RelayError(Exception):
    """Base class for errors reported to the caller as JSON."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "UNHANDLED"
    message: str = "Unhandled"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_response(self) -> RelayResponse:
        """Render as a RelayResponse."""
        return RelayResponse(ok=False, code=self.code, error=self.message)


class MethodNotAllowedError(RelayError):
    """HTTP verb not accepted by the endpoint."""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    code = "METHOD_NOT_ALLOWED"
    message = "Method Not Allowed"

    def __init__(self, method: str, allowed: tuple[str, ...]):
        super().__init__(f"Method {method} not allowed")
        self.method = method
        self.allowed = allowed

    def to_response(self) -> RelayResponse:
        return RelayResponse(
            ok=False,
            code=self.code,
            error=self.message,
            allowed=list(self.allowed),
        )


class MissingKeyError(RelayError):
    """Upstream credential is not configured."""

    code = "MISSING_KEY"
    message = "OPEN_CLOUD_KEY missing"


class BadJSONError(RelayError):
    """Body present but not parseable as JSON."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_JSON"
    message = "Invalid JSON body"


class InvalidBodyError(RelayError):
    """Body parsed but is not a JSON object."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_BODY"
    message = "Body must be a JSON object"


class MissingFieldsError(RelayError):
    """One or more rank change fields absent or not a positive integer."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "MISSING_FIELDS"
    message = "Missing or non-numeric groupId/userId/roleId"

    def __init__(self, invalid: list[str]):
        super().__init__(f"Invalid fields: {', '.join(invalid)}")
        self.invalid = invalid

    def to_response(self) -> RelayResponse:
        return RelayResponse(
            ok=False,
            code=self.code,
            error=self.message,
            invalid=self.invalid,
        )


class AllAttemptsFailedError(RelayError):
    """Every upstream candidate failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "ALL_ATTEMPTS_FAILED"
    message = "All upstream attempts failed"

    def __init__(self, attempts: list[AttemptResult]):
        super().__init__()
        self.attempts = attempts

    def to_response(self) -> RelayResponse:
        return RelayResponse(
            ok=False,
            code=self.code,
            error=self.message,
            hint=ALL_ATTEMPTS_FAILED_HINT,
            attempts=self.attempts,
        )


def unhandled_response(exc: BaseException) -> RelayResponse:
    """Render an unexpected fault as a safe RelayResponse."""
    return RelayResponse(
        ok=False,
        code="UNHANDLED",
        error="Unhandled",
        detail=str(exc) or type(exc).__name__,
    )
