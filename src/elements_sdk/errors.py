"""Error classes for the Elements SDK.

Every failure the SDK surfaces is one variant of a closed taxonomy. Each
variant is an exception class tagged with an ``ErrorKind`` so callers can
either ``except`` a specific class or branch on ``error.kind`` when the
error arrives as a value inside a ``Failure``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from .models import AuthenticationResponse


class ErrorKind(StrEnum):
    """Taxonomy variants."""

    INVALID_APP_KEY = "invalid_app_key"
    TRANSPORT = "transport"
    UNSUPPORTED_REDIRECT = "unsupported_redirect"
    ERROR_RESPONSE = "error_response"
    UNSUPPORTED_STATUS = "unsupported_status"
    INVALID_CLAIMS = "invalid_claims"
    AUTHENTICATION = "authentication"
    INVALID_TOKEN = "invalid_token"
    INVALID_CONFIG = "invalid_config"


class ErrorCode(StrEnum):
    """Standardized error codes for the Elements SDK."""

    # Configuration errors (1xxx)
    INVALID_APP_KEY = "CFG_1001"
    INVALID_CONFIG = "CFG_1002"

    # Network errors (2xxx)
    TRANSPORT_ERROR = "NET_2001"

    # Response errors (3xxx)
    UNSUPPORTED_REDIRECT = "RSP_3001"
    ERROR_RESPONSE = "RSP_3002"
    UNSUPPORTED_STATUS = "RSP_3003"

    # Token errors (4xxx)
    INVALID_CLAIMS = "TOK_4001"
    INVALID_SIGNATURE = "TOK_4002"
    TOKEN_EXPIRED = "TOK_4003"

    # Authentication errors (5xxx)
    AUTHENTICATION_FAILED = "AUTH_5001"


class ElementsError(Exception):
    """Base error for the Elements SDK with structured error information."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "kind": self.kind.value,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidAppKeyError(ElementsError):
    """App key is not of the form ``id:secret``."""

    kind = ErrorKind.INVALID_APP_KEY

    def __init__(self, message: str = "Invalid app key") -> None:
        # The offending key is never echoed: it may contain the secret.
        super().__init__(message, ErrorCode.INVALID_APP_KEY)


class InvalidConfigError(ElementsError):
    """Invalid SDK configuration."""

    kind = ErrorKind.INVALID_CONFIG

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )


class TransportError(ElementsError):
    """The request never produced an HTTP response."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str = "Transport failure",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TRANSPORT_ERROR,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class UnsupportedRedirectError(ElementsError):
    """The service answered with a 3xx; redirects are never followed."""

    kind = ErrorKind.UNSUPPORTED_REDIRECT

    def __init__(
        self,
        status_code: int,
        *,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            f"Unsupported Redirect Response: {status_code}",
            ErrorCode.UNSUPPORTED_REDIRECT,
            status_code=status_code,
            correlation_id=correlation_id,
        )


class UnsupportedStatusCodeError(ElementsError):
    """The service answered with a status outside the 2xx-5xx ranges."""

    kind = ErrorKind.UNSUPPORTED_STATUS

    def __init__(
        self,
        status_code: int,
        *,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            f"Unsupported Response Code: {status_code}",
            ErrorCode.UNSUPPORTED_STATUS,
            status_code=status_code,
            correlation_id=correlation_id,
        )


class ErrorResponse(ElementsError):
    """A 4xx or 5xx answer from an Elements service.

    ``error``, ``error_description`` and ``error_uri`` mirror the JSON error
    body the platform returns. When the body cannot be parsed, ``error``
    carries a generic message and ``error_description`` is empty.
    """

    kind = ErrorKind.ERROR_RESPONSE

    def __init__(
        self,
        status_code: int,
        error: str,
        *,
        headers: Mapping[str, str] | None = None,
        error_description: str | None = None,
        error_uri: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            error,
            ErrorCode.ERROR_RESPONSE,
            status_code=status_code,
            correlation_id=correlation_id,
            details={
                "error_description": error_description,
                "error_uri": error_uri,
            },
        )
        self.error = error
        self.error_description = error_description
        self.error_uri = error_uri
        self.headers: dict[str, str] = dict(headers or {})


class InvalidClaimsError(ElementsError):
    """A token cannot be built because identity fields are missing."""

    kind = ErrorKind.INVALID_CLAIMS

    def __init__(
        self,
        message: str = "Token claims are incomplete",
        *,
        missing: list[str] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CLAIMS,
            details={"missing": missing} if missing else None,
        )
        self.missing = missing or []


class InvalidSignatureError(ElementsError):
    """Token failed signature or claim verification."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Token is invalid") -> None:
        super().__init__(message, ErrorCode.INVALID_SIGNATURE, status_code=401)


class TokenExpiredError(ElementsError):
    """Token signature is valid but its ``exp`` has passed."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message, ErrorCode.TOKEN_EXPIRED, status_code=401)


class AuthenticationError(ElementsError):
    """An inbound authentication payload was rejected."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(
        self,
        error: str,
        error_description: str = "",
        *,
        status_code: int = 401,
    ) -> None:
        super().__init__(
            error_description or error,
            ErrorCode.AUTHENTICATION_FAILED,
            status_code=status_code,
            details={"error": error, "error_description": error_description},
        )
        self.error = error
        self.error_description = error_description

    def to_response(self) -> AuthenticationResponse:
        """Render this error as the body an auth endpoint should return."""
        from .models import AuthenticationResponse

        return AuthenticationResponse(
            status=self.status_code or 401,
            body={"error": self.error, "error_description": self.error_description},
        )
