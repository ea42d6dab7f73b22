"""Elements Python SDK."""

from .app import App
from .authenticator import AuthenticationStrategy, Authenticator, GrantTypeStrategy
from .base_client import BaseClient
from .config import ElementsConfig, TelemetryConfig
from .errors import (
    AuthenticationError,
    ElementsError,
    ErrorCode,
    ErrorKind,
    ErrorResponse,
    InvalidAppKeyError,
    InvalidClaimsError,
    InvalidConfigError,
    InvalidSignatureError,
    TokenExpiredError,
    TransportError,
    UnsupportedRedirectError,
    UnsupportedStatusCodeError,
)
from .models import (
    AuthenticateOptions,
    AuthenticatePayload,
    AuthenticationResponse,
    RequestOptions,
    ServiceAddress,
    TokenWithExpiry,
)
from .sdk_info import SDKInfo
from .telemetry import configure_telemetry
from .types import Failure, RequestResult, Success

__all__ = [
    "App",
    "AuthenticateOptions",
    "AuthenticatePayload",
    "AuthenticationError",
    "AuthenticationResponse",
    "AuthenticationStrategy",
    "Authenticator",
    "BaseClient",
    "ElementsConfig",
    "ElementsError",
    "ErrorCode",
    "ErrorKind",
    "ErrorResponse",
    "Failure",
    "GrantTypeStrategy",
    "InvalidAppKeyError",
    "InvalidClaimsError",
    "InvalidConfigError",
    "InvalidSignatureError",
    "RequestOptions",
    "RequestResult",
    "SDKInfo",
    "ServiceAddress",
    "Success",
    "TelemetryConfig",
    "TokenExpiredError",
    "TokenWithExpiry",
    "TransportError",
    "UnsupportedRedirectError",
    "UnsupportedStatusCodeError",
    "configure_telemetry",
]

__version__ = "0.1.0"

