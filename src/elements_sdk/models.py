"""Pydantic models for the Elements SDK.

Frozen pydantic v2 models: options and claims are values, and every
"change" produces a new instance.
"""

from __future__ import annotations

from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)

from .errors import InvalidAppKeyError

# Superuser tokens live for five minutes and are backdated by thirty seconds
# to tolerate clock skew between this process and the platform.
SUPERUSER_TOKEN_TTL = 5 * 60
SUPERUSER_TOKEN_LEEWAY = 30

# Default lifetime of user access tokens.
DEFAULT_TOKEN_EXPIRY = 24 * 60 * 60


class AppKey(BaseModel):
    """An app credential split into its public id and signing secret."""

    model_config = ConfigDict(frozen=True)

    key_id: str = Field(..., min_length=1)
    secret: SecretStr

    @classmethod
    def parse(cls, app_key: str) -> Self:
        """Split ``"id:secret"`` on the first colon.

        Raises:
            InvalidAppKeyError: If either half is empty or there is no colon.
        """
        key_id, sep, secret = app_key.partition(":")
        if not sep or not key_id or not secret:
            raise InvalidAppKeyError()
        return cls(key_id=key_id, secret=SecretStr(secret))


class RequestOptions(BaseModel):
    """A request against a service, relative to the tenant or service root."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=1)
    path: str
    jwt: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    params: dict[str, Any] | None = None

    @field_validator("method")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.upper()

    def with_overrides(self, **kwargs: Any) -> Self:
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=kwargs)


class ServiceAddress(BaseModel):
    """A specific versioned instance of a platform service."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1)
    port: Annotated[int, Field(gt=0, lt=65536)] | None = None
    service_name: str = Field(..., min_length=1)
    service_version: str = Field(..., min_length=1)
    instance_id: str = Field(..., min_length=1)

    @property
    def base_path(self) -> str:
        return f"services/{self.service_name}/{self.service_version}/{self.instance_id}"


class SuperuserClaims(BaseModel):
    """Claims of a self-minted superuser token."""

    model_config = ConfigDict(frozen=True)

    app: str
    iss: str
    su: bool = True
    iat: int
    exp: int


class AccessTokenClaims(BaseModel):
    """Claims of a user access token."""

    model_config = ConfigDict(frozen=True, extra="allow")

    app: str
    iss: str
    sub: str | None = None
    su: bool | None = None
    iat: int
    exp: int


class RefreshTokenClaims(BaseModel):
    """Claims of a refresh token; refresh tokens carry no expiry."""

    model_config = ConfigDict(frozen=True)

    app: str
    iss: str
    sub: str | None = None
    su: bool | None = None
    refresh: bool = True
    iat: int


class TokenWithExpiry(BaseModel):
    """A signed token and its lifetime in seconds."""

    model_config = ConfigDict(frozen=True)

    token: str
    expires_in: int

    def __repr__(self) -> str:
        return f"TokenWithExpiry(token='***', expires_in={self.expires_in})"

    __str__ = __repr__


class AuthenticateOptions(BaseModel):
    """What to put in the tokens issued by an authentication."""

    model_config = ConfigDict(frozen=True)

    user_id: str | None = None
    su: bool = False
    service_claims: dict[str, Any] = Field(default_factory=dict)
    token_expiry: Annotated[int, Field(gt=0)] | None = None


class AuthenticatePayload(BaseModel):
    """Body posted to an app's auth endpoint."""

    model_config = ConfigDict(frozen=True, extra="allow")

    grant_type: str | None = None
    refresh_token: str | None = None


class AuthenticationResponse(BaseModel):
    """What an auth endpoint should answer with."""

    model_config = ConfigDict(frozen=True)

    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)


class ErrorBody(BaseModel):
    """JSON error body returned by Elements services."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    error: str
    error_description: str | None = None
    error_uri: str | None = None

    @field_validator("error_description", "error_uri", mode="before")
    @classmethod
    def drop_non_string(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None
