"""Token signing and claim construction for the Elements SDK.

Provides the signer/verifier around PyJWT and the claim builders shared by
the App facade (superuser tokens) and the Authenticator (user tokens).
"""

from __future__ import annotations

import time
from typing import Any, Callable

import jwt

from ..errors import InvalidClaimsError, InvalidSignatureError, TokenExpiredError
from ..models import (
    DEFAULT_TOKEN_EXPIRY,
    SUPERUSER_TOKEN_LEEWAY,
    SUPERUSER_TOKEN_TTL,
    AccessTokenClaims,
    AuthenticateOptions,
    RefreshTokenClaims,
    SuperuserClaims,
    TokenWithExpiry,
)
from ..telemetry import trace_operation

# Elements app keys are shared secrets, so tokens are HMAC-signed.
DEFAULT_ALGORITHM = "HS256"

_RESERVED_CLAIMS = frozenset({"app", "iss", "sub", "su", "iat", "exp", "refresh"})


class TokenSigner:
    """Signs and verifies compact JWS tokens with a shared secret."""

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self.algorithm = algorithm

    def sign(self, claims: dict[str, Any], secret: str) -> str:
        """Sign claims into a compact token."""
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def verify(
        self,
        token: str,
        secret: str,
        *,
        issuer: str | None = None,
        required: list[str] | None = None,
    ) -> dict[str, Any]:
        """Verify a token and return its claims.

        Args:
            token: Compact token.
            secret: Secret the token was signed with.
            issuer: Expected ``iss`` claim, if any.
            required: Claims that must be present.

        Returns:
            Decoded claims.

        Raises:
            TokenExpiredError: If ``exp`` has passed.
            InvalidSignatureError: On any other verification failure.
        """
        options: dict[str, Any] = {"require": required or []}
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                issuer=issuer,
                options=options,
            )
        except jwt.exceptions.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.exceptions.InvalidTokenError as e:
            raise InvalidSignatureError(f"Invalid token: {e}") from e


class TokenOperations:
    """Mints tokens bound to one app identity.

    Minting is pure apart from reading the clock, so a single instance is
    safe to share between concurrent requests.
    """

    def __init__(
        self,
        app_id: str,
        app_key_id: str,
        app_key_secret: str,
        *,
        signer: TokenSigner | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.app_id = app_id
        self.app_key_id = app_key_id
        self._app_key_secret = app_key_secret
        self._signer = signer or TokenSigner()
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    def _require_identity(self, *, user_id: str | None = None, needs_user: bool = False) -> None:
        missing = [
            name
            for name, value in (
                ("app_id", self.app_id),
                ("app_key_id", self.app_key_id),
                ("app_key_secret", self._app_key_secret),
            )
            if not value
        ]
        if needs_user and not user_id:
            missing.append("user_id")
        if missing:
            raise InvalidClaimsError(
                f"Cannot build token claims, missing: {', '.join(missing)}",
                missing=missing,
            )

    def superuser_claims(self) -> SuperuserClaims:
        """Build claims for a superuser token valid for one request."""
        self._require_identity()
        now = self.now()
        return SuperuserClaims(
            app=self.app_id,
            iss=self.app_key_id,
            su=True,
            iat=now - SUPERUSER_TOKEN_LEEWAY,
            exp=now + SUPERUSER_TOKEN_TTL,
        )

    def access_token_claims(self, options: AuthenticateOptions) -> AccessTokenClaims:
        """Build claims for a user access token.

        Raises:
            InvalidClaimsError: If identity fields are missing, or if no
                ``user_id`` is given for a non-superuser token.
        """
        self._require_identity(user_id=options.user_id, needs_user=not options.su)
        now = self.now()
        ttl = options.token_expiry or DEFAULT_TOKEN_EXPIRY
        extra = {k: v for k, v in options.service_claims.items() if k not in _RESERVED_CLAIMS}
        return AccessTokenClaims(
            app=self.app_id,
            iss=self.app_key_id,
            sub=options.user_id,
            su=True if options.su else None,
            iat=now,
            exp=now + ttl,
            **extra,
        )

    def refresh_token_claims(self, options: AuthenticateOptions) -> RefreshTokenClaims:
        self._require_identity(user_id=options.user_id, needs_user=not options.su)
        return RefreshTokenClaims(
            app=self.app_id,
            iss=self.app_key_id,
            sub=options.user_id,
            su=True if options.su else None,
            iat=self.now(),
        )

    def sign(self, claims: SuperuserClaims | AccessTokenClaims | RefreshTokenClaims) -> str:
        return self._signer.sign(claims.model_dump(exclude_none=True), self._app_key_secret)

    def generate_superuser_token(self) -> TokenWithExpiry:
        with trace_operation("elements.token.superuser", attributes={"app": self.app_id}):
            claims = self.superuser_claims()
            return TokenWithExpiry(token=self.sign(claims), expires_in=SUPERUSER_TOKEN_TTL)

    def generate_access_token(self, options: AuthenticateOptions) -> TokenWithExpiry:
        with trace_operation("elements.token.access", attributes={"app": self.app_id}):
            claims = self.access_token_claims(options)
            return TokenWithExpiry(token=self.sign(claims), expires_in=claims.exp - claims.iat)

    def generate_refresh_token(self, options: AuthenticateOptions) -> str:
        with trace_operation("elements.token.refresh", attributes={"app": self.app_id}):
            return self.sign(self.refresh_token_claims(options))

    def verify(self, token: str, *, required: list[str] | None = None) -> dict[str, Any]:
        """Verify a token issued for this app and return its claims."""
        claims = self._signer.verify(
            token,
            self._app_key_secret,
            issuer=self.app_key_id,
            required=required,
        )
        if claims.get("app") != self.app_id:
            raise InvalidSignatureError("Token was issued for a different app")
        return claims
