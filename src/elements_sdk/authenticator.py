"""Authentication of end users on behalf of an Elements app.

An app exposes an auth endpoint; whatever that endpoint receives is handed
to ``Authenticator.authenticate`` which answers with the body the endpoint
should return. How a payload is judged is decided by an
``AuthenticationStrategy``; the default one implements the platform's
OAuth-style ``client_credentials`` and ``refresh_token`` grants.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol

from .errors import AuthenticationError, ElementsError, InvalidClaimsError
from .models import (
    AuthenticateOptions,
    AuthenticatePayload,
    AuthenticationResponse,
    TokenWithExpiry,
)
from .telemetry import get_logger

if TYPE_CHECKING:
    from .core.token_ops import TokenOperations


class AuthenticationStrategy(Protocol):
    """Decides whether a payload may be exchanged for tokens."""

    def authenticate(
        self,
        tokens: TokenOperations,
        payload: AuthenticatePayload,
        options: AuthenticateOptions,
    ) -> AuthenticationResponse:
        """Return the endpoint's answer, or raise ``AuthenticationError``."""
        ...


class GrantTypeStrategy:
    """OAuth-style grants: ``client_credentials`` and ``refresh_token``.

    The app backend is trusted to have identified the user already, so
    ``client_credentials`` simply issues tokens for ``options.user_id``.
    A ``refresh_token`` grant must present a refresh token this app issued,
    for the same user when ``options.user_id`` is set. The user and the
    superuser flag of the new tokens are taken from the refresh token.
    """

    def authenticate(
        self,
        tokens: TokenOperations,
        payload: AuthenticatePayload,
        options: AuthenticateOptions,
    ) -> AuthenticationResponse:
        grant_type = payload.grant_type
        if grant_type == "client_credentials":
            return self._issue(tokens, options)
        if grant_type == "refresh_token":
            return self._refresh(tokens, payload, options)
        raise AuthenticationError(
            "unsupported_grant_type",
            f"Grant type {grant_type!r} is not supported",
            status_code=400,
        )

    def _refresh(
        self,
        tokens: TokenOperations,
        payload: AuthenticatePayload,
        options: AuthenticateOptions,
    ) -> AuthenticationResponse:
        if not payload.refresh_token:
            raise AuthenticationError("invalid_request", "refresh_token is required", status_code=400)

        try:
            claims = tokens.verify(payload.refresh_token, required=["iat"])
        except ElementsError as e:
            raise AuthenticationError("invalid_grant", "Refresh token is invalid") from e

        if claims.get("refresh") is not True:
            raise AuthenticationError("invalid_grant", "Token is not a refresh token")
        if options.user_id is not None and claims.get("sub") != options.user_id:
            raise AuthenticationError("invalid_grant", "Refresh token was issued to another user")

        # Identity and privilege come from the token, never from the caller.
        granted = options.model_copy(
            update={"user_id": claims.get("sub"), "su": claims.get("su") is True}
        )
        try:
            return self._issue(tokens, granted)
        except InvalidClaimsError as e:
            raise AuthenticationError("invalid_grant", "Refresh token claims are incomplete") from e

    def _issue(
        self,
        tokens: TokenOperations,
        options: AuthenticateOptions,
    ) -> AuthenticationResponse:
        access = tokens.generate_access_token(options)
        return AuthenticationResponse(
            status=200,
            body={
                "access_token": access.token,
                "token_type": "bearer",
                "expires_in": access.expires_in,
                "refresh_token": tokens.generate_refresh_token(options),
            },
        )


class Authenticator:
    """Validates authentication payloads and issues tokens for one app."""

    def __init__(
        self,
        tokens: TokenOperations,
        *,
        strategy: AuthenticationStrategy | None = None,
    ) -> None:
        self._tokens = tokens
        self._strategy = strategy or GrantTypeStrategy()
        self._logger = get_logger().bind(app=tokens.app_id)

    def authenticate(
        self,
        payload: AuthenticatePayload | Mapping[str, Any],
        options: AuthenticateOptions | None = None,
    ) -> AuthenticationResponse:
        """Exchange an authentication payload for tokens.

        Args:
            payload: Body received by the app's auth endpoint.
            options: Claims for the issued tokens.

        Returns:
            A 200 response carrying ``access_token``, ``token_type``,
            ``expires_in`` and ``refresh_token``.

        Raises:
            AuthenticationError: If the payload is rejected. Use
                ``error.to_response()`` to answer the client.
            InvalidClaimsError: If the tokens cannot be built.
        """
        if not isinstance(payload, AuthenticatePayload):
            payload = AuthenticatePayload.model_validate(dict(payload))
        options = options or AuthenticateOptions()

        try:
            response = self._strategy.authenticate(self._tokens, payload, options)
        except AuthenticationError as e:
            self._logger.info(
                "Authentication rejected",
                grant_type=payload.grant_type,
                error=e.error,
            )
            raise

        self._logger.debug(
            "Authentication succeeded",
            grant_type=payload.grant_type,
            user_id=options.user_id,
        )
        return response

    def generate_access_token(self, options: AuthenticateOptions) -> TokenWithExpiry:
        """Mint a user access token.

        ``iat`` is now and ``exp`` is ``options.token_expiry`` seconds later
        (24 hours by default).

        Raises:
            InvalidClaimsError: If identity fields or the user id are missing.
        """
        return self._tokens.generate_access_token(options)

    def verify_token(self, token: str) -> dict[str, Any]:
        """Verify a token issued by this app and return its claims."""
        return self._tokens.verify(token)
