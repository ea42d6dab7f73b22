"""Elements App facade.

``App`` binds one tenant identity to a service instance: requests are
scoped under ``apps/{app_id}`` and signed with a fresh superuser token
unless the caller brings their own.
"""

from __future__ import annotations

from typing import Any, Mapping, Self

import httpx

from .authenticator import AuthenticationStrategy, Authenticator
from .base_client import BaseClient
from .config import ElementsConfig
from .core.paths import scope_path
from .core.token_ops import TokenOperations
from .errors import InvalidConfigError
from .models import (
    AppKey,
    AuthenticateOptions,
    AuthenticatePayload,
    AuthenticationResponse,
    RequestOptions,
    ServiceAddress,
    TokenWithExpiry,
)
from .types import RequestResult

APPS_PREFIX = "apps"


class App:
    """Entry point for an application acting on behalf of one Elements App."""

    def __init__(
        self,
        app_id: str,
        app_key: str,
        *,
        client: BaseClient | None = None,
        cluster: str | None = None,
        host: str | None = None,
        port: int | None = None,
        service_name: str | None = None,
        service_version: str | None = None,
        instance_id: str | None = None,
        strategy: AuthenticationStrategy | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the app.

        Args:
            app_id: Tenant id.
            app_key: ``"key_id:secret"`` credential.
            client: Transport to use. Built from the remaining options when
                omitted.
            cluster: Alias of ``host``.
            host: Service domain.
            port: Optional port.
            service_name: Service requests are sent to.
            service_version: Version of that service.
            instance_id: Instance of that service.
            strategy: Authentication scheme for ``authenticate``.
            http_client: httpx client for the built transport.

        Raises:
            InvalidAppKeyError: If ``app_key`` is not ``id:secret``.
            InvalidConfigError: If no client is given and the service
                address is incomplete.
        """
        key = AppKey.parse(app_key)

        self.app_id = app_id
        self.app_key_id = key.key_id

        if client is None:
            client = BaseClient(
                _service_address(
                    host=host or cluster,
                    port=port,
                    service_name=service_name,
                    service_version=service_version,
                    instance_id=instance_id,
                ),
                http_client=http_client,
            )
        self.client = client

        self._tokens = TokenOperations(app_id, key.key_id, key.secret.get_secret_value())
        self.authenticator = Authenticator(self._tokens, strategy=strategy)

    @classmethod
    def from_config(cls, config: ElementsConfig, **kwargs: Any) -> Self:
        """Create an app from validated configuration."""
        client = kwargs.pop("client", None) or BaseClient.from_config(
            config, http_client=kwargs.pop("http_client", None)
        )
        return cls(
            config.app_id,
            config.app_key.get_secret_value(),
            client=client,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"App(app_id={self.app_id!r}, app_key_id={self.app_key_id!r})"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    def scope_request_options(self, options: RequestOptions) -> RequestOptions:
        """Rewrite ``options.path`` to live under ``apps/{app_id}``.

        Spaces are left for the transport, which sanitizes the full path.
        """
        return options.with_overrides(
            path=scope_path(APPS_PREFIX, self.app_id, options.path, strip_spaces=False)
        )

    def _prepare(self, options: RequestOptions) -> RequestOptions:
        options = self.scope_request_options(options)
        if options.jwt is None:
            options = options.with_overrides(jwt=self.generate_superuser_token().token)
        return options

    async def send(self, options: RequestOptions) -> RequestResult:
        """Like ``request`` but returns ``Success`` or ``Failure`` instead of raising."""
        return await self.client.send(self._prepare(options))

    async def request(self, options: RequestOptions) -> httpx.Response:
        """Make a request scoped to this app.

        A caller-supplied ``jwt`` is always used as-is; without one, a
        superuser token valid for five minutes is minted for this call.

        Raises:
            TransportError: On connection, DNS or TLS failure.
            UnsupportedRedirectError: On a 3xx answer.
            ErrorResponse: On a 4xx or 5xx answer.
            UnsupportedStatusCodeError: On any other status.
        """
        return await self.client.request(self._prepare(options))

    def authenticate(
        self,
        payload: AuthenticatePayload | Mapping[str, Any],
        options: AuthenticateOptions | None = None,
    ) -> AuthenticationResponse:
        return self.authenticator.authenticate(payload, options)

    def generate_access_token(self, options: AuthenticateOptions) -> TokenWithExpiry:
        return self.authenticator.generate_access_token(options)

    def generate_superuser_token(self) -> TokenWithExpiry:
        """Mint a superuser token: valid five minutes, backdated thirty seconds."""
        return self._tokens.generate_superuser_token()


def _service_address(**fields: Any) -> ServiceAddress:
    missing = [name for name, value in fields.items() if name != "port" and not value]
    if missing:
        raise InvalidConfigError(
            f"Missing service address fields: {', '.join(missing)}",
            field=missing[0],
        )
    return ServiceAddress(**fields)
