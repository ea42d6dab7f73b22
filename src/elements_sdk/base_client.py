"""HTTPS transport for Elements services.

``BaseClient`` addresses one versioned service instance and turns every
exchange into exactly one outcome: a ``Success`` or a taxonomy error. It
never retries, never follows redirects and never caches.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Mapping, Self

import httpx

from .core.errors import ErrorFactory
from .core.paths import join_path
from .models import RequestOptions, ServiceAddress
from .sdk_info import SDKInfo
from .telemetry import get_logger, trace_operation
from .types import Failure, RequestResult, Success

if TYPE_CHECKING:
    from .config import ElementsConfig


def create_async_http_client(
    *,
    timeout: float = 30.0,
    connect_timeout: float = 10.0,
) -> httpx.AsyncClient:
    """Create the pooled async HTTP client used by ``BaseClient``.

    Connections are kept alive and reused across requests.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=connect_timeout,
            read=timeout,
            write=timeout,
            pool=timeout,
        ),
        follow_redirects=False,
    )


def merge_headers(
    sdk_headers: Mapping[str, str],
    caller_headers: Mapping[str, str] | None,
    jwt: str | None,
) -> httpx.Headers:
    """Merge request headers into a new header map.

    Precedence, lowest first: SDK headers, caller headers, then
    ``Authorization`` when a jwt is given. Header names are compared
    case-insensitively, so a caller's ``authorization`` header cannot
    survive next to the forced one.
    """
    merged = httpx.Headers(sdk_headers)
    for key, value in (caller_headers or {}).items():
        merged[key] = value
    if jwt:
        merged["Authorization"] = f"Bearer {jwt}"
    return merged


def encode_body(body: Any) -> bytes | None:
    """Serialize a request body. Bytes are sent verbatim, anything else as JSON."""
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    return json.dumps(body).encode("utf-8")


class BaseClient:
    """Makes HTTPS requests to one service instance running on Elements."""

    def __init__(
        self,
        address: ServiceAddress,
        *,
        sdk_info: SDKInfo | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
    ) -> None:
        """Initialize the client.

        Args:
            address: Service instance every request is sent to.
            sdk_info: SDK identity headers (defaults to this package).
            http_client: Pre-built httpx client, used as-is.
            timeout: Read/write/pool timeout for the default httpx client.
            connect_timeout: Connect timeout for the default httpx client.
        """
        self.address = address
        self.sdk_info = sdk_info or SDKInfo()
        self._http = http_client or create_async_http_client(
            timeout=timeout, connect_timeout=connect_timeout
        )
        self._logger = get_logger().bind(
            service=address.service_name,
            service_version=address.service_version,
        )

    @classmethod
    def from_config(cls, config: ElementsConfig, **kwargs: Any) -> Self:
        return cls(
            config.service_address,
            timeout=config.timeout,
            connect_timeout=config.connect_timeout,
            **kwargs,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        await self._http.aclose()

    def build_url(self, path: str) -> httpx.URL:
        """Build the fully-qualified URL of a service-relative path."""
        return httpx.URL(
            scheme="https",
            host=self.address.host,
            port=self.address.port,
            path="/" + join_path(self.address.base_path, path),
        )

    def build_request(self, options: RequestOptions) -> httpx.Request:
        """Build the outbound request without sending it."""
        content = encode_body(options.body)
        sdk_headers = self.sdk_info.headers
        if content is not None and not isinstance(options.body, (bytes, bytearray)):
            sdk_headers["Content-Type"] = "application/json"

        return self._http.build_request(
            options.method,
            self.build_url(options.path),
            headers=merge_headers(sdk_headers, options.headers, options.jwt),
            content=content,
            params=options.params,
        )

    async def send(self, options: RequestOptions) -> RequestResult:
        """Send a request and return its outcome without raising.

        Returns:
            ``Success`` for a 2xx answer, otherwise a ``Failure`` holding a
            ``TransportError``, ``UnsupportedRedirectError``,
            ``ErrorResponse`` or ``UnsupportedStatusCodeError``.
        """
        request = self.build_request(options)
        correlation_id = ErrorFactory.generate_correlation_id()
        log = self._logger.bind(
            method=request.method,
            path=request.url.path,
            correlation_id=correlation_id,
        )

        with trace_operation(
            "elements.request",
            attributes={
                "http.method": request.method,
                "http.url": str(request.url),
                "elements.correlation_id": correlation_id,
            },
        ) as span:
            try:
                response = await self._http.send(request, follow_redirects=False)
            except httpx.HTTPError as e:
                error = ErrorFactory.from_exception(e, correlation_id=correlation_id)
                log.warning("Request failed", kind=error.kind.value, error=str(e))
                return Failure(error)

            span.set_attribute("http.status_code", response.status_code)
            result = ErrorFactory.classify(response, correlation_id=correlation_id)

        if isinstance(result, Success):
            log.debug("Request succeeded", status=response.status_code)
        else:
            log.info(
                "Request rejected",
                status=response.status_code,
                kind=result.kind.value,
            )
        return result

    async def request(self, options: RequestOptions) -> httpx.Response:
        """Make an HTTPS request to the service instance.

        The URL is built from the service name, version and instance id this
        client was created with, followed by ``options.path``.

        Returns:
            The 2xx response; its body is left unparsed.

        Raises:
            TransportError: On connection, DNS or TLS failure.
            UnsupportedRedirectError: On a 3xx answer.
            ErrorResponse: On a 4xx or 5xx answer.
            UnsupportedStatusCodeError: On any other status.
        """
        result = await self.send(options)
        return result.unwrap()
