"""Unit tests for the BaseClient transport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from conftest import RequestRecorder, mock_http_client

from elements_sdk.base_client import BaseClient, encode_body, merge_headers
from elements_sdk.errors import (
    ErrorResponse,
    TransportError,
    UnsupportedRedirectError,
    UnsupportedStatusCodeError,
)
from elements_sdk.models import RequestOptions, ServiceAddress
from elements_sdk.sdk_info import SDKInfo
from elements_sdk.types import Failure, Success


class TestMergeHeaders:
    """Tests for merge_headers."""

    def test_precedence(self) -> None:
        merged = merge_headers(
            {"X-SDK-Product": "elements-sdk", "X-Shared": "sdk"},
            {"X-Shared": "caller", "Authorization": "Basic nope"},
            "jwt-token",
        )

        assert merged["X-SDK-Product"] == "elements-sdk"
        assert merged["X-Shared"] == "caller"
        assert merged["Authorization"] == "Bearer jwt-token"

    def test_caller_cannot_override_authorization_by_case(self) -> None:
        merged = merge_headers({}, {"authorization": "Basic nope"}, "jwt-token")

        assert merged.get_list("authorization") == ["Bearer jwt-token"]

    def test_caller_authorization_kept_without_jwt(self) -> None:
        merged = merge_headers({}, {"Authorization": "Bearer own"}, None)

        assert merged["Authorization"] == "Bearer own"

    def test_inputs_are_not_mutated(self) -> None:
        sdk_headers = {"X-SDK-Product": "elements-sdk"}
        caller_headers = {"X-Caller": "1"}

        merge_headers(sdk_headers, caller_headers, "jwt-token")

        assert sdk_headers == {"X-SDK-Product": "elements-sdk"}
        assert caller_headers == {"X-Caller": "1"}


class TestEncodeBody:
    """Tests for encode_body."""

    def test_none(self) -> None:
        assert encode_body(None) is None

    def test_bytes_verbatim(self) -> None:
        assert encode_body(b"\x00raw") == b"\x00raw"

    def test_json(self) -> None:
        assert json.loads(encode_body({"name": "Ada", "ids": [1, 2]})) == {
            "name": "Ada",
            "ids": [1, 2],
        }

    def test_string_is_json_encoded(self) -> None:
        assert encode_body("hello") == b'"hello"'


class TestBuildUrl:
    """Tests for URL construction."""

    def test_service_prefix(self, base_client: BaseClient) -> None:
        url = base_client.build_url("apps/A1/users//42/")

        assert url.scheme == "https"
        assert url.host == "cluster.elements.example.com"
        assert url.port is None
        assert url.path == "/services/chat/v1/instance-1/apps/A1/users/42"

    def test_port(self, service_address: ServiceAddress) -> None:
        client = BaseClient(
            service_address.model_copy(update={"port": 8443}),
            http_client=mock_http_client(RequestRecorder()),
        )

        assert str(client.build_url("x")) == (
            "https://cluster.elements.example.com:8443/services/chat/v1/instance-1/x"
        )


class TestRequest:
    """Tests for BaseClient.request."""

    def test_sends_method_headers_body_and_query(
        self, base_client: BaseClient, recorder: RequestRecorder
    ) -> None:
        options = RequestOptions(
            method="POST",
            path="/apps/A1/rooms",
            jwt="jwt-token",
            headers={"X-Trace": "t-1"},
            body={"name": "general"},
            params={"limit": 10},
        )

        response = asyncio.run(base_client.request(options))

        assert response.status_code == 200
        sent = recorder.last
        assert sent.method == "POST"
        assert sent.url.path == "/services/chat/v1/instance-1/apps/A1/rooms"
        assert sent.url.params["limit"] == "10"
        assert sent.headers["Authorization"] == "Bearer jwt-token"
        assert sent.headers["X-Trace"] == "t-1"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.headers["X-SDK-Product"] == "elements-sdk"
        assert json.loads(sent.content) == {"name": "general"}

    def test_no_authorization_without_jwt(
        self, base_client: BaseClient, recorder: RequestRecorder
    ) -> None:
        asyncio.run(base_client.request(RequestOptions(method="GET", path="status")))

        assert "Authorization" not in recorder.last.headers
        assert recorder.last.content == b""

    def test_custom_sdk_info(self, service_address: ServiceAddress) -> None:
        recorder = RequestRecorder()
        client = BaseClient(
            service_address,
            sdk_info=SDKInfo(product_name="chat-sdk", version="9.9.9", platform="test"),
            http_client=mock_http_client(recorder),
        )

        asyncio.run(client.request(RequestOptions(method="GET", path="status")))

        assert recorder.last.headers["X-SDK-Product"] == "chat-sdk"
        assert recorder.last.headers["X-SDK-Version"] == "9.9.9"
        assert recorder.last.headers["X-SDK-Platform"] == "test"

    def test_success_body_not_parsed(self, service_address: ServiceAddress) -> None:
        recorder = RequestRecorder(httpx.Response(201, text='{"id": 1}'))
        client = BaseClient(service_address, http_client=mock_http_client(recorder))

        response = asyncio.run(client.request(RequestOptions(method="POST", path="rooms")))

        assert response.status_code == 201
        assert response.text == '{"id": 1}'

    def test_redirect_not_followed(self, service_address: ServiceAddress) -> None:
        recorder = RequestRecorder(
            httpx.Response(302, headers={"Location": "https://elsewhere.example.com/"})
        )
        client = BaseClient(service_address, http_client=mock_http_client(recorder))

        with pytest.raises(UnsupportedRedirectError) as exc_info:
            asyncio.run(client.request(RequestOptions(method="GET", path="rooms")))

        assert exc_info.value.status_code == 302
        assert len(recorder.requests) == 1

    def test_error_response(self, service_address: ServiceAddress) -> None:
        recorder = RequestRecorder(
            httpx.Response(
                403,
                json={"error": "forbidden", "error_description": "Not a member"},
            )
        )
        client = BaseClient(service_address, http_client=mock_http_client(recorder))

        with pytest.raises(ErrorResponse) as exc_info:
            asyncio.run(client.request(RequestOptions(method="GET", path="rooms/1")))

        error = exc_info.value
        assert error.status_code == 403
        assert error.error == "forbidden"
        assert error.error_description == "Not a member"
        assert len(recorder.requests) == 1

    def test_unsupported_status(self, service_address: ServiceAddress) -> None:
        recorder = RequestRecorder(httpx.Response(103))
        client = BaseClient(service_address, http_client=mock_http_client(recorder))

        with pytest.raises(UnsupportedStatusCodeError):
            asyncio.run(client.request(RequestOptions(method="GET", path="rooms")))

    def test_transport_error_not_retried(self, service_address: ServiceAddress) -> None:
        calls: list[httpx.Request] = []

        def refuse(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = BaseClient(service_address, http_client=mock_http_client(refuse))

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(client.request(RequestOptions(method="GET", path="rooms")))

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert len(calls) == 1


class TestSend:
    """Tests for BaseClient.send."""

    def test_success(self, base_client: BaseClient) -> None:
        result = asyncio.run(base_client.send(RequestOptions(method="GET", path="status")))

        assert isinstance(result, Success)
        assert result.body == "ok"

    def test_failure_is_returned_not_raised(self, service_address: ServiceAddress) -> None:
        def timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = BaseClient(service_address, http_client=mock_http_client(timeout))

        result = asyncio.run(client.send(RequestOptions(method="GET", path="status")))

        assert isinstance(result, Failure)
        assert isinstance(result.error, TransportError)
        assert result.error.correlation_id is not None


class TestLifecycle:
    """Tests for client lifecycle."""

    def test_context_manager_closes_http_client(self, service_address: ServiceAddress) -> None:
        http_client = mock_http_client(RequestRecorder())

        async def use() -> None:
            async with BaseClient(service_address, http_client=http_client):
                pass

        asyncio.run(use())

        assert http_client.is_closed
