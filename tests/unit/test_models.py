"""Unit tests for Pydantic models.

Tests model validation, immutability and edge cases.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from elements_sdk.errors import InvalidAppKeyError
from elements_sdk.models import (
    AppKey,
    AuthenticatePayload,
    ErrorBody,
    RequestOptions,
    ServiceAddress,
    TokenWithExpiry,
)


class TestAppKey:
    """Tests for AppKey parsing."""

    def test_splits_on_first_colon(self) -> None:
        key = AppKey.parse("key-id:secret:with:colons")

        assert key.key_id == "key-id"
        assert key.secret.get_secret_value() == "secret:with:colons"

    @pytest.mark.parametrize("raw", ["no-colon", "", ":secret", "key-id:"])
    def test_rejects_malformed_keys(self, raw: str) -> None:
        with pytest.raises(InvalidAppKeyError):
            AppKey.parse(raw)

    def test_secret_hidden_from_repr(self) -> None:
        key = AppKey.parse("key-id:top-secret")

        assert "top-secret" not in repr(key)
        assert "top-secret" not in str(key)


class TestRequestOptions:
    """Tests for RequestOptions model."""

    def test_defaults(self) -> None:
        options = RequestOptions(method="get", path="users")

        assert options.method == "GET"
        assert options.jwt is None
        assert options.headers == {}
        assert options.body is None
        assert options.params is None

    def test_is_frozen(self) -> None:
        options = RequestOptions(method="GET", path="users")

        with pytest.raises(ValidationError):
            options.path = "other"  # type: ignore[misc]

    def test_with_overrides_returns_new_instance(self) -> None:
        options = RequestOptions(method="GET", path="users", headers={"X-A": "1"})

        updated = options.with_overrides(path="apps/A1/users", jwt="token")

        assert updated is not options
        assert updated.path == "apps/A1/users"
        assert updated.jwt == "token"
        assert updated.headers == {"X-A": "1"}
        assert options.path == "users"
        assert options.jwt is None

    def test_empty_method_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestOptions(method="", path="users")


class TestServiceAddress:
    """Tests for ServiceAddress model."""

    def test_base_path(self) -> None:
        address = ServiceAddress(
            host="example.com",
            service_name="chat",
            service_version="v1",
            instance_id="i-1",
        )

        assert address.base_path == "services/chat/v1/i-1"

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServiceAddress(
                host="example.com",
                port=port,
                service_name="chat",
                service_version="v1",
                instance_id="i-1",
            )


class TestTokenWithExpiry:
    """Tests for TokenWithExpiry model."""

    def test_token_hidden_from_repr(self) -> None:
        token = TokenWithExpiry(token="eyJ.secret.sig", expires_in=300)

        assert "eyJ.secret.sig" not in repr(token)
        assert "300" in repr(token)


class TestAuthenticatePayload:
    """Tests for AuthenticatePayload model."""

    def test_keeps_unknown_fields(self) -> None:
        payload = AuthenticatePayload.model_validate(
            {"grant_type": "client_credentials", "assertion": "abc"}
        )

        assert payload.grant_type == "client_credentials"
        assert payload.model_extra == {"assertion": "abc"}


class TestErrorBody:
    """Tests for ErrorBody model."""

    def test_error_is_required(self) -> None:
        with pytest.raises(ValidationError):
            ErrorBody.model_validate({"error_description": "nope"})

    def test_ignores_extra_fields(self) -> None:
        body = ErrorBody.model_validate({"error": "e", "trace": "x"})

        assert body.error == "e"
        assert body.error_description is None

    def test_non_string_optional_fields_dropped(self) -> None:
        body = ErrorBody.model_validate({"error": "e", "error_description": 3, "error_uri": {"a": 1}})

        assert body.error == "e"
        assert body.error_description is None
        assert body.error_uri is None
