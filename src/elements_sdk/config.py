"""Configuration for the Elements SDK.

Uses Pydantic v2 for validation with sensible defaults.
"""

from __future__ import annotations

import os
from typing import Annotated, Any, Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
)

from .errors import InvalidConfigError
from .models import AppKey, ServiceAddress


class TelemetryConfig(BaseModel):
    """OpenTelemetry and logging configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "elements-sdk"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard level name."""
        supported = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in supported:
            msg = f"Unsupported log level: {v}. Supported: {supported}"
            raise ValueError(msg)
        return v.upper()


class ElementsConfig(BaseModel):
    """Main configuration for an Elements App."""

    model_config = ConfigDict(frozen=True, validate_default=True, populate_by_name=True)

    # Required
    host: str = Field(..., min_length=1, validation_alias=AliasChoices("host", "cluster"))
    app_id: str = Field(..., min_length=1)
    app_key: SecretStr

    # Service instance
    service_name: str = Field(..., min_length=1)
    service_version: str = Field(..., min_length=1)
    instance_id: str = Field(..., min_length=1)
    port: Annotated[int, Field(gt=0, lt=65536)] | None = None

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Accept a bare host name, without scheme or path."""
        if "://" in v or "/" in v:
            msg = f"host must be a bare host name, got {v!r}"
            raise ValueError(msg)
        return v

    @property
    def cluster(self) -> str:
        return self.host

    @property
    def service_address(self) -> ServiceAddress:
        return ServiceAddress(
            host=self.host,
            port=self.port,
            service_name=self.service_name,
            service_version=self.service_version,
            instance_id=self.instance_id,
        )

    def parsed_app_key(self) -> AppKey:
        """Split the app key into id and secret.

        Raises:
            InvalidAppKeyError: If the key is not ``id:secret``.
        """
        return AppKey.parse(self.app_key.get_secret_value())

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data["app_key"] = self.app_key.get_secret_value()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "ELEMENTS_") -> Self:
        """Create config from environment variables.

        ``{prefix}CLUSTER`` is read when ``{prefix}HOST`` is unset.

        Raises:
            InvalidConfigError: If a required variable is missing.
        """

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        def require(key: str) -> str:
            value = get_env(key)
            if not value:
                raise InvalidConfigError(
                    f"{prefix}{key} environment variable is required",
                    field=key.lower(),
                )
            return value

        host = get_env("HOST") or get_env("CLUSTER")
        if not host:
            raise InvalidConfigError(
                f"{prefix}HOST or {prefix}CLUSTER environment variable is required",
                field="host",
            )

        port = get_env("PORT")

        return cls(
            host=host,
            port=int(port) if port else None,
            app_id=require("APP_ID"),
            app_key=require("APP_KEY"),
            service_name=require("SERVICE_NAME"),
            service_version=require("SERVICE_VERSION"),
            instance_id=require("INSTANCE_ID"),
            timeout=float(get_env("TIMEOUT", "30.0")),
            telemetry=TelemetryConfig(log_level=get_env("LOG_LEVEL", "INFO")),
        )
