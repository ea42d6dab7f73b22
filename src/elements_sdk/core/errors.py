"""Centralized error factory for the Elements SDK.

Turns completed HTTP exchanges and transport exceptions into request
outcomes. This is the only place that decides which taxonomy variant a
status code belongs to.
"""

from __future__ import annotations

import json
import uuid

import httpx
from pydantic import ValidationError

from ..errors import (
    ElementsError,
    ErrorResponse,
    TransportError,
    UnsupportedRedirectError,
    UnsupportedStatusCodeError,
)
from ..models import ErrorBody
from ..types import Failure, RequestResult, Success

UNPARSABLE_ERROR_MESSAGE = "Something went wrong, but could not parse the response"


class ErrorFactory:
    """Centralized error creation with consistent structure.

    All errors created through this factory carry a correlation id so a
    failure can be matched with its log line and span.
    """

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def classify(
        response: httpx.Response,
        *,
        correlation_id: str | None = None,
    ) -> RequestResult:
        """Classify a completed exchange.

        - 2xx: ``Success`` with the body untouched
        - 3xx: ``UnsupportedRedirectError``
        - 4xx/5xx: ``ErrorResponse``
        - anything else: ``UnsupportedStatusCodeError``
        """
        status = response.status_code

        if 200 <= status <= 299:
            return Success(response)

        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if 300 <= status <= 399:
            return Failure(UnsupportedRedirectError(status, correlation_id=correlation_id))

        if 400 <= status <= 599:
            return Failure(
                ErrorFactory.from_error_response(response, correlation_id=correlation_id)
            )

        return Failure(UnsupportedStatusCodeError(status, correlation_id=correlation_id))

    @staticmethod
    def from_error_response(
        response: httpx.Response,
        *,
        correlation_id: str | None = None,
    ) -> ErrorResponse:
        """Create an ErrorResponse from a 4xx/5xx answer.

        The body must be a JSON object with a string ``error`` field;
        non-string ``error_description`` or ``error_uri`` values are dropped.
        Anything else yields the generic unparsable-response error.
        """
        headers = dict(response.headers)
        try:
            body = ErrorBody.model_validate(json.loads(response.content))
        except (ValueError, ValidationError):
            return ErrorResponse(
                response.status_code,
                UNPARSABLE_ERROR_MESSAGE,
                headers=headers,
                error_description="",
                correlation_id=correlation_id,
            )

        return ErrorResponse(
            response.status_code,
            body.error,
            headers=headers,
            error_description=body.error_description,
            error_uri=body.error_uri,
            correlation_id=correlation_id,
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> ElementsError:
        """Create SDK error from a transport exception.

        Args:
            exc: Original exception.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            ``exc`` itself when it is already an SDK error, otherwise a
            ``TransportError`` with ``exc`` as its cause.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if isinstance(exc, ElementsError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, httpx.TimeoutException):
            message = f"Request timed out: {exc}"
        elif isinstance(exc, httpx.ConnectError):
            message = f"Connection failed: {exc}"
        else:
            message = f"HTTP transport error: {exc}"

        return TransportError(message, correlation_id=correlation_id, cause=exc)
