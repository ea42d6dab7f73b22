"""Request outcome types for the Elements SDK."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

import httpx

from .errors import ElementsError, ErrorKind


@dataclass(frozen=True)
class Success:
    """A 2xx answer. The body is kept verbatim and never parsed."""

    response: httpx.Response

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.response.headers

    @property
    def body(self) -> str:
        return self.response.text

    @property
    def content(self) -> bytes:
        return self.response.content

    def unwrap(self) -> httpx.Response:
        return self.response


@dataclass(frozen=True)
class Failure:
    """Exactly one taxonomy error."""

    error: ElementsError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> httpx.Response:
        raise self.error


RequestResult: TypeAlias = Success | Failure
