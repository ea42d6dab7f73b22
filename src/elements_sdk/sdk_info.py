"""SDK identification headers sent with every request."""

from __future__ import annotations

from dataclasses import dataclass, field
from platform import python_implementation


def _package_version() -> str:
    from . import __version__

    return __version__


@dataclass(frozen=True)
class SDKInfo:
    """Identifies this SDK to the platform."""

    product_name: str = "elements-sdk"
    version: str = field(default_factory=_package_version)
    language: str = "python"
    platform: str = field(default_factory=python_implementation)

    @property
    def headers(self) -> dict[str, str]:
        """Header map for this SDK. A new dict is returned on every access."""
        return {
            "X-SDK-Product": self.product_name,
            "X-SDK-Version": self.version,
            "X-SDK-Language": self.language,
            "X-SDK-Platform": self.platform,
        }
