"""Core components for the Elements SDK.

Path scoping, token operations and response classification shared by the
transport client, the authenticator and the App facade.
"""

from __future__ import annotations

from .errors import ErrorFactory
from .paths import collapse_slashes, join_path, sanitize_path, scope_path
from .token_ops import TokenOperations, TokenSigner

__all__ = [
    "ErrorFactory",
    "TokenOperations",
    "TokenSigner",
    "collapse_slashes",
    "join_path",
    "sanitize_path",
    "scope_path",
]
