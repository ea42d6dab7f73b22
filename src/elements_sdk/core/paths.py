"""Request path normalization.

Paths are normalized with explicit passes over their slash-separated
segments so the result never contains ``//``, never ends in ``/`` and
never starts with ``/``.
"""

from __future__ import annotations


def collapse_slashes(path: str) -> str:
    """Collapse runs of slashes and drop leading and trailing slashes.

    Whitespace is left untouched.
    """
    return "/".join(segment for segment in path.split("/") if segment)


def sanitize_path(path: str) -> str:
    """Normalize a slash-separated path.

    - drops one space directly after any slash
    - drops one trailing space
    - collapses runs of slashes
    - drops leading and trailing slashes

    Args:
        path: Raw path, possibly with redundant slashes.

    Returns:
        Normalized path, possibly empty.
    """
    segments = path.split("/")

    for i in range(1, len(segments)):
        if segments[i].startswith(" "):
            segments[i] = segments[i][1:]

    if segments[-1].endswith(" "):
        segments[-1] = segments[-1][:-1]

    return collapse_slashes("/".join(segments))


def join_path(*parts: str) -> str:
    """Join path parts with ``/`` and normalize the result."""
    return sanitize_path("/".join(parts))


def scope_path(prefix: str, tenant_id: str, path: str, *, strip_spaces: bool = True) -> str:
    """Scope a tenant-relative path under ``{prefix}/{tenant_id}``.

    Args:
        prefix: Scope prefix, e.g. ``"apps"``.
        tenant_id: Tenant the path belongs to.
        path: Tenant-relative path.
        strip_spaces: Apply the space rules of ``sanitize_path``. Pass
            ``False`` when the result is sanitized again downstream; the
            space rules must run only once per path.

    >>> scope_path("apps", "A1", "users//42/")
    'apps/A1/users/42'
    """
    joined = f"{prefix}/{tenant_id}/{path}"
    if strip_spaces:
        return sanitize_path(joined)
    return collapse_slashes(joined)
