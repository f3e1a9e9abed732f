"""URI helpers used to turn import URLs into absolute resource URIs."""

from __future__ import annotations

import posixpath
import re
from urllib.parse import urlsplit, urlunsplit

# Two characters minimum so Windows drive letters are not taken for schemes.
SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]+:")


def has_scheme(uri: str) -> bool:
    return bool(SCHEME_PATTERN.match(uri))


def folder_of_uri(uri: str) -> str:
    """Return everything up to and including the last ``/`` of the URI."""
    return uri[: uri.rfind("/") + 1]


def extension_of_uri(uri: str) -> str:
    path = urlsplit(uri).path if has_scheme(uri) else uri.split("?", 1)[0]
    suffix = posixpath.splitext(path)[1]
    return suffix.lstrip(".").lower()


def normalize_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments, keeping a leading slash if present."""
    if not path:
        return path
    return posixpath.normpath(path)


def normalize_uri(uri: str) -> str:
    if not has_scheme(uri):
        return normalize_path(uri)
    parts = urlsplit(uri)
    return urlunsplit(parts._replace(path=normalize_path(parts.path)))


def compute_absolute_uri(importer_uri: str, import_url: str) -> str:
    """Resolve an import URL against the folder of the importing resource.

    Import URLs carrying their own scheme are kept as they are, only their
    path is normalized. Root-relative URLs (``/css/x.css``) resolve against
    the root the importer's locator reads from: the host of a remote importer,
    the package of a ``package:`` importer, the filesystem root of a ``file:``
    importer, or the base dir for plain paths.
    """
    import_url = import_url.strip()
    if has_scheme(import_url):
        return normalize_uri(import_url)
    if not import_url.startswith("/"):
        return normalize_uri(folder_of_uri(importer_uri) + import_url)
    if not has_scheme(importer_uri):
        return normalize_path(import_url)

    parts = urlsplit(importer_uri)
    target = urlsplit(import_url)
    path = normalize_path(target.path)
    query = f"?{target.query}" if target.query else ""
    if parts.netloc:
        return urlunsplit((parts.scheme, parts.netloc, path, target.query, ""))
    if parts.scheme.lower() == "package":
        package = parts.path.lstrip("/").partition("/")[0]
        return f"{parts.scheme}:{package}{path}{query}"
    separator = "//" if importer_uri[len(parts.scheme) + 1:].startswith("//") else ""
    return f"{parts.scheme}:{separator}{path}{query}"
