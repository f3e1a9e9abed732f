"""Discovery of ``@import url(...)`` statements inside stylesheet text."""

from __future__ import annotations

import re
from typing import List, Optional

from loguru import logger

from cssinline.resources import Resource
from cssinline.uri_utils import compute_absolute_uri


IMPORT_PATTERN = re.compile(
    r"@import\s*url\(\s*"
    r"[\"']?([^\"'()\n;{}]*?)[\"']?"  # url, optionally quoted, confined to one statement
    r"\s*\);?",
    re.IGNORECASE,  # works with URL(
)


def find_import_urls(css: str) -> List[str]:
    """Return the raw URLs of every import statement, in document order."""
    return [match.group(1).strip() for match in IMPORT_PATTERN.finditer(css)]


def build_imported_resource(importer: Resource, import_url: str) -> Resource:
    return Resource.create(compute_absolute_uri(importer.uri, import_url), importer.type)


def scan_imports(
    resource: Resource,
    css: str,
    duplicates: Optional[List[Resource]] = None,
) -> List[Resource]:
    """Find the resources imported by ``resource``.

    Args:
        resource: Resource whose content is ``css``.
        css: Raw stylesheet text.
        duplicates: Optional collector for imports repeated within the text.

    Returns:
        Imported resources in document order, each listed once.
    """
    imports: List[Resource] = []
    for import_url in find_import_urls(css):
        if not import_url:
            logger.warning("Empty import url ignored in: {}", resource)
            continue
        imported = build_imported_resource(resource, import_url)
        if imported in imports:
            logger.warning("Duplicate imported resource: {} in {}", imported, resource)
            if duplicates is not None:
                duplicates.append(imported)
            continue
        imports.append(imported)
    return imports
