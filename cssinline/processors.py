"""CSS import processors.

The pre-phase (``CssImportInliner``) adds the imported stylesheets to the
group ahead of the resource importing them. The post-phase
(``CssImportStripper``) removes the now redundant statements from the merged
output.
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from cssinline.import_resolver import ImportResolver, TraversalState
from cssinline.import_scanner import IMPORT_PATTERN
from cssinline.resources import Group, Resource, ResourceType


def strip_imports(css: str) -> str:
    """Remove every ``@import url(...)`` statement, leaving the rest verbatim."""
    return IMPORT_PATTERN.sub("", css)


class CssImportInliner:
    """Pre-processor: inserts resolved imports into the owning group."""

    supported_type = ResourceType.CSS

    def __init__(self, resolver: ImportResolver):
        self.resolver = resolver

    def process(
        self,
        resource: Resource,
        css: str,
        group: Group,
        state: Optional[TraversalState] = None,
    ) -> str:
        logger.debug("PROCESS: {}", resource)
        if resource.type != self.supported_type:
            return css

        imports = self.inline(resource, group, state)
        if imports:
            logger.debug("Imported resources inserted: {}", len(imports))
        return css

    def inline(
        self,
        resource: Resource,
        group: Group,
        state: Optional[TraversalState] = None,
    ) -> List[Resource]:
        """Insert the imports of ``resource`` before it in ``group``.

        Returns the imports actually inserted.
        """
        resolved = self.resolver.resolve(resource, state)
        inserted: List[Resource] = []
        for imported in resolved:
            if imported == resource:
                continue
            if group.contains(imported):
                logger.debug("Already in group '{}': {}", group.name, imported)
                continue
            group.insert_before(resource, imported)
            inserted.append(imported)
        return inserted


class CssImportStripper:
    """Post-processor: removes residual import statements."""

    supported_type = ResourceType.CSS

    def process(self, css: str) -> str:
        return strip_imports(css)
