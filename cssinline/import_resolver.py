"""Depth-first resolution of the stylesheet import graph.

The graph is never materialized: each resource is fetched and scanned when
the traversal reaches it. A resource is appended to the result only after
all of its readable imports, so the result lists dependencies first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from loguru import logger

from cssinline.import_scanner import scan_imports
from cssinline.locators import ResourceNotFoundError, UriLocatorFactory
from cssinline.resources import Resource


ISSUE_DUPLICATE = "duplicate"
ISSUE_SELF_IMPORT = "self_import"
ISSUE_CYCLE = "cycle"
ISSUE_UNREADABLE = "unreadable"


@dataclass(frozen=True)
class ImportIssue:
    """A recovered problem found while walking the imports."""

    kind: str
    resource: Resource
    importer: Optional[Resource] = None


@dataclass
class _Frame:
    resource: Resource
    pending: Iterator[Resource] = field(default_factory=lambda: iter(()))


@dataclass
class TraversalState:
    """Per-resolution state: active stack, ordered result and issues."""

    frames: List[_Frame] = field(default_factory=list)
    active: Set[Resource] = field(default_factory=set)
    resolved: Dict[Resource, None] = field(default_factory=dict)
    issues: List[ImportIssue] = field(default_factory=list)

    @property
    def stack(self) -> List[Resource]:
        return [frame.resource for frame in self.frames]

    @property
    def result(self) -> List[Resource]:
        return list(self.resolved)

    def push(self, resource: Resource) -> _Frame:
        frame = _Frame(resource)
        self.frames.append(frame)
        self.active.add(resource)
        return frame

    def pop(self) -> Resource:
        frame = self.frames.pop()
        self.active.discard(frame.resource)
        return frame.resource

    def record(self, kind: str, resource: Resource, importer: Optional[Resource] = None) -> None:
        self.issues.append(ImportIssue(kind, resource, importer))

    def issues_of(self, kind: str) -> List[ImportIssue]:
        return [issue for issue in self.issues if issue.kind == kind]


class ImportResolver:
    """Flattens the import graph of a stylesheet into load order.

    The instance only holds the locator configuration; everything that
    changes during a resolution lives in the ``TraversalState``, so one
    resolver can serve concurrent resolutions.
    """

    def __init__(self, locator_factory: UriLocatorFactory, encoding: str = "utf-8"):
        self.locator_factory = locator_factory
        self.encoding = encoding

    def read_content(self, resource: Resource) -> str:
        """Fetch and decode the text of ``resource``."""
        try:
            with self.locator_factory.locate(resource.uri) as stream:
                blob = stream.read()
        except ResourceNotFoundError:
            raise
        except OSError as exc:
            raise ResourceNotFoundError(f"Unreadable resource {resource}: {exc}") from exc
        try:
            return blob.decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise ResourceNotFoundError(f"Unreadable resource {resource}: {exc}") from exc

    def resolve(self, root: Resource, state: Optional[TraversalState] = None) -> List[Resource]:
        """Return ``root`` and everything it imports, dependencies first.

        Raises:
            ResourceNotFoundError: If ``root`` itself cannot be read.
        """
        state = state if state is not None else TraversalState()
        if self._already_visited(root, state, importer=None):
            return state.result

        self._enter(root, state)
        while state.frames:
            frame = state.frames[-1]
            imported = next(frame.pending, None)
            if imported is None:
                resource = state.pop()
                logger.debug("POP: {}", resource)
                state.resolved[resource] = None
                continue

            if imported == frame.resource:
                logger.warning("Self import detected for resource: {}", imported)
                state.record(ISSUE_SELF_IMPORT, imported, frame.resource)
                continue
            if self._already_visited(imported, state, importer=frame.resource):
                continue

            try:
                self._enter(imported, state)
            except ResourceNotFoundError as exc:
                logger.warning(
                    "Invalid imported resource: {} located in: {} ({})",
                    imported,
                    frame.resource,
                    exc,
                )
                state.record(ISSUE_UNREADABLE, imported, frame.resource)

        return state.result

    def _already_visited(
        self,
        resource: Resource,
        state: TraversalState,
        importer: Optional[Resource],
    ) -> bool:
        if resource in state.resolved:
            logger.debug("Already resolved: {}", resource)
            return True
        if resource in state.active:
            logger.warning("Circular import detected for resource: {} (imported by {})", resource, importer)
            state.record(ISSUE_CYCLE, resource, importer)
            return True
        return False

    def _enter(self, resource: Resource, state: TraversalState) -> None:
        logger.debug("PUSH: {}", resource)
        frame = state.push(resource)
        try:
            css = self.read_content(resource)
        except ResourceNotFoundError:
            state.pop()
            raise

        duplicates: List[Resource] = []
        imports = scan_imports(resource, css, duplicates)
        for duplicate in duplicates:
            state.record(ISSUE_DUPLICATE, duplicate, resource)
        logger.debug("IMPORT LIST: {}", imports)
        frame.pending = iter(imports)
