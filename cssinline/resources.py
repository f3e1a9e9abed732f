"""Resource and group model shared by locators, resolver and processors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from cssinline.uri_utils import extension_of_uri


class ResourceType(str, Enum):
    """Kind of web resource handled by a group."""

    CSS = "css"
    JS = "js"

    @classmethod
    def from_uri(cls, uri: str) -> "ResourceType":
        """Infer the type from the URI extension."""
        extension = extension_of_uri(uri)
        for member in cls:
            if member.value == extension:
                return member
        raise ValueError(f"Unknown resource type for: {uri}")


@dataclass(frozen=True)
class Resource:
    uri: str
    type: ResourceType = ResourceType.CSS

    @classmethod
    def create(cls, uri: str, resource_type: ResourceType) -> "Resource":
        return cls(uri=uri, type=resource_type)

    def __str__(self) -> str:
        return f"{self.type.value}:{self.uri}"


class Group:
    """Ordered, duplicate-free sequence of resources forming one bundle.

    Insertion order is the concatenation order of the bundle, so inserting a
    dependency means placing it before the resource that imported it.
    """

    def __init__(self, name: str, resources: Optional[List[Resource]] = None):
        self.name = name
        self._resources: List[Resource] = []
        for resource in resources or []:
            self.append(resource)

    def __iter__(self) -> Iterator[Resource]:
        return iter(list(self._resources))

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"Group(name={self.name!r}, resources={self._resources!r})"

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources)

    def resources_of_type(self, resource_type: ResourceType) -> List[Resource]:
        return [r for r in self._resources if r.type == resource_type]

    def contains(self, resource: Resource) -> bool:
        return resource in self._resources

    def index_of(self, resource: Resource) -> int:
        try:
            return self._resources.index(resource)
        except ValueError:
            raise ValueError(f"{resource} is not part of group '{self.name}'") from None

    def append(self, resource: Resource) -> None:
        if resource not in self._resources:
            self._resources.append(resource)

    def insert_before(self, existing: Resource, new_resource: Resource) -> None:
        """Insert ``new_resource`` immediately before ``existing``."""
        position = self.index_of(existing)
        if new_resource in self._resources:
            return
        self._resources.insert(position, new_resource)
