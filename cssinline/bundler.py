"""Group bundling: inline imports, merge the group, strip leftover imports."""

from __future__ import annotations

from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional

from loguru import logger

from cssinline.config_loader import get_encoding, get_groups
from cssinline.import_resolver import ImportResolver
from cssinline.locators import UriLocatorFactory
from cssinline.processors import CssImportInliner, CssImportStripper
from cssinline.resources import Group, Resource, ResourceType


class GroupBundler:
    """Runs the import pre-phase over a group and merges the result."""

    def __init__(
        self,
        locator_factory: UriLocatorFactory,
        encoding: str = "utf-8",
        resource_type: ResourceType = ResourceType.CSS,
    ):
        self.resolver = ImportResolver(locator_factory, encoding)
        self.inliner = CssImportInliner(self.resolver)
        self.stripper = CssImportStripper()
        self.resource_type = resource_type

    def bundle(self, group: Group) -> str:
        """Return the merged content of ``group``.

        The group is mutated: imported stylesheets are inserted ahead of the
        resources importing them.

        Raises:
            ResourceNotFoundError: If a resource listed in the group cannot be read.
        """
        contents: Dict[Resource, str] = {}
        for resource in group.resources_of_type(self.resource_type):
            css = self.resolver.read_content(resource)
            contents[resource] = self.inliner.process(resource, css, group)

        chunks: List[str] = []
        for resource in group.resources_of_type(self.resource_type):
            if resource not in contents:
                contents[resource] = self.resolver.read_content(resource)
            chunks.append(contents[resource])

        merged = "\n".join(chunks)
        if self.resource_type == self.stripper.supported_type:
            merged = self.stripper.process(merged)
        return merged


def bundle_groups(config: Dict[str, Any], names: Optional[List[str]] = None) -> Dict[str, str]:
    """Bundle every configured group (or only ``names``) into CSS text."""
    bundler = GroupBundler(UriLocatorFactory.from_config(config), get_encoding(config))
    bundles = {}
    for group in get_groups(config, names):
        started = perf_counter()
        bundles[group.name] = bundler.bundle(group)
        logger.info(
            "Group '{}' bundled: {} resources in {:.2f}s",
            group.name,
            len(group),
            perf_counter() - started,
        )
    return bundles


def write_bundles(
    config: Dict[str, Any],
    names: Optional[List[str]] = None,
    output_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """Bundle groups and write each one to ``<output_dir>/<group>.css``."""
    target_dir = Path(output_dir or config.get("output_dir", "dist"))
    target_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for name, css in bundle_groups(config, names).items():
        path = target_dir / f"{name}.css"
        path.write_text(css, encoding=get_encoding(config))
        written[name] = str(path)
        logger.info("Bundle written: {}", path)

    return {
        "status": "completed",
        "output_dir": str(target_dir),
        "bundles": written,
    }
