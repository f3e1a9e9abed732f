"""Resource locators: turn a resource URI into a readable byte stream."""

from __future__ import annotations

import io
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Optional
from urllib.parse import unquote, urlsplit

import requests
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from cssinline.uri_utils import has_scheme


class ResourceNotFoundError(IOError):
    """Raised when a resource URI cannot be located or read."""
    pass


class UriLocator:
    """Capability that opens the byte stream behind a URI."""

    def accepts(self, uri: str) -> bool:
        raise NotImplementedError

    def locate(self, uri: str) -> BinaryIO:
        raise NotImplementedError


class FileUriLocator(UriLocator):
    """Reads plain paths and ``file:`` URIs from disk.

    Plain paths, including ``/css/site.css``, are resolved under ``base_dir``
    the way a web context root would serve them. ``file:`` URIs are absolute
    filesystem paths.
    """

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or ".").resolve()

    def accepts(self, uri: str) -> bool:
        return not has_scheme(uri) or uri.lower().startswith("file:")

    def _to_path(self, uri: str) -> Path:
        if uri.lower().startswith("file:"):
            return Path(unquote(urlsplit(uri).path)).resolve()
        path = (self.base_dir / uri.lstrip("/")).resolve()
        if not path.is_relative_to(self.base_dir):
            raise ResourceNotFoundError(f"Resource outside of base dir: {uri}")
        return path

    def locate(self, uri: str) -> BinaryIO:
        path = self._to_path(uri)
        try:
            return path.open("rb")
        except OSError as exc:
            raise ResourceNotFoundError(f"Resource not found: {uri} ({path})") from exc


class PackageUriLocator(UriLocator):
    """Reads ``package:<dotted.package>/<path>`` from installed package data."""

    prefix = "package:"

    def accepts(self, uri: str) -> bool:
        return uri.lower().startswith(self.prefix)

    def locate(self, uri: str) -> BinaryIO:
        package, _, relative = uri[len(self.prefix):].lstrip("/").partition("/")
        if not package or not relative:
            raise ResourceNotFoundError(f"Invalid package URI: {uri}")
        try:
            target = importlib_resources.files(package)
            for part in relative.split("/"):
                target = target / part
            if target.is_file():
                return io.BytesIO(target.read_bytes())
        except (ImportError, OSError, TypeError) as exc:
            raise ResourceNotFoundError(f"Resource not found: {uri} ({exc})") from exc
        raise ResourceNotFoundError(f"Resource not found: {uri}")


class UrlUriLocator(UriLocator):
    """Fetches ``http(s)://`` resources, retrying transient network errors."""

    def __init__(
        self,
        timeout_seconds: float = 20,
        retry_attempts: int = 3,
        backoff_seconds: float = 1,
    ):
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = max(1, int(retry_attempts))
        self.backoff_seconds = backoff_seconds

    def accepts(self, uri: str) -> bool:
        return uri.lower().startswith(("http://", "https://"))

    def _get(self, uri: str) -> requests.Response:
        response = requests.get(uri, timeout=self.timeout_seconds)
        response.raise_for_status()
        return response

    def locate(self, uri: str) -> BinaryIO:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=10),
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
            reraise=True,
        )
        try:
            response = retrying(self._get, uri)
        except requests.RequestException as exc:
            raise ResourceNotFoundError(f"Unable to fetch {uri}: {exc}") from exc
        logger.debug("Fetched {} ({} bytes)", uri, len(response.content))
        return io.BytesIO(response.content)


class UriLocatorFactory:
    """Picks the first registered locator accepting a URI."""

    def __init__(self, locators: Iterable[UriLocator]):
        self.locators: List[UriLocator] = list(locators)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "UriLocatorFactory":
        remote = config.get("remote", {}) or {}
        locators: List[UriLocator] = [
            UrlUriLocator(
                timeout_seconds=float(remote.get("timeout_seconds", 20)),
                retry_attempts=int(remote.get("retry_attempts", 3)),
                backoff_seconds=float(remote.get("backoff_seconds", 1)),
            )
        ]
        if config.get("packages", True):
            locators.append(PackageUriLocator())
        locators.append(FileUriLocator(config.get("base_dir", ".")))
        return cls(locators)

    def get_instance(self, uri: str) -> UriLocator:
        for locator in self.locators:
            if locator.accepts(uri):
                return locator
        raise ResourceNotFoundError(f"No locator can handle: {uri}")

    def locate(self, uri: str) -> BinaryIO:
        return self.get_instance(uri).locate(uri)
