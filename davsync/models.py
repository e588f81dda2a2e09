"""Data models for WebDAV responses."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Literal, Optional
from urllib.parse import unquote, urlparse

from .utils import normalize_remote_path

DAV_NS = "{DAV:}"

EntryType = Literal["file", "directory"]


@dataclass
class RemoteEntry:
    """A single resource reported by a PROPFIND multistatus response."""

    full_path: str
    """Decoded path relative to the server endpoint, e.g. "/site/a.txt" """

    type: EntryType
    """Either "file" or "directory" """

    last_modified: str
    """Raw ``getlastmodified`` value (empty if the server sent none)"""

    size: Optional[int] = None
    """Content length in bytes, if reported"""

    @property
    def is_directory(self) -> bool:
        """Check if this entry is a collection."""
        return self.type == "directory"

    @property
    def name(self) -> str:
        """Last component of the path."""
        return self.full_path.rstrip("/").rsplit("/", 1)[-1]

    @classmethod
    def from_response(cls, response: ET.Element, base_path: str) -> "RemoteEntry":
        """Create a RemoteEntry from a ``<D:response>`` element.

        Args:
            response: The response element
            base_path: URL path of the server endpoint (e.g. "/dav/files/me")

        Returns:
            RemoteEntry instance

        Raises:
            ValueError: If the element has no href
        """
        href = response.findtext(f"{DAV_NS}href")
        if not href:
            raise ValueError("Response element without href")

        prop = _successful_prop(response)

        is_collection = False
        last_modified = ""
        size: Optional[int] = None
        if prop is not None:
            resource_type = prop.find(f"{DAV_NS}resourcetype")
            is_collection = (
                resource_type is not None
                and resource_type.find(f"{DAV_NS}collection") is not None
            )
            last_modified = (prop.findtext(f"{DAV_NS}getlastmodified") or "").strip()
            length = prop.findtext(f"{DAV_NS}getcontentlength")
            if length and length.strip().isdigit():
                size = int(length.strip())

        return cls(
            full_path=href_to_path(href, base_path),
            type="directory" if is_collection else "file",
            last_modified=last_modified,
            size=size,
        )


def _successful_prop(response: ET.Element) -> Optional[ET.Element]:
    """Return the ``<D:prop>`` of the first propstat with a 2xx status."""
    for propstat in response.findall(f"{DAV_NS}propstat"):
        status = propstat.findtext(f"{DAV_NS}status") or ""
        parts = status.split()
        if len(parts) >= 2 and parts[1].startswith("2"):
            return propstat.find(f"{DAV_NS}prop")
    return None


def href_to_path(href: str, base_path: str) -> str:
    """Convert an href into a decoded path relative to the endpoint.

    Hrefs may be absolute URLs or absolute paths and are percent-encoded.

    Examples:
        >>> href_to_path("/dav/site/a%20b.txt", "/dav")
        '/site/a b.txt'
        >>> href_to_path("https://host/dav/site/", "/dav/")
        '/site'
    """
    path = unquote(urlparse(href).path)
    base = normalize_remote_path(unquote(base_path))
    path = normalize_remote_path(path)
    if base != "/":
        if path == base:
            return "/"
        if path.startswith(base + "/"):
            path = path[len(base) :]
    return path


def parse_multistatus(content: bytes, base_path: str) -> list[RemoteEntry]:
    """Parse a ``207 Multi-Status`` body into remote entries.

    Args:
        content: Raw response body
        base_path: URL path of the server endpoint

    Returns:
        List of RemoteEntry objects, in document order

    Raises:
        ValueError: If the body is not a valid multistatus document
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ValueError(f"Invalid multistatus XML: {e}") from e

    if root.tag != f"{DAV_NS}multistatus":
        raise ValueError(f"Unexpected root element: {root.tag}")

    return [
        RemoteEntry.from_response(response, base_path)
        for response in root.findall(f"{DAV_NS}response")
    ]
