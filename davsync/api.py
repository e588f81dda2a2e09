"""WebDAV client."""

from __future__ import annotations

import logging
from typing import IO, Any
from urllib.parse import quote, urlparse

import httpx

from .config import config
from .exceptions import (
    AuthenticationError,
    ConfigError,
    ProtocolError,
    UnexpectedRemoteState,
)
from .models import RemoteEntry, parse_multistatus
from .utils import normalize_remote_path

logger = logging.getLogger(__name__)

PROPFIND_BODY = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<d:propfind xmlns:d="DAV:">'
    "<d:prop>"
    "<d:resourcetype/>"
    "<d:getlastmodified/>"
    "<d:getcontentlength/>"
    "</d:prop>"
    "</d:propfind>"
)


class WebDavClient:
    """Client for a WebDAV server.

    Every method issues exactly one request; nothing is retried. Paths are
    remote paths relative to the server URL (e.g. "/site/index.html").
    """

    def __init__(
        self,
        server: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize WebDAV client.

        Args:
            server: Server URL (uses config if not provided)
            username: Username for basic auth (uses config if not provided)
            password: Password for basic auth (uses config if not provided)
            timeout: Request timeout in seconds (default: no timeout)
            transport: Optional httpx transport, mainly for testing
        """
        self.server = server or config.server
        self.username = username if username is not None else config.username
        self.password = password if password is not None else config.password
        self.timeout = timeout
        self._transport = transport

        if not self.server:
            raise ConfigError(
                "WebDAV server not configured. "
                "Please set DAVSYNC_SERVER or run 'davsync init'."
            )

        parsed = urlparse(self.server)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"Invalid server URL: {self.server}")

        self.base_path = parsed.path or "/"
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            auth = None
            if self.username:
                auth = httpx.BasicAuth(self.username, self.password or "")
            self._client = httpx.Client(
                base_url=self.server,
                auth=auth,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> WebDavClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _url(self, path: str) -> str:
        # Relative to base_url; httpx appends it to the endpoint path
        return quote(normalize_remote_path(path).lstrip("/"), safe="/")

    def _raise_for_status(self, response: httpx.Response, path: str) -> None:
        """Translate an unsuccessful response into a ProtocolError."""
        status_code = response.status_code
        if status_code < 400:
            return

        if status_code == 401:
            raise AuthenticationError(
                "Authentication failed - check username and password",
                path,
                status_code=status_code,
            )
        elif status_code == 403:
            message = "Access forbidden - check your permissions"
        elif status_code == 404:
            message = "Resource not found"
        elif status_code == 409:
            message = "Conflict - parent collection missing"
        elif status_code == 507:
            message = "Insufficient storage on server"
        else:
            message = f"Request failed with status {status_code}"
            if response.reason_phrase:
                message = f"{message} ({response.reason_phrase})"

        raise ProtocolError(message, path, status_code=status_code)

    def _request(
        self, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        """Send a single request.

        Args:
            method: HTTP or WebDAV method
            path: Remote path
            **kwargs: Additional arguments passed to httpx

        Returns:
            The response, whatever its status

        Raises:
            ProtocolError: On transport failure
        """
        client = self._get_client()
        try:
            response = client.request(method, self._url(path), **kwargs)
        except httpx.RequestError as e:
            raise ProtocolError(f"Network error: {e}", path) from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    def exists(self, path: str) -> bool:
        """Check whether a resource exists.

        Args:
            path: Remote path

        Returns:
            True if the resource exists, False otherwise
        """
        response = self._request(
            "PROPFIND",
            path,
            headers={"Depth": "0", "Content-Type": "application/xml"},
            content=PROPFIND_BODY,
        )
        if response.status_code == 404:
            return False
        self._raise_for_status(response, path)
        return True

    def create_directory(self, path: str) -> None:
        """Create a collection. The parent collection must exist.

        Args:
            path: Remote path of the new directory
        """
        response = self._request("MKCOL", path)
        self._raise_for_status(response, path)

    def list_recursive(self, root_path: str) -> list[RemoteEntry]:
        """List every resource below a collection.

        Args:
            root_path: Remote path of the collection

        Returns:
            List of RemoteEntry objects, including the collection itself

        Raises:
            ProtocolError: On transport failure, error status or
                malformed response
        """
        response = self._request(
            "PROPFIND",
            root_path,
            headers={"Depth": "infinity", "Content-Type": "application/xml"},
            content=PROPFIND_BODY,
        )
        self._raise_for_status(response, root_path)

        if response.status_code != 207:
            raise ProtocolError(
                f"Expected 207 Multi-Status, got {response.status_code}",
                root_path,
                status_code=response.status_code,
            )

        try:
            entries = parse_multistatus(response.content, self.base_path)
        except ValueError as e:
            raise ProtocolError(f"Malformed listing: {e}", root_path) from e

        logger.debug("Listed %d entries under %s", len(entries), root_path)
        return entries

    def put_file(
        self,
        path: str,
        content: IO[bytes] | bytes,
        overwrite: bool,
        size: int | None = None,
    ) -> None:
        """Upload file content.

        Args:
            path: Remote path of the file
            content: Binary stream or bytes to upload
            overwrite: If False, fail when the target already exists
            size: Content length, sent so the server does not need
                chunked transfer encoding

        Raises:
            UnexpectedRemoteState: If overwrite is False and the target exists
            ProtocolError: On any other failure
        """
        headers = {"Content-Type": "application/octet-stream"}
        if not overwrite:
            headers["If-None-Match"] = "*"
        if size is not None:
            headers["Content-Length"] = str(size)

        response = self._request("PUT", path, headers=headers, content=content)

        if response.status_code == 412 and not overwrite:
            raise UnexpectedRemoteState(
                "Target already exists on the server", path
            )
        self._raise_for_status(response, path)

    def delete_file(self, path: str) -> None:
        """Delete a resource.

        Args:
            path: Remote path of the file
        """
        response = self._request("DELETE", path)
        self._raise_for_status(response, path)
