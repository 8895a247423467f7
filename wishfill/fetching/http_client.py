"""
HTTP Client

Shared GET client for pages, images and the rendering proxy.
Handles session ownership, streaming downloads with a size cap, and
cooperative cancellation of in-flight responses.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from ..common.cancellation import CancellationToken
from ..errors import ExtractionCancelled

logger = logging.getLogger(__name__)


@dataclass
class HTTPResult:
    """A completed 2xx download."""
    url: str                # Final URL after redirects
    status_code: int
    content_type: str
    body: bytes


class HTTPClient:
    """
    Streaming GET client.

    Never raises for transport problems: DNS, connect, timeout, non-2xx
    and oversize bodies all come back as None. The only exception that
    escapes is ExtractionCancelled, when the caller's token fires.

    Usage:
        with HTTPClient() as client:
            result = client.get(url, headers=headers, timeout=15)
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(self, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            session: Shared session; the client creates and owns one if None
        """
        self._owns_session = session is None
        self.session = session or requests.Session()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        if self._owns_session:
            self.session.close()

    def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 15,
        params: Optional[Dict[str, str]] = None,
        max_bytes: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
        log_url: Optional[str] = None,
    ) -> Optional[HTTPResult]:
        """
        Download ``url`` and return its body.

        Args:
            url: Absolute URL
            headers: Request headers
            timeout: Connect/read timeout in seconds
            params: Query parameters
            max_bytes: Abort when the body grows past this size
            cancel_token: Checked before the request and between chunks
            log_url: URL to show in logs (hides query secrets)

        Returns:
            HTTPResult or None on any transport failure

        Raises:
            ExtractionCancelled: If the token is cancelled
        """
        token = cancel_token or CancellationToken()
        shown = log_url or url
        token.raise_if_cancelled()

        try:
            response = self.session.get(
                url,
                headers=headers,
                params=params,
                timeout=timeout,
                stream=True,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            if token.cancelled:
                raise ExtractionCancelled() from e
            logger.warning("GET %s failed: %s", shown, e)
            return None

        token.register(response.close)
        try:
            if not 200 <= response.status_code < 300:
                logger.warning("GET %s returned HTTP %d", shown, response.status_code)
                return None

            body = self._read_body(response, token, max_bytes, shown)
            if body is None:
                return None

            logger.debug("GET %s: %d bytes", shown, len(body))
            return HTTPResult(
                url=response.url or url,
                status_code=response.status_code,
                content_type=response.headers.get("Content-Type", ""),
                body=body,
            )
        except (requests.RequestException, OSError) as e:
            if token.cancelled:
                raise ExtractionCancelled() from e
            logger.warning("GET %s failed while reading body: %s", shown, e)
            return None
        finally:
            token.unregister(response.close)
            response.close()

    def _read_body(self, response, token: CancellationToken, max_bytes, shown: str) -> Optional[bytes]:
        """Read the streamed body chunk by chunk, honoring cancel and size cap."""
        chunks = []
        size = 0
        for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
            token.raise_if_cancelled()
            if not chunk:
                continue
            size += len(chunk)
            if max_bytes is not None and size > max_bytes:
                logger.warning("GET %s: body exceeds %d bytes, dropped", shown, max_bytes)
                return None
            chunks.append(chunk)
        token.raise_if_cancelled()
        return b"".join(chunks)
