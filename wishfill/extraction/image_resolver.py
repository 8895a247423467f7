"""
Image Resolver

Turns candidate image URLs into a small stored image:
absolutize against the page, download, decode, downsize, re-encode.

Every step can fail (malformed URL, HTTP error, bytes that are not an
image); a failure only moves on to the next candidate.
"""

import io
import logging
from typing import Iterable, Optional, Tuple
from urllib.parse import urljoin, urlparse

from PIL import Image, UnidentifiedImageError

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings
from ..fetching.http_client import HTTPClient
from ..models import ImageCandidate

logger = logging.getLogger(__name__)


def resolve_url(page_url: str, image_url: str) -> Optional[str]:
    """
    Make an image URL absolute.

    Absolute http(s) URLs are returned unchanged. Protocol-relative URLs
    get the page scheme; root-relative ("/img/a.jpg") and relative
    ("img/a.jpg") paths are resolved against the page's scheme and host.

    Args:
        page_url: URL of the product page
        image_url: Candidate image URL, possibly relative

    Returns:
        Absolute URL, or None for empty, data: or non-http URLs
    """
    image_url = (image_url or "").strip()
    if not image_url:
        return None

    page = urlparse(page_url)
    if image_url.startswith("//"):
        if not page.scheme:
            return None
        return f"{page.scheme}:{image_url}"

    parsed = urlparse(image_url)
    if parsed.scheme:
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return image_url
        return None

    if page.scheme not in ("http", "https") or not page.netloc:
        return None

    return urljoin(f"{page.scheme}://{page.netloc}/", image_url)


class ImageResolver:
    """
    Downloads and downsizes product images.

    Usage:
        resolver = ImageResolver(settings)
        found = resolver.resolve_first(page_url, candidates)
        if found:
            candidate, jpeg_bytes = found
    """

    def __init__(self, settings: Optional[FetchSettings] = None, client: Optional[HTTPClient] = None):
        self.settings = settings or FetchSettings()
        self.client = client or HTTPClient()

    def resolve_first(
        self,
        page_url: str,
        candidates: Iterable[ImageCandidate],
        cancel_token: Optional[CancellationToken] = None,
    ) -> Optional[Tuple[ImageCandidate, bytes]]:
        """
        Try candidates in order; stop at the first one that downloads and
        decodes.

        Args:
            page_url: URL of the product page (base for relative URLs)
            candidates: Image candidates in priority order
            cancel_token: Checked before each attempt

        Returns:
            (winning candidate with absolute URL, JPEG bytes) or None
        """
        token = cancel_token or CancellationToken()
        tried = set()

        for candidate in candidates:
            token.raise_if_cancelled()

            url = resolve_url(page_url, candidate.url)
            if url is None:
                logger.debug("Skipping unusable image URL %r", candidate.url)
                continue
            if url in tried:
                continue
            tried.add(url)

            data = self.download(url, token)
            if data is None:
                continue

            image = self.downsize(data)
            if image is None:
                logger.debug("Could not decode image %s", url)
                continue

            logger.info("Image from %s: %s (%d bytes)", candidate.source.value, url, len(image))
            return ImageCandidate(url=url, source=candidate.source), image

        return None

    def download(self, url: str, cancel_token: Optional[CancellationToken] = None) -> Optional[bytes]:
        """Download image bytes, or None on any transport failure."""
        result = self.client.get(
            url,
            headers={
                "User-Agent": self.settings.user_agent,
                "Accept": "image/avif,image/webp,image/png,image/jpeg,image/*;q=0.8,*/*;q=0.5",
                "Accept-Language": self.settings.accept_language,
            },
            timeout=self.settings.image_timeout,
            max_bytes=self.settings.max_image_bytes,
            cancel_token=cancel_token,
        )
        if result is None or not result.body:
            return None
        return result.body

    def downsize(self, data: bytes) -> Optional[bytes]:
        """
        Decode ``data`` and re-encode it as a bounded JPEG.

        The longest side is capped at settings.image_max_side; smaller
        images keep their size. Transparency is flattened onto white.

        Returns:
            JPEG bytes or None if the data is not a decodable image
        """
        max_side = self.settings.image_max_side
        try:
            with Image.open(io.BytesIO(data)) as raw:
                if raw.mode in ("RGBA", "LA", "P"):
                    rgba = raw.convert("RGBA")
                    image = Image.new("RGB", rgba.size, (255, 255, 255))
                    image.paste(rgba, mask=rgba.split()[-1])
                else:
                    image = raw.convert("RGB")

            width, height = image.size
            longest_edge = max(width, height)
            if longest_edge > max_side:
                scale = max_side / float(longest_edge)
                new_size = (
                    max(1, int(width * scale)),
                    max(1, int(height * scale)),
                )
                image = image.resize(new_size, Image.Resampling.LANCZOS)

            output = io.BytesIO()
            image.save(output, format="JPEG", quality=self.settings.jpeg_quality, optimize=True)
            return output.getvalue()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            logger.debug("Image decode failed: %s", e)
            return None
