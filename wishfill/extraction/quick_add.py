"""
Quick Add Extraction

Deadline-bounded variant of the extraction for interactive "add from
URL" flows. The cascade runs on a worker thread; when it has not finished
by the deadline its cancellation token is fired, which closes the
in-flight response so the worker stops at its next check, and the caller
immediately gets a title derived from the URL alone.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Dict, Optional

from ..common.cancellation import CancellationToken
from ..common.config_loader import FetchSettings, load_fetch_settings, load_known_hosts
from ..common.url_title import title_from_url
from ..common.validation import is_valid_url
from ..models import ProductMetadata
from .metadata_extractor import MetadataOrchestrator

logger = logging.getLogger(__name__)


class QuickAddExtractor:
    """
    Runs MetadataOrchestrator.extract under a wall-clock deadline.

    Usage:
        quick = QuickAddExtractor()
        metadata = quick.fetch("https://shop.example/p/1", deadline=3.0)
    """

    def __init__(
        self,
        settings: Optional[FetchSettings] = None,
        orchestrator_factory: Optional[Callable[[], MetadataOrchestrator]] = None,
        known_hosts: Optional[Dict[str, str]] = None,
    ):
        """
        Args:
            settings: Pipeline settings (if None, loads from config)
            orchestrator_factory: Builds one orchestrator per call
            known_hosts: Host -> label mapping for URL titles (if None, loads from config)
        """
        self.settings = settings or load_fetch_settings()
        self.orchestrator_factory = orchestrator_factory or (
            lambda: MetadataOrchestrator(settings=self.settings)
        )
        self.known_hosts = known_hosts if known_hosts is not None else load_known_hosts()

    def fetch(self, url: str, deadline: Optional[float] = None, render: bool = False) -> Optional[ProductMetadata]:
        """
        Extract metadata within ``deadline`` seconds.

        Args:
            url: Product URL
            deadline: Wall-clock budget (default: settings.quick_add_deadline)
            render: Fetch through the rendering proxy first

        Returns:
            ProductMetadata whose title is always set (URL-derived when the
            page gave none or the deadline passed), or None for an invalid URL
        """
        if not is_valid_url(url):
            logger.warning("Invalid product URL: %r", url)
            return None

        url = url.strip()
        if deadline is None:
            deadline = self.settings.quick_add_deadline

        token = CancellationToken()
        orchestrator = self.orchestrator_factory()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="quick-add")

        try:
            future = executor.submit(orchestrator.extract, url, render, token)
            # Close the orchestrator's session once the worker is really done
            future.add_done_callback(lambda _: orchestrator.close())
            try:
                metadata, _ = future.result(timeout=deadline)
            except FutureTimeout:
                token.cancel()
                logger.info("Extraction of %s exceeded %.1fs, using URL title", url, deadline)
                metadata = ProductMetadata()
        finally:
            executor.shutdown(wait=False)

        if metadata.title is None:
            metadata = metadata.merged_with(ProductMetadata(title=title_from_url(url, self.known_hosts)))
        return metadata
