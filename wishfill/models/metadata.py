"""
Metadata models.

Pure data classes for the extraction result and the intermediate values
the cascade passes around. No business logic beyond small helpers.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PriceSource(Enum):
    """Where a raw price token came from, most authoritative first."""
    JSON_LD = "json-ld"
    OPEN_GRAPH = "open-graph"
    MICRODATA = "microdata"
    HTML_HEURISTIC = "html-heuristic"
    URL = "url"


class ImageSource(Enum):
    """Where a candidate image URL came from, most authoritative first."""
    JSON_LD = "json-ld"
    OPEN_GRAPH = "open-graph"
    MICRODATA = "microdata"
    IMG_TAG = "img-tag"
    LINK_PREVIEW = "link-preview"


class ExtractionState(Enum):
    """Orchestrator states, in the order they are entered."""
    FETCHING = "fetching"
    EXTRACTING_STRUCTURED = "extracting-structured"
    EXTRACTING_FALLBACKS = "extracting-fallbacks"
    RESOLVING_IMAGE = "resolving-image"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass(frozen=True)
class ExtractionCandidate:
    """A raw price token with its provenance, before normalization."""
    raw_text: str
    source: PriceSource


@dataclass(frozen=True)
class ImageCandidate:
    """A possibly-relative image URL with its provenance."""
    url: str
    source: ImageSource


@dataclass(frozen=True)
class ProductMetadata:
    """
    Result of one extraction.

    Every field is optional: a partially filled (or empty) value is a
    normal outcome, meaning the caller falls back to manual entry for
    whatever is missing.
    """

    title: Optional[str] = None
    price: Optional[Decimal] = None
    image: Optional[bytes] = None   # Downsized JPEG

    @property
    def is_empty(self) -> bool:
        return self.title is None and self.price is None and self.image is None

    def missing_fields(self) -> List[str]:
        """Names of the fields that are still unset."""
        return [name for name in ("title", "price", "image") if getattr(self, name) is None]

    def merged_with(self, other: "ProductMetadata") -> "ProductMetadata":
        """Fill unset fields from ``other``. Set fields are never overwritten."""
        return replace(
            self,
            title=self.title if self.title is not None else other.title,
            price=self.price if self.price is not None else other.price,
            image=self.image if self.image is not None else other.image,
        )


@dataclass
class ExtractionReport:
    """
    Provenance of one extraction run.

    Tracks which source supplied each field and which optional paths
    were taken, for logs and the CLI report.
    """

    url: str
    title_source: str = ""
    price_source: str = ""
    image_source: str = ""
    image_url: str = ""
    used_rendering_proxy: bool = False
    used_link_preview: bool = False
    cancelled: bool = False
    state: ExtractionState = ExtractionState.FETCHING
    rejected_prices: List[str] = field(default_factory=list)
