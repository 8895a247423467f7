"""
Price Normalizer

Turns a raw price token from any extractor into a validated Decimal.

Handles locale separators ("49,99", "1.234,50", "1,234.50"), spaces and
non-breaking spaces used as thousands separators, and currency symbols
or codes around the number. The plausibility range is the main defense
against heuristic matches on SKUs, years or quantities: anything outside
it is rejected and the cascade moves on.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

from ..common.constants import PRICE_MAX, PRICE_MIN
from ..models import ExtractionCandidate

logger = logging.getLogger(__name__)

# First run of digits, allowing inner separators and spaces
_NUMBER_RUN = re.compile(r"-?\d(?:[\d.,'\s\u00a0\u202f]*\d)?")
_SPACES = re.compile(r"[\s\u00a0\u202f']")


class PriceNormalizer:
    """
    Normalizes and range-checks prices.

    Usage:
        normalizer = PriceNormalizer()
        normalizer.normalize("1 234,50 €")   # Decimal("1234.50")
        normalizer.normalize("2024")         # Decimal("2024"), in range
        normalizer.normalize("0.5")          # None, below range
    """

    def __init__(self, minimum: Decimal = PRICE_MIN, maximum: Decimal = PRICE_MAX):
        self.minimum = Decimal(minimum)
        self.maximum = Decimal(maximum)

    def parse(self, raw: str) -> Optional[Decimal]:
        """
        Parse a raw token into a Decimal, without range check.

        Args:
            raw: Text such as "49,99", "€ 1 234,50" or "59.99 EUR"

        Returns:
            Decimal or None if no number could be read
        """
        if raw is None:
            return None

        match = _NUMBER_RUN.search(str(raw))
        if not match:
            return None

        number = _SPACES.sub("", match.group(0))
        number = self._normalize_separators(number)

        try:
            value = Decimal(number)
        except InvalidOperation:
            return None

        if not value.is_finite():
            return None
        return value

    def is_plausible(self, value: Decimal) -> bool:
        """Check the inclusive plausibility range."""
        return self.minimum <= value <= self.maximum

    def normalize(self, raw: str) -> Optional[Decimal]:
        """
        Parse and range-check a raw token.

        Returns:
            Decimal within [minimum, maximum], or None
        """
        value = self.parse(raw)
        if value is None:
            logger.debug("Price token %r is not a number", raw)
            return None
        if not self.is_plausible(value):
            logger.debug("Price %s from %r outside [%s, %s], rejected",
                         value, raw, self.minimum, self.maximum)
            return None
        return value

    def first_valid(
        self, candidates: Iterable[ExtractionCandidate]
    ) -> Tuple[Optional[Decimal], Optional[ExtractionCandidate], list]:
        """
        Return the first candidate that normalizes into range.

        Candidates are consumed lazily, so a generator of heuristic matches
        stops at the first accepted value.

        Returns:
            (price, winning candidate, rejected raw tokens)
        """
        rejected = []
        for candidate in candidates:
            value = self.normalize(candidate.raw_text)
            if value is not None:
                return value, candidate, rejected
            rejected.append(candidate.raw_text)
        return None, None, rejected

    @staticmethod
    def _normalize_separators(number: str) -> str:
        """
        Convert to a plain "1234.50" form.

        With both "." and "," present, the last one is the decimal
        separator and the other groups thousands. A lone "," is a decimal
        separator; repeated "," or "." are thousands groups.
        """
        if "," in number and "." in number:
            if number.rfind(",") > number.rfind("."):
                return number.replace(".", "").replace(",", ".")
            return number.replace(",", "")

        if "," in number:
            if number.count(",") > 1:
                return number.replace(",", "")
            return number.replace(",", ".")

        if number.count(".") > 1:
            return number.replace(".", "")

        return number
