"""
Keyword classification service.

Decides which catalog keywords a piece of text contains and which detection
categories those keywords fall into.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Sequence
import logging

from boolseeker.logic.models import KeywordCatalog, Category, MethodUnit, Finding


@dataclass(frozen=True)
class Classification:
    """Keywords found in one piece of text."""
    matched_keywords: Tuple[str, ...]

    @property
    def matched(self) -> bool:
        return bool(self.matched_keywords)


class KeywordClassifier:
    """
    Case-insensitive substring matcher over a keyword catalog.

    Matching is plain containment, not whole-word, so short tokens such as
    ``root`` also hit unrelated identifiers like ``getRootView``.
    """

    def __init__(self, catalog: KeywordCatalog = None):
        self.catalog = catalog or KeywordCatalog.default()
        self.logger = logging.getLogger("classifier")

        self._java = self._lowered(self.catalog.java_keywords)
        self._native = self._lowered(self.catalog.native_keywords)
        self._categories = {
            category: frozenset(keyword.lower() for keyword in keywords)
            for category, keywords in self.catalog.categories.items()
        }

    @staticmethod
    def _lowered(keywords: Sequence[str]) -> Tuple[Tuple[str, str], ...]:
        return tuple((keyword, keyword.lower()) for keyword in keywords)

    @staticmethod
    def _match(text: str, keywords: Tuple[Tuple[str, str], ...]) -> Classification:
        haystack = text.lower()
        return Classification(tuple(
            keyword for keyword, lowered in keywords if lowered in haystack
        ))

    def classify(self, body_text: str) -> Classification:
        """Find every Java catalog keyword in a method body, in catalog order."""
        return self._match(body_text, self._java)

    def classify_unit(self, unit: MethodUnit) -> Finding:
        """Classify a method unit into a finding."""
        classification = self.classify(unit.body_text)
        if classification.matched:
            self.logger.debug(f"{unit.qualified_name}: {', '.join(classification.matched_keywords)}")
        return Finding(method=unit.qualified_name, matched_keywords=classification.matched_keywords)

    def classify_native(self, content: bytes) -> Classification:
        """
        Find every native keyword in raw file bytes.

        Bytes are decoded as latin-1 so every byte maps to exactly one character
        and ASCII keywords line up with the original byte offsets.
        """
        return self._match(content.decode('latin-1'), self._native)

    def categorize(self, matched_keywords: Sequence[str]) -> Dict[Category, Tuple[str, ...]]:
        """
        Intersect matched keywords with each category's keyword set.

        Only categories with a non-empty intersection appear in the result.
        """
        buckets = {}
        for category in Category:
            members = self._categories.get(category, frozenset())
            hits = tuple(keyword for keyword in matched_keywords if keyword.lower() in members)
            if hits:
                buckets[category] = hits
        return buckets
