"""
Method aggregation service.

Collapses per-method findings from every scanned root into one method index
and derives the per-category reports from it.
"""

from typing import Dict, Iterable, List, Tuple
import logging

from boolseeker.logic.models import Category, CategoryReport, Finding
from .classification_service import KeywordClassifier


class MethodAggregator:
    """
    Deduplicating collector of findings.

    Qualified names have set semantics: repeats collapse to one entry and the
    keywords of the last finding seen for a name win.
    """

    def __init__(self, classifier: KeywordClassifier):
        self.classifier = classifier
        self._findings: Dict[str, Tuple[str, ...]] = {}
        self._duplicates = 0
        self.logger = logging.getLogger("aggregator")

    def add(self, finding: Finding) -> None:
        if finding.method in self._findings:
            self._duplicates += 1
        self._findings[finding.method] = finding.matched_keywords

    def add_all(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add(finding)

    def merge(self, other: 'MethodAggregator') -> None:
        """Union another aggregator into this one; merging identical sets changes nothing."""
        for method, keywords in other._findings.items():
            self.add(Finding(method=method, matched_keywords=keywords))

    @property
    def method_index(self) -> List[str]:
        """Distinct qualified names. Order is not meaningful."""
        return list(self._findings)

    @property
    def findings(self) -> Dict[str, Tuple[str, ...]]:
        return dict(self._findings)

    @property
    def total_methods(self) -> int:
        return len(self._findings)

    @property
    def duplicate_count(self) -> int:
        return self._duplicates

    @property
    def has_keyword_matches(self) -> bool:
        """Whether any method matched at least one keyword."""
        return any(self._findings.values())

    def category_reports(self) -> List[CategoryReport]:
        """One report per category, in category order; a report may be empty."""
        reports = {category: CategoryReport(category=category) for category in Category}

        for method, keywords in self._findings.items():
            if not keywords:
                continue
            for category, hits in self.classifier.categorize(keywords).items():
                reports[category].entries[method] = hits

        for report in reports.values():
            self.logger.info(f"{report.category.value}: {len(report.entries)} methods")

        return list(reports.values())
