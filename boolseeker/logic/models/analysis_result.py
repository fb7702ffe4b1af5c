"""
Analysis result domain models.

Contains the data structures for representing the final output of a run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional, Tuple

from .keyword_catalog import Category


@dataclass
class ScanStatistics:
    """Counters collected while walking disassembly files."""
    roots_scanned: int = 0
    files_scanned: int = 0
    units_emitted: int = 0
    unterminated_units_dropped: int = 0
    overwritten_units_dropped: int = 0

    @property
    def malformed_units_dropped(self) -> int:
        return self.unterminated_units_dropped + self.overwritten_units_dropped

    def merge(self, other: 'ScanStatistics') -> None:
        """Add another set of counters into this one."""
        self.roots_scanned += other.roots_scanned
        self.files_scanned += other.files_scanned
        self.units_emitted += other.units_emitted
        self.unterminated_units_dropped += other.unterminated_units_dropped
        self.overwritten_units_dropped += other.overwritten_units_dropped

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roots_scanned': self.roots_scanned,
            'files_scanned': self.files_scanned,
            'units_emitted': self.units_emitted,
            'unterminated_units_dropped': self.unterminated_units_dropped,
            'overwritten_units_dropped': self.overwritten_units_dropped,
        }


@dataclass
class CategoryReport:
    """Methods whose matched keywords intersect one category's keyword set."""
    category: Category
    entries: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def __contains__(self, method: str) -> bool:
        return method in self.entries

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'title': self.category.title,
            'entries': {method: list(keywords) for method, keywords in self.entries.items()},
        }


@dataclass
class NativeLibraryReport:
    """Keyword matches per native library file."""
    entries: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    files_scanned: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def to_dict(self) -> Dict[str, Any]:
        return {
            'files_scanned': self.files_scanned,
            'entries': {path: list(keywords) for path, keywords in self.entries.items()},
        }


@dataclass
class AnalysisResult:
    """
    Complete result of one analysis run.

    The method index has set semantics; its order is not meaningful.
    """
    method_index: List[str] = field(default_factory=list)
    category_reports: List[CategoryReport] = field(default_factory=list)
    native_report: Optional[NativeLibraryReport] = None
    statistics: ScanStatistics = field(default_factory=ScanStatistics)
    has_keyword_matches: bool = False
    catalog_version: str = ""
    source: str = ""
    output_path: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    execution_time: float = 0.0

    @property
    def total_methods(self) -> int:
        return len(self.method_index)

    def get_category_report(self, category: Category) -> Optional[CategoryReport]:
        for report in self.category_reports:
            if report.category == category:
                return report
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            'source': self.source,
            'output_path': self.output_path,
            'timestamp': self.timestamp.isoformat(),
            'execution_time': self.execution_time,
            'catalog_version': self.catalog_version,
            'total_methods': self.total_methods,
            'has_keyword_matches': self.has_keyword_matches,
            'methods': list(self.method_index),
            'categories': {
                report.category.value: report.to_dict() for report in self.category_reports
            },
            'native_libraries': self.native_report.to_dict() if self.native_report else None,
            'statistics': self.statistics.to_dict(),
        }
