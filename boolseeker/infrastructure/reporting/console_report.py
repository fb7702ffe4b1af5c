"""
Plain-text rendering of an analysis result for the console.
"""

from typing import List

from boolseeker.logic.models import AnalysisResult, CategoryReport, NativeLibraryReport


def _render_category(report: CategoryReport) -> List[str]:
    title = report.category.title
    if report.is_empty:
        return [f"X No keywords about {title} found in Java boolean methods.", ""]

    lines = [f"Java boolean methods containing keywords about {title}:"]
    for method, keywords in report.entries.items():
        lines.append(f"  + Java method: {method} - Keywords found: {', '.join(keywords)}")
    lines.append("")
    return lines


def _render_native(report: NativeLibraryReport) -> List[str]:
    if report.is_empty:
        return ["X Keywords not found in any .so files.", ""]

    lines = ["Keywords found in the following .so files:"]
    for path, keywords in report.entries.items():
        lines.append(f"  + {path} - Keywords found: {', '.join(keywords)}")
    lines.append("")
    return lines


def render_report(result: AnalysisResult) -> str:
    """Render the human-readable report for one run."""
    lines = [f"Total number of unique boolean methods found: {result.total_methods}"]
    if result.output_path:
        lines.append(f"Unique boolean methods written in {result.output_path}")

    dropped = result.statistics.malformed_units_dropped
    if dropped:
        lines.append(f"! {dropped} malformed method units were skipped")
    lines.append("")

    if result.has_keyword_matches:
        for report in result.category_reports:
            lines.extend(_render_category(report))
    else:
        lines.extend(["X No keywords found in Java boolean methods.", ""])

    if result.native_report is not None:
        lines.extend(_render_native(result.native_report))

    return "\n".join(lines)
