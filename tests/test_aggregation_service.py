from boolseeker.logic.models import Category, Finding, KeywordCatalog
from boolseeker.logic.services import KeywordClassifier, MethodAggregator


def make_aggregator() -> MethodAggregator:
    return MethodAggregator(KeywordClassifier(KeywordCatalog.default()))


FINDINGS = [
    Finding("a.b.Checker.isRooted()", ("root", "test-keys")),
    Finding("a.b.Checker.isReady()", ()),
    Finding("c.Emu.isEmulator()", ("ro.kernel.qemu", "emulator")),
    Finding("c.Sig.isTampered()", ("frida", "signature")),
]


def test_method_index_is_distinct_names() -> None:
    aggregator = make_aggregator()
    aggregator.add_all(FINDINGS)
    aggregator.add(Finding("a.b.Checker.isReady()", ()))

    assert set(aggregator.method_index) == {f.method for f in FINDINGS}
    assert aggregator.total_methods == 4
    assert aggregator.duplicate_count == 1


def test_last_seen_keywords_win() -> None:
    aggregator = make_aggregator()
    aggregator.add(Finding("a.b.C.isX()", ("magisk",)))
    aggregator.add(Finding("a.b.C.isX()", ("frida",)))

    assert aggregator.findings == {"a.b.C.isX()": ("frida",)}


def test_merge_of_identical_runs_is_idempotent() -> None:
    first = make_aggregator()
    first.add_all(FINDINGS)
    second = make_aggregator()
    second.add_all(FINDINGS)

    first.merge(second)

    assert set(first.method_index) == {f.method for f in FINDINGS}
    assert first.findings == second.findings


def test_category_reports_cover_every_category() -> None:
    aggregator = make_aggregator()
    aggregator.add_all(FINDINGS)

    reports = {report.category: report for report in aggregator.category_reports()}

    assert set(reports) == set(Category)
    assert reports[Category.ROOT_DETECTION].entries == {"a.b.Checker.isRooted()": ("root", "test-keys")}
    assert reports[Category.EMULATOR_DETECTION].entries == {"c.Emu.isEmulator()": ("ro.kernel.qemu", "emulator")}
    assert reports[Category.RUNTIME_INTEGRITY].entries == {"c.Sig.isTampered()": ("frida",)}
    assert reports[Category.FILE_INTEGRITY].entries == {"c.Sig.isTampered()": ("signature",)}


def test_every_reported_method_is_indexed() -> None:
    aggregator = make_aggregator()
    aggregator.add_all(FINDINGS)
    index = set(aggregator.method_index)

    for report in aggregator.category_reports():
        assert set(report.entries) <= index


def test_unmatched_method_is_in_no_report() -> None:
    aggregator = make_aggregator()
    aggregator.add_all(FINDINGS)

    for report in aggregator.category_reports():
        assert "a.b.Checker.isReady()" not in report


def test_has_keyword_matches() -> None:
    aggregator = make_aggregator()
    aggregator.add(Finding("a.B.isX()", ()))
    assert aggregator.has_keyword_matches is False

    aggregator.add(Finding("a.B.isY()", ("nox",)))
    assert aggregator.has_keyword_matches is True


def test_empty_aggregator_produces_empty_reports() -> None:
    reports = make_aggregator().category_reports()

    assert len(reports) == 4
    assert all(report.is_empty for report in reports)
