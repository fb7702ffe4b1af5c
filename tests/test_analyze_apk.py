import shutil
from pathlib import Path

import pytest

from boolseeker.application import AnalyzeApkUseCase
from boolseeker.exceptions import DirectoryNotFoundError, DirectoryWalkError, FileReadError, InvalidApkError
from boolseeker.infrastructure.decoder import ApktoolDecoder
from boolseeker.infrastructure.scanners import smali_scanner
from boolseeker.logic.models import AnalysisConfig, Category

from conftest import CHECKER_SMALI, write_apk, write_file


EXPECTED_METHODS = {
    "a.b.Checker.isRooted()",
    "a.b.Checker.isReady()",
    "com.example.security.EmuCheck.detectQemu()",
    "com.example.security.EmuCheck.hasFrida()",
}


class FakeDecoder(ApktoolDecoder):
    """Copies a prepared tree instead of running apktool."""

    def __init__(self, source_tree: Path):
        super().__init__(apktool_command="apktool")
        self.source_tree = source_tree
        self.decoded = []

    def decode(self, apk_file, output_directory):
        shutil.copytree(self.source_tree, output_directory)
        self.decoded.append(Path(output_directory))
        return Path(output_directory)


def read_lines(path: Path):
    return path.read_text(encoding="utf-8").splitlines()


def test_scan_decoded_directory(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    output = tmp_path / "methods.txt"

    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(str(decoded_app), str(output))

    assert set(result.method_index) == EXPECTED_METHODS
    assert result.total_methods == 4
    assert result.has_keyword_matches is True
    assert result.native_report is None
    assert set(read_lines(output)) == EXPECTED_METHODS
    assert len(read_lines(output)) == 4


def test_category_reports(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(
        str(decoded_app), str(tmp_path / "methods.txt")
    )

    root = result.get_category_report(Category.ROOT_DETECTION)
    emulator = result.get_category_report(Category.EMULATOR_DETECTION)
    runtime = result.get_category_report(Category.RUNTIME_INTEGRITY)
    file_integrity = result.get_category_report(Category.FILE_INTEGRITY)

    assert "test-keys" in root.entries["a.b.Checker.isRooted()"]
    assert emulator.entries == {
        "com.example.security.EmuCheck.detectQemu()": ("ro.kernel.qemu", "/dev/qemu_pipe")
    }
    assert runtime.entries == {"com.example.security.EmuCheck.hasFrida()": ("frida",)}
    assert file_integrity.is_empty

    for report in result.category_reports:
        assert "a.b.Checker.isReady()" not in report
        assert set(report.entries) <= set(result.method_index)


def test_identical_names_across_roots_collapse(tmp_path: Path, quiet_config: AnalysisConfig) -> None:
    app = tmp_path / "app"
    write_file(app / "smali" / "a" / "b" / "Checker$C.smali", ".method public isX()Z\n.end method\n")
    write_file(app / "smali_classes2" / "a" / "b" / "Checker" / "C.smali",
               ".method public isX()Z\n    const-string v0, \"xposed\"\n.end method\n")

    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(str(app), str(tmp_path / "out.txt"))

    assert result.method_index == ["a.b.Checker.C.isX()"]
    assert read_lines(tmp_path / "out.txt") == ["a.b.Checker.C.isX()"]
    assert result.get_category_report(Category.RUNTIME_INTEGRITY).entries == {"a.b.Checker.C.isX()": ("xposed",)}


def test_rescanning_is_idempotent(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    use_case = AnalyzeApkUseCase(config=quiet_config)

    first = use_case.execute_from_directory(str(decoded_app), str(tmp_path / "one.txt"))
    second = use_case.execute_from_directory(str(decoded_app), str(tmp_path / "two.txt"))

    assert set(first.method_index) == set(second.method_index)
    assert set(read_lines(tmp_path / "one.txt")) == set(read_lines(tmp_path / "two.txt"))


def test_directory_without_smali_roots_is_scanned_directly(tmp_path: Path, quiet_config: AnalysisConfig) -> None:
    write_file(tmp_path / "tree" / "a" / "b" / "Checker.smali", CHECKER_SMALI)

    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(
        str(tmp_path / "tree"), str(tmp_path / "out.txt")
    )

    assert set(result.method_index) == {"a.b.Checker.isRooted()", "a.b.Checker.isReady()"}


def test_malformed_units_are_counted(tmp_path: Path, quiet_config: AnalysisConfig) -> None:
    write_file(tmp_path / "app" / "smali" / "X.smali", ".method public isDangling()Z\n    return v0\n")

    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(
        str(tmp_path / "app"), str(tmp_path / "out.txt")
    )

    assert result.method_index == []
    assert result.has_keyword_matches is False
    assert result.statistics.unterminated_units_dropped == 1
    assert read_lines(tmp_path / "out.txt") == []


def test_native_scan(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    result = AnalyzeApkUseCase(config=quiet_config).execute_from_directory(
        str(decoded_app), str(tmp_path / "out.txt"), search_native=True
    )

    assert result.native_report.entries == {"lib/arm64-v8a/libguard.so": ("frida", "su", "/sbin/su")}


def test_missing_directory_writes_nothing(tmp_path: Path, quiet_config: AnalysisConfig) -> None:
    output = tmp_path / "out.txt"

    with pytest.raises(DirectoryNotFoundError):
        AnalyzeApkUseCase(config=quiet_config).execute_from_directory(str(tmp_path / "missing"), str(output))

    assert not output.exists()


def test_read_failure_writes_nothing(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path,
                                     monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_open(path, *args, **kwargs):
        raise OSError(5, "Input/output error", str(path))

    monkeypatch.setattr(smali_scanner, "open", failing_open, raising=False)
    output = tmp_path / "out.txt"

    with pytest.raises(FileReadError):
        AnalyzeApkUseCase(config=quiet_config).execute_from_directory(str(decoded_app), str(output))

    assert not output.exists()


def test_execute_from_apk_cleans_up(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path,
                                    monkeypatch: pytest.MonkeyPatch) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    write_apk(tmp_path / "target.apk")
    decoder = FakeDecoder(decoded_app)

    result = AnalyzeApkUseCase(config=quiet_config, decoder=decoder).execute_from_apk(
        str(tmp_path / "target.apk"), str(tmp_path / "out.txt")
    )

    assert decoder.decoded == [workdir / "target"]
    assert not (workdir / "target").exists()
    assert set(result.method_index) == EXPECTED_METHODS
    assert result.source == str(tmp_path / "target.apk")


def test_execute_from_apk_keep_decoded(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path,
                                       monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    write_apk(tmp_path / "target.apk")
    stale = tmp_path / "target"
    write_file(stale / "smali" / "Old.smali", ".method public isOld()Z\n.end method\n")

    result = AnalyzeApkUseCase(config=quiet_config, decoder=FakeDecoder(decoded_app)).execute_from_apk(
        "target.apk", str(tmp_path / "out.txt"), keep_decoded=True
    )

    assert (tmp_path / "target" / "smali").is_dir()
    assert "Old.isOld()" not in result.method_index


@pytest.mark.parametrize("apk_argument", [".", ".apk", "..", "...apk", "sub/.."])
def test_execute_from_apk_never_removes_working_directory(decoded_app: Path, quiet_config: AnalysisConfig,
                                                          tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                                          apk_argument: str) -> None:
    workdir = tmp_path / "outer" / "work"
    (workdir / "sub").mkdir(parents=True)
    sentinel = write_file(workdir / "precious.txt", "keep me")
    monkeypatch.chdir(workdir)
    decoder = FakeDecoder(decoded_app)

    with pytest.raises(InvalidApkError):
        AnalyzeApkUseCase(config=quiet_config, decoder=decoder).execute_from_apk(
            apk_argument, str(tmp_path / "out.txt")
        )

    assert sentinel.exists()
    assert decoder.decoded == []
    assert not (tmp_path / "out.txt").exists()


@pytest.mark.parametrize("apk_name", [".apk", "..apk", "...apk"])
def test_valid_archive_with_dot_name_is_rejected(decoded_app: Path, quiet_config: AnalysisConfig,
                                                  tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                                  apk_name: str) -> None:
    workdir = tmp_path / "outer" / "work"
    sentinel = write_file(workdir / "precious.txt", "keep me")
    write_apk(workdir / apk_name)
    monkeypatch.chdir(workdir)
    decoder = FakeDecoder(decoded_app)

    with pytest.raises(InvalidApkError, match="decode directory"):
        AnalyzeApkUseCase(config=quiet_config, decoder=decoder).execute_from_apk(
            apk_name, str(tmp_path / "out.txt")
        )

    assert sentinel.exists()
    assert (tmp_path / "outer").is_dir()
    assert decoder.decoded == []


def test_execute_from_apk_rejects_input_before_touching_stale_tree(decoded_app: Path, quiet_config: AnalysisConfig,
                                                                   tmp_path: Path,
                                                                   monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    stale = write_file(tmp_path / "target" / "smali" / "Old.smali", ".method public isOld()Z\n.end method\n")
    write_file(tmp_path / "target.apk", "not a zip")

    with pytest.raises(InvalidApkError, match="not a valid APK"):
        AnalyzeApkUseCase(config=quiet_config, decoder=FakeDecoder(decoded_app)).execute_from_apk(
            "target.apk", str(tmp_path / "out.txt")
        )

    assert stale.exists()


def test_walk_failure_writes_nothing(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path,
                                     monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_walk(top, onerror=None, **kwargs):
        yield str(top), ["locked"], []
        onerror(PermissionError(13, "Permission denied", str(Path(top) / "locked")))

    monkeypatch.setattr(smali_scanner.os, "walk", failing_walk)
    output = tmp_path / "out.txt"

    with pytest.raises(DirectoryWalkError, match="locked"):
        AnalyzeApkUseCase(config=quiet_config).execute_from_directory(str(decoded_app), str(output))

    assert not output.exists()


def test_log_file_written_next_to_output(decoded_app: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "results"

    AnalyzeApkUseCase(config=AnalysisConfig()).execute_from_directory(
        str(decoded_app), str(output_dir / "methods.txt")
    )

    assert list(output_dir.glob("*_boolseeker.log"))


def test_command_line_usage_errors(quiet_config: AnalysisConfig) -> None:
    use_case = AnalyzeApkUseCase(config=quiet_config)

    assert use_case.execute_from_command_line([])["exit_code"] == 2
    assert use_case.execute_from_command_line(["-d", "x"])["exit_code"] == 2
    assert use_case.execute_from_command_line(["-a", "x.apk", "-d", "x", "-o", "y"])["exit_code"] == 2
    assert use_case.execute_from_command_line(["-o"])["exit_code"] == 2
    assert use_case.execute_from_command_line(["-d", "x", "-o", "y", "--bogus"])["exit_code"] == 2


def test_command_line_fatal_error(quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    result = AnalyzeApkUseCase(config=quiet_config).execute_from_command_line(
        ["-d", str(tmp_path / "missing"), "-o", str(tmp_path / "out.txt")]
    )

    assert result["exit_code"] == 1
    assert result["error_type"] == "DirectoryNotFoundError"


def test_command_line_success(decoded_app: Path, quiet_config: AnalysisConfig, tmp_path: Path) -> None:
    result = AnalyzeApkUseCase(config=quiet_config).execute_from_command_line(
        ["-d", str(decoded_app), "-o", str(tmp_path / "out.txt"), "-so"]
    )

    assert result["exit_code"] == 0
    assert result["total_methods"] == 4
    assert result["native_libraries"]["entries"] == {"lib/arm64-v8a/libguard.so": ["frida", "su", "/sbin/su"]}
    assert "Total number of unique boolean methods found: 4" in result["report"]
