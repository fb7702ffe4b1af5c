"""
Main use case for scanning an application.

Decodes an APK (or takes an already decoded tree), extracts its boolean
methods, classifies them against the keyword catalog and writes the method
index.
"""

import sys
import time
from pathlib import Path
from typing import Dict, Any, Optional, List, Callable
import logging

from boolseeker.exceptions import BoolSeekerError, DirectoryNotFoundError
from boolseeker.logic.models import AnalysisConfig, AnalysisResult
from boolseeker.logic.services import KeywordClassifier, MethodAggregator
from boolseeker.infrastructure.scanners import MethodUnitScanner, NativeLibraryScanner
from boolseeker.infrastructure.decoder import ApktoolDecoder
from boolseeker.infrastructure.storage import ResultStorage
from boolseeker.infrastructure.logging import enhanced_logger
from boolseeker.infrastructure.reporting import render_report
from boolseeker.infrastructure.shared import error_context, log_and_continue


class UsageError(ValueError):
    """Raised for invalid command line usage."""


class AnalyzeApkUseCase:
    """
    Use case for scanning one application per run.

    Supports two modes:
    1. Decode an APK with apktool, scan it, and clean up the decoded tree
    2. Scan an already decoded directory
    """

    def __init__(self, config_path: str = None, verbose: bool = False,
                 config: Optional[AnalysisConfig] = None,
                 decoder: Optional[ApktoolDecoder] = None):
        """
        Initialize the use case.

        Args:
            config_path: Path to configuration file (optional)
            verbose: Enable verbose logging (optional)
            config: Ready-made configuration, takes precedence over config_path
            decoder: Decoder to use instead of the default apktool wrapper
        """
        self.logger = logging.getLogger("analyze.apk")
        self.progress_logger = logging.getLogger("progress")
        self.verbose = verbose

        if config is not None:
            self.config = config
        elif config_path and Path(config_path).exists():
            self.config = AnalysisConfig.from_file(config_path)
        else:
            self.config = AnalysisConfig()

        self.catalog = self.config.create_catalog()
        self.classifier = KeywordClassifier(self.catalog)
        self.decoder = decoder or ApktoolDecoder(timeout_seconds=self.config.apktool_timeout_seconds)
        self.storage = ResultStorage()

    def find_smali_roots(self, decoded_directory: Path) -> List[Path]:
        """
        Smali roots of a decoded tree (smali, smali_classes2, ...).

        A directory without any is treated as a smali root itself.
        """
        decoded_directory = Path(decoded_directory)
        if not decoded_directory.is_dir():
            raise DirectoryNotFoundError(f"Decoded directory not found: {decoded_directory}")

        roots = sorted(p for p in decoded_directory.glob(self.config.smali_root_glob) if p.is_dir())
        return roots or [decoded_directory]

    def analyze_directory(self, decoded_directory: str, output_file: str,
                          search_native: Optional[bool] = None) -> AnalysisResult:
        """
        Scan a decoded tree and write its method index.

        Any walk or read failure aborts before the output file is touched.
        """
        start_time = time.time()
        decoded_path = Path(decoded_directory)
        if search_native is None:
            search_native = self.config.search_native_libraries

        roots = self.find_smali_roots(decoded_path)
        self.progress_logger.warning(f"Searching for Java boolean methods and keywords in {decoded_path}...")

        scanner = MethodUnitScanner(
            source_extension=self.config.source_extension,
            max_workers=self.config.max_workers
        )
        aggregator = MethodAggregator(self.classifier)

        for root in roots:
            with error_context("scan_smali_root", "scanner.smali", root=str(root)):
                for unit in scanner.iter_units(root):
                    aggregator.add(self.classifier.classify_unit(unit))

        stats = scanner.statistics
        if stats.malformed_units_dropped:
            log_and_continue(
                f"{stats.malformed_units_dropped} malformed method units dropped",
                component="scanner.smali",
                unterminated=stats.unterminated_units_dropped,
                overwritten=stats.overwritten_units_dropped
            )

        self.storage.write_method_index(aggregator.method_index, output_file)
        self.logger.info(f"Wrote {aggregator.total_methods} methods to {output_file}")

        native_report = None
        if search_native:
            self.progress_logger.warning("Searching for keywords in native functions within .so files...")
            native_scanner = NativeLibraryScanner(
                self.classifier,
                library_dir=self.config.native_library_dir,
                extension=self.config.native_extension
            )
            native_report = native_scanner.scan(decoded_path)

        return AnalysisResult(
            method_index=aggregator.method_index,
            category_reports=aggregator.category_reports(),
            native_report=native_report,
            statistics=stats,
            has_keyword_matches=aggregator.has_keyword_matches,
            catalog_version=self.catalog.version,
            source=str(decoded_path),
            output_path=str(output_file),
            execution_time=time.time() - start_time
        )

    def execute_from_apk(self, apk_file: str, output_file: str,
                         search_native: Optional[bool] = None,
                         keep_decoded: Optional[bool] = None) -> AnalysisResult:
        """Decode an APK, scan it, and remove the decoded tree afterwards."""
        if keep_decoded is None:
            keep_decoded = self.config.keep_decoded

        def _run() -> AnalysisResult:
            self.decoder.validate_apk(apk_file)
            decoded_directory = self.decoder.decoded_directory_for(apk_file)
            if decoded_directory.exists():
                self.decoder.cleanup(decoded_directory)

            self.decoder.require_available()
            self.progress_logger.warning(f"Decompiling APK: {apk_file}...")
            self.decoder.decode(apk_file, decoded_directory)
            self.progress_logger.warning(f"Successfully decompiled {apk_file} to {decoded_directory}")

            try:
                result = self.analyze_directory(str(decoded_directory), output_file, search_native)
            finally:
                if not keep_decoded:
                    self.decoder.cleanup(decoded_directory)
            result.source = str(apk_file)
            return result

        return self._execute(apk_file, output_file, _run)

    def execute_from_directory(self, decoded_directory: str, output_file: str,
                               search_native: Optional[bool] = None) -> AnalysisResult:
        """Scan an already decoded tree."""
        return self._execute(
            decoded_directory, output_file,
            lambda: self.analyze_directory(decoded_directory, output_file, search_native)
        )

    def _execute(self, source: str, output_file: str, run: Callable[[], AnalysisResult]) -> AnalysisResult:
        """Wrap a run with log file setup, summary and error reporting."""
        start_time = time.time()

        if self.config.write_log_file:
            log_directory = Path(output_file).resolve().parent
            enhanced_logger.setup_logging(str(log_directory), verbose=self.verbose)
            enhanced_logger.log_system_info()

        enhanced_logger.create_scan_log_entry("start", "Scan initiated", {
            "source": source,
            "output_file": output_file,
            "config_file": self.config._source_file or "default",
            "catalog_version": self.catalog.version,
            "config": self.config.to_dict()
        })

        try:
            result = run()
        except Exception as e:
            execution_time = time.time() - start_time
            enhanced_logger.log_error_details(e, f"Scan of {source} failed after {execution_time:.2f} seconds")
            enhanced_logger.finalize_logging(success=False)
            raise
        else:
            result.execution_time = time.time() - start_time
            enhanced_logger.log_scan_summary(
                source=source,
                files_scanned=result.statistics.files_scanned,
                total_methods=result.total_methods,
                malformed_units=result.statistics.malformed_units_dropped,
                execution_time=result.execution_time
            )
            enhanced_logger.finalize_logging(success=True)
            return result
        finally:
            if self.config.write_log_file:
                enhanced_logger.cleanup()

    def execute_from_command_line(self, args: list = None) -> Dict[str, Any]:
        """
        Execute from command line arguments.

        Returns the result as a dictionary, with the rendered console report
        under ``report``; failures come back as a dictionary holding ``error``
        and a non-zero ``exit_code``.
        """
        if args is None:
            args = sys.argv[1:]

        try:
            options = self._parse_arguments(args)
        except UsageError as e:
            return {
                "error": f"{e}\n{self._get_usage_message()}",
                "error_type": "UsageError",
                "exit_code": 2
            }

        try:
            if options["apk"]:
                result = self.execute_from_apk(
                    options["apk"], options["output"],
                    search_native=options["search_native"],
                    keep_decoded=options["keep_decoded"]
                )
            else:
                result = self.execute_from_directory(
                    options["directory"], options["output"],
                    search_native=options["search_native"]
                )
            if options["json_out"]:
                self.storage.save_result(result, options["json_out"])
                self.logger.info(f"Saved JSON result to {options['json_out']}")
        except (BoolSeekerError, OSError, ValueError) as e:
            self.logger.error(f"Scan failed: {e}")
            return {
                "error": str(e),
                "error_type": type(e).__name__,
                "exit_code": 1
            }

        output = result.to_dict()
        output["report"] = render_report(result)
        output["exit_code"] = 0
        return output

    def _parse_arguments(self, args: list) -> Dict[str, Any]:
        options = {
            "apk": None,
            "directory": None,
            "output": None,
            "search_native": None,
            "keep_decoded": None,
            "json_out": None,
        }

        i = 0
        while i < len(args):
            arg = args[i]
            if arg in ("-a", "--apk", "-d", "--dir", "-o", "--output", "--json-out"):
                if i + 1 >= len(args):
                    raise UsageError(f"Missing value for {arg}")
                value = args[i + 1]
                if arg in ("-a", "--apk"):
                    options["apk"] = value
                elif arg == "--json-out":
                    options["json_out"] = value
                elif arg in ("-d", "--dir"):
                    options["directory"] = value
                else:
                    options["output"] = value
                i += 2
            elif arg in ("-so", "--so"):
                options["search_native"] = True
                i += 1
            elif arg == "--keep":
                options["keep_decoded"] = True
                i += 1
            else:
                raise UsageError(f"Unknown argument: {arg}")

        if not options["output"]:
            raise UsageError("Error: -o/--output is required.")
        if bool(options["apk"]) == bool(options["directory"]):
            raise UsageError("Error: exactly one of -a/--apk or -d/--dir is required.")

        return options

    def _get_usage_message(self) -> str:
        """Get usage message for command line interface."""
        return """Usage:
        boolseeker -a <file.apk> -o <output.txt> [-so] [--keep]   # Decode and scan an APK
        boolseeker -d <decoded_dir> -o <output.txt> [-so]         # Scan an apktool output directory

        Options:
        -a, --apk        Path to the APK file to decode and analyze
        -d, --dir        Path to an already decoded directory
        -o, --output     Path to the output file for boolean method names (required)
        -so, --so        Enable searching in .so files
        --keep           Keep the decoded directory after the scan
        --json           Print the result as JSON instead of the text report
        --json-out <path> Also save the JSON result to a file
        --config <path>  Configuration file (YAML or JSON)
        --verbose, -v    Enable verbose logging
        --version        Print the version and exit"""
