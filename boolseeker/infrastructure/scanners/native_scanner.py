"""
Native library keyword scanner.

Substring-matches the native keyword set against the raw bytes of every
shared library under the decoded application's ``lib`` directory.
"""

import os
import logging
from pathlib import Path
from typing import List

from boolseeker.exceptions import DirectoryWalkError, FileReadError
from boolseeker.logic.models import NativeLibraryReport
from boolseeker.logic.services.classification_service import KeywordClassifier


class NativeLibraryScanner:
    """Reports which native keywords appear in each .so file."""

    def __init__(self, classifier: KeywordClassifier,
                 library_dir: str = "lib", extension: str = ".so"):
        self.classifier = classifier
        self.library_dir = library_dir
        self.extension = extension
        self.logger = logging.getLogger("scanner.native")

    def find_libraries(self, decoded_root: Path) -> List[Path]:
        """List native libraries below the library directory; none if it is absent."""
        lib_root = Path(decoded_root) / self.library_dir
        if not lib_root.is_dir():
            self.logger.info(f"No native library directory at {lib_root}")
            return []

        def _raise_walk_error(error: OSError):
            raise DirectoryWalkError(f"Failed to walk {error.filename or lib_root}: {error}") from error

        libraries = []
        for dirpath, dirnames, filenames in os.walk(lib_root, onerror=_raise_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(self.extension):
                    libraries.append(Path(dirpath) / filename)
        return libraries

    def scan(self, decoded_root: Path) -> NativeLibraryReport:
        """
        Scan every native library of a decoded application.

        Keys of the report are paths relative to the decoded root, for example
        ``lib/arm64-v8a/libcheck.so``.

        Raises:
            FileReadError: a library cannot be read
        """
        decoded_root = Path(decoded_root)
        report = NativeLibraryReport()

        for library in self.find_libraries(decoded_root):
            try:
                content = library.read_bytes()
            except OSError as e:
                raise FileReadError(f"Failed to read {library}: {e}") from e

            report.files_scanned += 1
            classification = self.classifier.classify_native(content)
            if classification.matched:
                relative_path = library.relative_to(decoded_root).as_posix()
                report.entries[relative_path] = classification.matched_keywords
                self.logger.info(f"{relative_path}: {', '.join(classification.matched_keywords)}")

        self.logger.info(f"Scanned {report.files_scanned} native libraries, "
                         f"{len(report.entries)} with keyword matches")
        return report
