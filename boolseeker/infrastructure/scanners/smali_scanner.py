"""
Smali method unit scanner.

Walks a directory tree of disassembly files and cuts each zero-argument
boolean method out of its file, from the ``.method`` declaration line down to
the matching ``.end method`` line.

Files are read line by line, so peak memory is bounded by the largest single
method rather than by the size of the decoded application.
"""

import os
import re
import logging
import concurrent.futures
from pathlib import Path
from typing import Iterator, List, Tuple, Iterable, Optional

from boolseeker.exceptions import DirectoryNotFoundError, DirectoryWalkError, FileReadError
from boolseeker.logic.models import MethodUnit, ScanStatistics, qualified_class_name, qualified_method_name


class MethodUnitScanner:
    """
    Extracts boolean method units from smali files.

    Only one unit can be open at a time. A second declaration before a
    terminator replaces the open unit, and a unit still open at end of file is
    dropped. Neither case is an error; both are counted in ``statistics``.
    """

    # Directive, modifiers, name, empty parameter list, boolean return
    DECLARATION_PATTERN = re.compile(r'\.method.* (\w+)\(\)Z')
    TERMINATOR_PATTERN = re.compile(r'^\s*\.end method\s*$')

    def __init__(self, source_extension: str = ".smali", max_workers: int = 1):
        self.source_extension = source_extension
        self.max_workers = max_workers
        self.statistics = ScanStatistics()
        self.logger = logging.getLogger("scanner.smali")

    def iter_source_files(self, root: Path) -> List[Path]:
        """
        List every disassembly file under root, in a stable walk order.

        Raises:
            DirectoryNotFoundError: root is missing or not a directory
            DirectoryWalkError: some part of the tree cannot be traversed
        """
        root = Path(root)
        if not root.is_dir():
            raise DirectoryNotFoundError(f"Scan directory not found: {root}")

        def _raise_walk_error(error: OSError):
            raise DirectoryWalkError(f"Failed to walk {error.filename or root}: {error}") from error

        source_files = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(self.source_extension):
                    source_files.append(Path(dirpath) / filename)

        return source_files

    def scan_file(self, path: Path, root: Path) -> Tuple[List[MethodUnit], ScanStatistics]:
        """
        Extract the method units of a single file.

        Does not touch scanner state, so files can be scanned concurrently.

        Raises:
            FileReadError: the file cannot be opened or read
        """
        relative_path = Path(path).relative_to(root).as_posix()
        class_name = qualified_class_name(relative_path, self.source_extension)

        units = []
        stats = ScanStatistics(files_scanned=1)

        current_method: Optional[str] = None
        start_line = 0
        buffered: List[str] = []

        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as f:
                for line_number, line in enumerate(f, start=1):
                    declaration = self.DECLARATION_PATTERN.search(line)
                    if declaration:
                        if current_method is not None:
                            stats.overwritten_units_dropped += 1
                            self.logger.debug(
                                f"{relative_path}:{line_number}: declaration of {current_method} "
                                f"replaced before its terminator"
                            )
                        current_method = declaration.group(1)
                        start_line = line_number
                        buffered = []

                    if current_method is None:
                        continue

                    buffered.append(line)

                    if self.TERMINATOR_PATTERN.match(line):
                        units.append(MethodUnit(
                            qualified_name=qualified_method_name(class_name, current_method),
                            body_text="".join(buffered),
                            source_file=relative_path,
                            start_line=start_line,
                            end_line=line_number
                        ))
                        current_method = None
                        buffered = []
        except OSError as e:
            raise FileReadError(f"Failed to read {path}: {e}") from e

        if current_method is not None:
            stats.unterminated_units_dropped += 1
            self.logger.debug(f"{relative_path}: unterminated method {current_method} dropped at end of file")

        stats.units_emitted = len(units)
        return units, stats

    def iter_units(self, root: Path) -> Iterator[MethodUnit]:
        """
        Yield the method units of every file under root, in file walk order.

        The file list is resolved before the first unit is yielded, so a
        traversal failure aborts before any output is produced.
        """
        root = Path(root)
        source_files = self.iter_source_files(root)
        self.statistics.roots_scanned += 1
        self.logger.info(f"Scanning {len(source_files)} {self.source_extension} files under {root}")

        if self.max_workers > 1 and len(source_files) > 1:
            yield from self._iter_units_parallel(source_files, root)
            return

        for path in source_files:
            units, stats = self.scan_file(path, root)
            self.statistics.merge(stats)
            yield from units

    def _iter_units_parallel(self, source_files: List[Path], root: Path) -> Iterator[MethodUnit]:
        """Scan files on a thread pool; results still come back in walk order."""
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(self.scan_file, path, root) for path in source_files]
            try:
                for future in futures:
                    units, stats = future.result()
                    self.statistics.merge(stats)
                    yield from units
            finally:
                for future in futures:
                    future.cancel()

    def scan(self, root: Path) -> List[MethodUnit]:
        """Collect all method units under root; any failure discards the partial list."""
        return list(self.iter_units(root))

    def scan_roots(self, roots: Iterable[Path]) -> List[MethodUnit]:
        """Scan several smali roots and concatenate their units."""
        units = []
        for root in roots:
            units.extend(self.iter_units(root))
        return units
