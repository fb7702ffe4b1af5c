"""
Result storage implementation.
"""

import json
from pathlib import Path
from typing import Iterable

from boolseeker.exceptions import OutputWriteError
from boolseeker.logic.models import AnalysisResult


class ResultStorage:
    """
    Storage service for the method index and analysis results.
    """

    def write_method_index(self, methods: Iterable[str], output_path: str) -> int:
        """
        Write one qualified method name per line.

        The file is opened once and written sequentially; there is no header and
        no trailing metadata.

        Returns:
            Number of names written

        Raises:
            OutputWriteError: the file cannot be created or written
        """
        written = 0
        try:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8', newline='\n') as f:
                for method in methods:
                    f.write(method + "\n")
                    written += 1
        except OSError as e:
            raise OutputWriteError(f"Failed to write method index to {output_path}: {e}") from e

        return written

    def save_result(self, result: AnalysisResult, output_path: str) -> None:
        """
        Save analysis result to a JSON file.

        Raises:
            OutputWriteError: the file cannot be created or written
        """
        try:
            Path(output_path).parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise OutputWriteError(f"Failed to write result to {output_path}: {e}") from e
