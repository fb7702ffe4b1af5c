"""
Apktool Decoder Service

Turns an APK into a directory tree of smali files by running apktool as a
subprocess, and removes that tree again once the scan is done.
"""

import shutil
import subprocess
import logging
import zipfile
from pathlib import Path
from typing import Optional

from boolseeker.exceptions import InvalidApkError, ToolNotFoundError, DecodeError
from boolseeker.infrastructure.shared import log_and_continue


REQUIRED_APK_ENTRIES = ("AndroidManifest.xml", "classes.dex")


def is_apk_file(apk_file: Path) -> bool:
    """
    Check that a path is a zip archive holding both a manifest and classes.dex.

    Directories and unreadable or non-zip files are simply not APKs.
    """
    path = Path(apk_file)
    if not path.is_file():
        return False

    try:
        with zipfile.ZipFile(path, 'r') as zip_ref:
            names = set(zip_ref.namelist())
    except (zipfile.BadZipFile, OSError):
        return False

    return all(entry in names for entry in REQUIRED_APK_ENTRIES)


class ApktoolDecoder:
    """Wrapper around the apktool command line."""

    def __init__(self, timeout_seconds: int = 600, apktool_command: Optional[str] = None):
        self.logger = logging.getLogger("decoder.apktool")
        self.timeout_seconds = timeout_seconds
        self._apktool_command = apktool_command or shutil.which("apktool")

    def is_available(self) -> bool:
        return self._apktool_command is not None

    def require_available(self) -> str:
        """Return the apktool command, or raise if it is not installed."""
        if not self._apktool_command:
            raise ToolNotFoundError("apktool is not installed or not found in PATH")
        return self._apktool_command

    @staticmethod
    def decoded_directory_for(apk_file: str, base_directory: Optional[Path] = None) -> Path:
        """
        Directory an APK decodes into: its base name without the .apk suffix.

        Raises:
            InvalidApkError: the name would resolve to the base directory or its parent
        """
        name = Path(apk_file).name
        if name.endswith(".apk"):
            name = name[:-len(".apk")]
        if name in ("", ".", ".."):
            raise InvalidApkError(f"Cannot derive a decode directory from {apk_file!r}")
        return (Path(base_directory) if base_directory else Path.cwd()) / name

    @staticmethod
    def validate_apk(apk_file: str) -> Path:
        """
        Check that the input exists and is an APK archive.

        Raises:
            InvalidApkError: the file is missing or not an APK
        """
        apk_path = Path(apk_file)
        if not apk_path.exists():
            raise InvalidApkError(f"The provided file does not exist: {apk_file}")

        if not is_apk_file(apk_path):
            raise InvalidApkError(f"The provided file is not a valid APK: {apk_file}")
        return apk_path

    def decode(self, apk_file: str, output_directory: Path) -> Path:
        """
        Decode an APK into output_directory.

        Raises:
            InvalidApkError: the file is missing or not an APK
            ToolNotFoundError: apktool is not available
            DecodeError: apktool failed or timed out
        """
        apk_path = self.validate_apk(apk_file)
        command = self.require_available()
        output_directory = Path(output_directory)

        self.logger.info(f"Decompiling {apk_path} to {output_directory}")
        try:
            result = subprocess.run(
                [command, "d", str(apk_path), "-o", str(output_directory), "-f"],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds
            )
        except subprocess.TimeoutExpired as e:
            raise DecodeError(f"apktool timed out after {self.timeout_seconds}s decoding {apk_file}") from e
        except OSError as e:
            raise DecodeError(f"Failed to run apktool: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise DecodeError(f"Error decompiling APK {apk_file} (exit code {result.returncode}): {stderr}")

        self.logger.info(f"Successfully decompiled {apk_file} to {output_directory}")
        return output_directory

    def cleanup(self, directory: Path) -> bool:
        """
        Remove a decoded tree. Failures are logged, never raised.

        Returns:
            True if the directory was removed
        """
        path = Path(directory)
        if not path.exists():
            return False

        if not path.is_dir():
            return False

        try:
            shutil.rmtree(path)
        except OSError as e:
            log_and_continue(f"Error cleaning up directory {path}: {e}", component="decoder.apktool")
            return False

        self.logger.info(f"Cleaned up directory {path}")
        return True
