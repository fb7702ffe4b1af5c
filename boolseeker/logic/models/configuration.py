"""
Configuration domain models.

Contains the data structures for managing scan configuration and settings.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import json
from pathlib import Path

import yaml

from .keyword_catalog import KeywordCatalog


@dataclass
class AnalysisConfig:
    """
    Main configuration for a scan run.

    Keeps file-layout conventions, tool limits and the keyword catalog in one
    place instead of scattering them across scanners.
    """

    # Disassembly layout
    source_extension: str = ".smali"
    smali_root_glob: str = "smali*"

    # Native library scan
    search_native_libraries: bool = False
    native_library_dir: str = "lib"
    native_extension: str = ".so"

    # Decoder settings
    keep_decoded: bool = False
    apktool_timeout_seconds: int = 600

    # Execution settings
    max_workers: int = 1
    write_log_file: bool = True

    # Keyword overrides (None means the built-in catalog)
    keywords: Optional[Dict[str, Any]] = None

    _source_file: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        """Validate configuration values."""
        if not self.source_extension.startswith("."):
            raise ValueError(f"source_extension must start with '.': {self.source_extension}")

        if not self.native_extension.startswith("."):
            raise ValueError(f"native_extension must start with '.': {self.native_extension}")

        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        if self.apktool_timeout_seconds <= 0:
            raise ValueError("apktool_timeout_seconds must be positive")

    def create_catalog(self) -> KeywordCatalog:
        """Build the keyword catalog for this configuration."""
        return KeywordCatalog.from_dict(self.keywords)

    @classmethod
    def from_file(cls, file_path: str) -> 'AnalysisConfig':
        """
        Load configuration from a file (JSON or YAML).

        Raises:
            FileNotFoundError: the file does not exist
            ValueError: the file does not hold a valid configuration
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() in ['.yml', '.yaml']:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML in {file_path}: {e}") from e
            else:
                data = json.load(f)

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Configuration file must hold a mapping: {file_path}")

        config = cls.from_dict(data or {})
        config._source_file = str(path)
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisConfig':
        """Create configuration from dictionary."""
        scan_data = data.get('scan') or {}
        native_data = data.get('native') or {}
        decoder_data = data.get('decoder') or {}

        return cls(
            source_extension=scan_data.get('source_extension', '.smali'),
            smali_root_glob=scan_data.get('smali_root_glob', 'smali*'),
            max_workers=scan_data.get('max_workers', 1),
            search_native_libraries=native_data.get('enabled', False),
            native_library_dir=native_data.get('library_dir', 'lib'),
            native_extension=native_data.get('extension', '.so'),
            keep_decoded=decoder_data.get('keep_decoded', False),
            apktool_timeout_seconds=decoder_data.get('timeout_seconds', 600),
            write_log_file=data.get('write_log_file', True),
            keywords=data.get('keywords'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'scan': {
                'source_extension': self.source_extension,
                'smali_root_glob': self.smali_root_glob,
                'max_workers': self.max_workers,
            },
            'native': {
                'enabled': self.search_native_libraries,
                'library_dir': self.native_library_dir,
                'extension': self.native_extension,
            },
            'decoder': {
                'keep_decoded': self.keep_decoded,
                'timeout_seconds': self.apktool_timeout_seconds,
            },
            'write_log_file': self.write_log_file,
            'keywords': self.keywords,
        }
