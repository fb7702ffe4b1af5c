"""
Infrastructure layer for boolseeker.

This module contains technical concerns like filesystem scanning, the
decoder subprocess, storage, and logging.
"""

from .scanners import MethodUnitScanner, NativeLibraryScanner
from .decoder import ApktoolDecoder, is_apk_file
from .storage import ResultStorage
from .logging import enhanced_logger
from .reporting import render_report

__all__ = [
    'MethodUnitScanner',
    'NativeLibraryScanner',
    'ApktoolDecoder',
    'is_apk_file',
    'ResultStorage',
    'enhanced_logger',
    'render_report'
]
