"""
Filesystem scanners for decoded applications.
"""

from .smali_scanner import MethodUnitScanner
from .native_scanner import NativeLibraryScanner

__all__ = [
    'MethodUnitScanner',
    'NativeLibraryScanner'
]
