"""
Application layer for boolseeker.

This module contains the use cases.
"""

from .analyze_apk import AnalyzeApkUseCase

__all__ = [
    'AnalyzeApkUseCase'
]
