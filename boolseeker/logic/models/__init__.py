"""
Domain models for the boolseeker scan engine.

This module contains the core data structures used throughout the system.
These models are independent of the filesystem and the decoder.
"""

from .keyword_catalog import KeywordCatalog, Category, CATALOG_VERSION
from .method_unit import MethodUnit, Finding, qualified_class_name, qualified_method_name
from .analysis_result import AnalysisResult, CategoryReport, NativeLibraryReport, ScanStatistics
from .configuration import AnalysisConfig

__all__ = [
    'KeywordCatalog',
    'Category',
    'CATALOG_VERSION',
    'MethodUnit',
    'Finding',
    'qualified_class_name',
    'qualified_method_name',
    'AnalysisResult',
    'CategoryReport',
    'NativeLibraryReport',
    'ScanStatistics',
    'AnalysisConfig'
]
