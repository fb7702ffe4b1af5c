"""
Domain services for the boolseeker scan engine.

This module contains the classification and aggregation logic.
"""

from .classification_service import KeywordClassifier, Classification
from .aggregation_service import MethodAggregator

__all__ = [
    'KeywordClassifier',
    'Classification',
    'MethodAggregator'
]
