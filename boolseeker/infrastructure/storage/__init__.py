"""
Storage infrastructure for scan output.
"""

from .result_storage import ResultStorage

__all__ = ['ResultStorage']
