"""
Logging infrastructure for boolseeker.
"""

from .enhanced_logging import EnhancedLogger, enhanced_logger

__all__ = [
    'EnhancedLogger',
    'enhanced_logger'
]
