"""
Shared infrastructure utilities.
"""

from .error_handling import (
    ErrorSeverity,
    ErrorContext,
    ErrorInfo,
    ErrorHandlingService,
    get_error_service,
    error_context,
    log_and_continue
)

__all__ = [
    'ErrorSeverity',
    'ErrorContext',
    'ErrorInfo',
    'ErrorHandlingService',
    'get_error_service',
    'error_context',
    'log_and_continue'
]
