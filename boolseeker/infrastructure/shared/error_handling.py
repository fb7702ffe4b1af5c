"""
Shared Error Handling Utilities - Centralized error logging and accounting.

Fatal conditions are logged with their context and re-raised; non-fatal
conditions (dropped malformed units, failed cleanup) are logged and counted
so the run can report how many were silently tolerated.
"""

import logging
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from contextlib import contextmanager


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Context information for error handling."""
    operation: str
    component: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorInfo:
    """Information about an error that occurred."""
    severity: ErrorSeverity
    message: str
    exception: Optional[Exception]
    context: ErrorContext
    stack_trace: Optional[str] = None

    def __post_init__(self):
        if self.exception and not self.stack_trace:
            self.stack_trace = traceback.format_exc()


class ErrorHandler(ABC):
    """Abstract base class for error handlers."""

    @abstractmethod
    def can_handle(self, error_info: ErrorInfo) -> bool:
        """Check if this handler can handle the given error."""
        pass

    @abstractmethod
    def handle(self, error_info: ErrorInfo) -> None:
        """Handle the error."""
        pass


class LoggingErrorHandler(ErrorHandler):
    """Error handler that logs errors."""

    def __init__(self, logger_name: str = "error.handler"):
        self.logger = logging.getLogger(logger_name)

    def can_handle(self, error_info: ErrorInfo) -> bool:
        return True

    def handle(self, error_info: ErrorInfo) -> None:
        """Log the error with appropriate severity."""
        log_message = f"[{error_info.context.component}] {error_info.context.operation}: {error_info.message}"

        if error_info.context.metadata:
            log_message += f" | Metadata: {error_info.context.metadata}"

        if error_info.severity == ErrorSeverity.DEBUG:
            self.logger.debug(log_message)
        elif error_info.severity == ErrorSeverity.INFO:
            self.logger.info(log_message)
        elif error_info.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        elif error_info.severity == ErrorSeverity.ERROR:
            self.logger.error(log_message, exc_info=error_info.exception)
        elif error_info.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message, exc_info=error_info.exception)


class ErrorHandlingService:
    """
    Centralized service for error accounting across the system.

    Handlers only observe; nothing is retried.
    """

    def __init__(self):
        self.handlers: List[ErrorHandler] = []
        self.error_stats: Dict[str, int] = {}
        self.logger = logging.getLogger("error.handling.service")

        self.add_handler(LoggingErrorHandler())

    def add_handler(self, handler: ErrorHandler) -> None:
        self.handlers.append(handler)

    def handle_error(self, error_info: ErrorInfo) -> None:
        """Record an error and pass it to every handler that accepts it."""
        error_key = f"{error_info.context.component}_{error_info.severity.value}"
        self.error_stats[error_key] = self.error_stats.get(error_key, 0) + 1

        for handler in self.handlers:
            if handler.can_handle(error_info):
                try:
                    handler.handle(error_info)
                except Exception as handler_error:
                    self.logger.error(f"Error handler {type(handler).__name__} failed: {handler_error}")

    def create_error_context(self, operation: str, component: str, **metadata) -> ErrorContext:
        return ErrorContext(operation=operation, component=component, metadata=metadata)

    def get_error_stats(self) -> Dict[str, int]:
        return self.error_stats.copy()

    def count(self, component: str, severity: ErrorSeverity = ErrorSeverity.WARNING) -> int:
        """Number of errors recorded for a component at a severity."""
        return self.error_stats.get(f"{component}_{severity.value}", 0)

    def reset_error_stats(self) -> None:
        self.error_stats.clear()


_error_service = ErrorHandlingService()


def get_error_service() -> ErrorHandlingService:
    """Get the global error handling service."""
    return _error_service


@contextmanager
def error_context(operation: str, component: str, **metadata):
    """Log any exception escaping the block with its context, then re-raise it."""
    context = _error_service.create_error_context(operation, component, **metadata)

    try:
        yield context
    except Exception as e:
        _error_service.handle_error(ErrorInfo(
            severity=ErrorSeverity.ERROR,
            message=str(e),
            exception=e,
            context=context
        ))
        raise


def log_and_continue(message: str,
                     component: str = "unknown_component",
                     severity: ErrorSeverity = ErrorSeverity.WARNING,
                     **metadata) -> None:
    """Log a non-fatal condition and continue execution."""
    context = _error_service.create_error_context("log_and_continue", component, **metadata)

    _error_service.handle_error(ErrorInfo(
        severity=severity,
        message=message,
        exception=None,
        context=context
    ))
