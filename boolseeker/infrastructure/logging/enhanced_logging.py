"""
Enhanced logging system for boolseeker.

Logs to the console and to a timestamped file written next to the method
index, so a run can be troubleshot after the decoded tree is gone.
"""

import logging
import os
import platform
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, List
import atexit


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class EnhancedLogger:
    """
    Logging setup that writes to both console and file.
    """

    def __init__(self):
        self.file_handlers: List[logging.FileHandler] = []
        self.original_handlers: Optional[List[logging.Handler]] = None
        self.original_level: int = logging.WARNING
        self.log_file_path: Optional[Path] = None

        atexit.register(self.cleanup)

    def setup_logging(self, output_directory: str, log_filename: str = "boolseeker.log",
                      verbose: bool = False) -> str:
        """
        Set up logging to both console and file.

        Args:
            output_directory: Directory where log file should be saved
            log_filename: Name of the log file
            verbose: Enable verbose console logging

        Returns:
            Path to the created log file
        """
        output_dir = Path(output_directory)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file_path = output_dir / f"{timestamp}_{log_filename}"

        root_logger = logging.getLogger()
        self.original_handlers = root_logger.handlers[:]
        self.original_level = root_logger.level
        root_logger.handlers.clear()
        root_logger.setLevel(logging.DEBUG)

        formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

        # stderr keeps stdout clean for the report
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
        root_logger.addHandler(console_handler)

        file_handler = logging.FileHandler(self.log_file_path, mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)
        self.file_handlers.append(file_handler)

        logger = logging.getLogger("enhanced.logging")
        logger.info(f"Log file: {self.log_file_path}")
        logger.info(f"Console logging level: {'INFO' if verbose else 'WARNING'}")

        return str(self.log_file_path)

    def log_system_info(self):
        """Log system information for troubleshooting."""
        logger = logging.getLogger("system.info")

        logger.info("=== System Information ===")
        logger.info(f"Platform: {platform.platform()}")
        logger.info(f"Python version: {platform.python_version()}")
        logger.info(f"Working directory: {os.getcwd()}")
        logger.info(f"Command line: {' '.join(sys.argv)}")
        logger.info(f"Scan start time: {datetime.now().isoformat()}")

    def log_scan_summary(self,
                         source: str,
                         files_scanned: int,
                         total_methods: int,
                         malformed_units: int,
                         execution_time: float):
        """Log scan execution summary."""
        logger = logging.getLogger("scan.summary")

        logger.info("=== Scan Execution Summary ===")
        logger.info(f"Source: {source}")
        logger.info(f"Smali files scanned: {files_scanned:,}")
        logger.info(f"Unique boolean methods: {total_methods:,}")
        logger.info(f"Malformed method units dropped: {malformed_units:,}")
        logger.info(f"Total execution time: {execution_time:.2f} seconds")

    def log_error_details(self, error: Exception, context: str = ""):
        """Log detailed error information for troubleshooting."""
        logger = logging.getLogger("error.details")

        if context:
            logger.error(f"Context: {context}")
        logger.error(f"Error type: {type(error).__name__}")
        logger.error(f"Error message: {str(error)}")
        logger.debug("Full stack trace:", exc_info=error)

    def create_scan_log_entry(self, stage: str, message: str, details: dict = None):
        """Create a structured log entry for a scan stage."""
        logger = logging.getLogger(f"scan.{stage}")

        log_message = f"[{stage.upper()}] {message}"
        if details:
            log_message += f" | Details: {details}"

        logger.info(log_message)

    def cleanup(self):
        """Close file handlers and restore original logging."""
        for handler in self.file_handlers:
            try:
                handler.close()
            except OSError:
                pass
        self.file_handlers.clear()

        if self.original_handlers is not None:
            root_logger = logging.getLogger()
            root_logger.handlers.clear()
            for handler in self.original_handlers:
                root_logger.addHandler(handler)
            root_logger.setLevel(self.original_level)
            self.original_handlers = None

    def finalize_logging(self, success: bool = True):
        """Finalize logging with completion status."""
        logger = logging.getLogger("enhanced.logging")

        if success:
            logger.info("Scan completed successfully")
        else:
            logger.error("Scan completed with errors")

        for handler in logging.getLogger().handlers:
            handler.flush()


# Global instance for use throughout the application
enhanced_logger = EnhancedLogger()
