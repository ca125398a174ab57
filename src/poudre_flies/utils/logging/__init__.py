# ABOUTME: Logging configuration, progress display and structured logger helpers
# ABOUTME: Provides rich console feedback and structured logging for the pipeline

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .progress import ProgressReporter
from .utils import get_logger, log_api_call, log_pipeline_step, with_pipeline_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Progress
    "ProgressReporter",
    # Utilities
    "get_logger",
    "log_api_call",
    "log_pipeline_step",
    "with_pipeline_context",
]
