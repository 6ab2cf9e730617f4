"""
Core utilities for MedOps.

This package provides core functionality including logging configuration,
monitoring, the error taxonomy, business rules and the database layer.
"""

from medops.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
