"""
Utility Module for the Expense Scanner.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - Text and file helpers
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, get_file_extension, non_empty_lines, text_snippet

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'non_empty_lines',
    'text_snippet'
]
