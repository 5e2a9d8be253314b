"""
Helper Utilities Module.

Small generic functions shared across the expense scanner.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - non_empty_lines: Split text into stripped, non-empty lines
    - text_snippet: Leading slice of a text for reference
"""

from pathlib import Path
from typing import List, Optional, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/records")
        PosixPath('outputs/records')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Optional[Union[str, Path]]) -> str:
    """
    Extract the lowercase file extension, including the dot.

    Returns empty string if no extension (or no filename) exists.

    Example:
        >>> get_file_extension("receipt.PDF")
        ".pdf"
        >>> get_file_extension(None)
        ""
    """
    if not filepath:
        return ""
    return Path(filepath).suffix.lower()


def non_empty_lines(text: str) -> List[str]:
    """
    Split text into stripped lines, dropping blank ones.

    Example:
        >>> non_empty_lines("  ACME  \\n\\n Total 4.50 ")
        ['ACME', 'Total 4.50']
    """
    return [line.strip() for line in text.splitlines() if line.strip()]


def text_snippet(text: str, length: int) -> str:
    """Return the first ``length`` characters of ``text``."""
    return (text or "")[:length]
