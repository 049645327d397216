#!/usr/bin/env python3
"""
Readers Module
Model file readers (Studio Model Data)
"""

from pathlib import Path

from .base_reader import BaseReader
from .line_source import LineSource, open_logical, open_system
from .smd_reader import SMDReader, BlockScanner

# Supported file extensions
SMD_EXTENSIONS = {'.smd'}
SUPPORTED_EXTENSIONS = SMD_EXTENSIONS


def create_reader(input_file, search_paths=None, progress_callback=None):
    """Factory function to create appropriate reader based on file extension

    Args:
        input_file: Path to input model file
        search_paths: Content root directories for logical lookup
        progress_callback: Optional progress callback passed to the reader

    Returns:
        BaseReader: SMDReader instance

    Raises:
        ValueError: If file extension is not supported
    """
    ext = Path(input_file).suffix.lower()

    if ext in SMD_EXTENSIONS:
        return SMDReader(input_file, search_paths, progress_callback)
    else:
        raise ValueError(
            f"Unsupported file format: {ext}\n"
            f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )


def is_supported_format(input_file):
    """Check if a file has a supported format

    Args:
        input_file: Path to input model file

    Returns:
        bool: True if format is supported
    """
    return Path(input_file).suffix.lower() in SUPPORTED_EXTENSIONS


__all__ = [
    'BaseReader',
    'SMDReader',
    'BlockScanner',
    'LineSource',
    'open_logical',
    'open_system',
    'create_reader',
    'is_supported_format',
    'SMD_EXTENSIONS',
    'SUPPORTED_EXTENSIONS',
]
