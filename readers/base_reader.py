#!/usr/bin/env python3
"""
Base Reader Module
Abstract interface for reading skeletal model files into ModelData
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from core.coordinate_converter import CoordinateConverter
from core.hierarchy import HierarchyBuilder
from core.model_data import ModelData
from .line_source import LineSource, open_logical, open_system


class BaseReader(ABC):
    """Abstract base class for model file readers

    Subclasses implement parse(), which fills a ModelData from a LineSource.
    load() handles everything around it: opening the file (content roots
    first, then the raw path), building the hierarchy and converting
    coordinates.
    """

    def __init__(self, file_path: str, search_paths: Optional[List[str]] = None,
                 progress_callback=None):
        """Initialize reader with file path

        Args:
            file_path: Logical path (relative to a content root) or system path
            search_paths: Content root directories for logical lookup
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.file_path = Path(file_path)
        self.search_paths = list(search_paths or [])
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    @abstractmethod
    def get_format_name(self) -> str:
        """Return human-readable format name (e.g., 'Studio Model Data')"""
        pass

    @abstractmethod
    def parse(self, source: LineSource) -> ModelData:
        """Parse every block of the source into a new ModelData

        Must not raise on malformed content.

        Args:
            source: Opened line source

        Returns:
            ModelData: Parsed, not yet post-processed model
        """
        pass

    def open_source(self) -> Optional[LineSource]:
        """Open the file by logical path, falling back to the system path

        Returns:
            LineSource, or None if neither lookup succeeds
        """
        source = open_logical(self.file_path, self.search_paths)
        if source is None:
            source = open_system(self.file_path)
        return source

    def load(self, convert: bool = True) -> Optional[ModelData]:
        """Read the file and return a ready-to-use model

        Args:
            convert: Run the coordinate conversion (False keeps source axes)

        Returns:
            ModelData, or None if the file cannot be opened
        """
        source = self.open_source()
        if source is None:
            self.log(f"  Could not open {self.get_format_name()} file: {self.file_path}")
            return None
        return self.load_from_source(source, convert)

    def load_from_source(self, source: LineSource, convert: bool = True) -> ModelData:
        """Parse an already opened source and post-process the result

        Args:
            source: Opened line source
            convert: Run the coordinate conversion

        Returns:
            ModelData: Model with hierarchy built (and converted if requested)
        """
        model = self.parse(source)
        if source.path is not None:
            model.source_path = str(source.path)

        HierarchyBuilder(self.progress_callback).build(model)
        if convert:
            CoordinateConverter().convert(model)
        return model
