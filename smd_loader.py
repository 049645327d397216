#!/usr/bin/env python3
"""
SMD Model Loader - Main Orchestrator Module
Coordinates reading, hierarchy building and coordinate conversion of
Studio Model Data (.smd) files, and reports what was loaded.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from core.hierarchy import node_depths
from core.model_data import ModelData
from readers import create_reader


class SMDModelLoader:
    """Model loader (orchestrator/facade)

    This class coordinates the loading process:
    1. Pick a reader for the input file (via readers module)
    2. Open it from the content roots, or by its raw path
    3. Parse, build the bone hierarchy and convert coordinates (via the reader)

    A file that cannot be opened yields None rather than an exception.
    """

    def __init__(self, progress_callback=None, search_paths=None):
        """Initialize loader

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
            search_paths: Content root directories searched before the raw path
        """
        self.progress_callback = progress_callback
        self.search_paths = list(search_paths or [])

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def load(self, input_file, convert=True) -> Optional[ModelData]:
        """Load a model file

        Args:
            input_file: Logical or system path to the model file
            convert: Convert into the engine coordinate convention

        Returns:
            ModelData, or None if the file could not be opened

        Raises:
            ValueError: If the file extension is not supported
        """
        reader = create_reader(input_file, self.search_paths, self.progress_callback)

        self.log(f"Reading {reader.get_format_name()} file: {input_file}")
        model = reader.load(convert=convert)
        if model is None:
            return None

        summary = self.summarize(model)
        self.log(f"  Nodes: {summary['nodes']} ({summary['root_nodes']} root)")
        self.log(f"  Frames: {summary['frames']} (start time {summary['start_time']})")
        self.log(f"  Meshes: {summary['meshes']} ({summary['triangles']} triangles)")
        return model

    def summarize(self, model: ModelData) -> Dict[str, Any]:
        """Collect model statistics

        Args:
            model: Loaded model

        Returns:
            dict: Summary with keys:
                - 'source': source file path (or None)
                - 'nodes', 'root_nodes', 'cyclic_nodes': node counts
                - 'frames', 'start_time': skeleton animation info
                - 'meshes', 'triangles': geometry counts
                - 'mesh_triangles': texture -> triangle count
                - 'converted': whether coordinates were converted
        """
        return {
            'source': model.source_path,
            'nodes': len(model.nodes),
            'root_nodes': len(model.skeleton.root_nodes),
            'cyclic_nodes': len(model.skeleton.cyclic_nodes),
            'frames': len(model.frames),
            'start_time': model.skeleton.start_time,
            'meshes': len(model.meshes),
            'triangles': model.triangle_count(),
            'mesh_triangles': {mesh.texture: len(mesh.triangles) for mesh in model.meshes},
            'converted': model.converted,
        }

    def format_hierarchy(self, model: ModelData) -> List[str]:
        """Indented bone tree, one line per node

        Args:
            model: Model with built hierarchy

        Returns:
            list: Lines like "  [1] child"
        """
        lines = []
        for index, depth in node_depths(model):
            node = model.nodes[index]
            lines.append(f"{'  ' * depth}[{node.id}] {node.name}")
        return lines

    def format_frame(self, model: ModelData, frame_number: int) -> List[str]:
        """Per-bone transform lines for one frame

        Args:
            model: Loaded model
            frame_number: Index into model.frames

        Returns:
            list: One line per transform slot

        Raises:
            IndexError: If the frame does not exist
        """
        frame = model.frames[frame_number]
        lines = [f"time {frame.time}"]
        for bone_id, transform in enumerate(frame.transforms):
            index = model.node_index(bone_id)
            name = model.nodes[index].name if index is not None else '?'
            pos = ', '.join(f"{v:.4f}" for v in transform.position)
            rot = ', '.join(f"{v:.4f}" for v in transform.rotation)
            lines.append(f"  [{bone_id}] {name}: position ({pos}) rotation ({rot})")
        return lines


def load_model(input_file, search_paths=None, convert=True) -> Optional[ModelData]:
    """Convenience wrapper: load a model with a default loader"""
    return SMDModelLoader(search_paths=search_paths).load(Path(input_file), convert=convert)
