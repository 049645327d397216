#!/usr/bin/env python3
"""
Core Module
Model data structures, hierarchy building and coordinate conversion.
"""

from .model_data import (
    ModelData,
    Node,
    SkeletonSummary,
    Frame,
    FrameTransform,
    Vertex,
    Triangle,
    Mesh,
    MAX_VERTEX_LENGTH,
)
from .hierarchy import HierarchyBuilder, HierarchyCycleError, iter_preorder
from .coordinate_converter import CoordinateConverter

__all__ = [
    'ModelData',
    'Node',
    'SkeletonSummary',
    'Frame',
    'FrameTransform',
    'Vertex',
    'Triangle',
    'Mesh',
    'MAX_VERTEX_LENGTH',
    'HierarchyBuilder',
    'HierarchyCycleError',
    'iter_preorder',
    'CoordinateConverter',
]
