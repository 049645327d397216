#!/usr/bin/env python3
"""
Coordinate Converter Module
Re-expresses SMD skeleton and geometry data in the engine's axis convention.

The skeleton pass bakes the bone hierarchy into per-frame world transforms,
then remaps axes and quaternion components. The remapping reproduces the
legacy importer exactly, including its final quaternion component shift,
because downstream animation data was authored against that output.

Matrices use numpy with column vectors: translation lives in column 3 and a
child's world matrix is parent_world @ local.
"""

import math
from typing import List, Tuple

import numpy as np

from .hierarchy import iter_preorder
from .model_data import (
    FrameTransform, ModelData, Quaternion, Vector3, IDENTITY_QUATERNION
)

# Engine basis vectors used when building local bone matrices
RIGHT = np.array([-1.0, 0.0, 0.0])
UP = np.array([0.0, 1.0, 0.0])
FORWARD = np.array([0.0, 0.0, 1.0])


def rotation_matrix(angle: float, axis: np.ndarray) -> np.ndarray:
    """4x4 right-handed rotation of angle radians about axis"""
    x, y, z = axis / np.linalg.norm(axis)
    c = math.cos(angle)
    s = math.sin(angle)
    t = 1.0 - c
    m = np.identity(4)
    m[:3, :3] = [
        [c + t * x * x, t * x * y - s * z, t * x * z + s * y],
        [t * x * y + s * z, c + t * y * y, t * y * z - s * x],
        [t * x * z - s * y, t * y * z + s * x, c + t * z * z],
    ]
    return m


def euler_to_matrix(angles: Vector3) -> np.ndarray:
    """Local rotation for (pitch, yaw, roll); roll and yaw are negated"""
    pitch, yaw, roll = angles
    return (rotation_matrix(-roll, RIGHT)
            @ rotation_matrix(-yaw, UP)
            @ rotation_matrix(pitch, FORWARD))


def local_matrix(transform: FrameTransform) -> np.ndarray:
    m = euler_to_matrix(transform.angles)
    m[:3, 3] = transform.position
    return m


def matrix_to_quaternion(matrix: np.ndarray) -> Quaternion:
    """Trace-based matrix to quaternion with the legacy sign convention

    Picks the branch on the largest of trace / diagonal entries to stay
    stable near 180 degree rotations. The x component of the positive-trace
    branch and several components of the other branches carry the sign flips
    the legacy importer applied; they are part of the convention.

    Args:
        matrix: 4x4 matrix (column vectors)

    Returns:
        tuple: (w, x, y, z)
    """
    # m[i][j] is column i, row j
    m = matrix.T
    trace = m[0][0] + m[1][1] + m[2][2]
    if trace > 0.0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m[2][1] - m[1][2]) * -s
        y = (m[0][2] - m[2][0]) * s
        z = (m[1][0] - m[0][1]) * s
    elif m[0][0] > m[1][1] and m[0][0] > m[2][2]:
        s = 2.0 * math.sqrt(1.0 + m[0][0] - m[1][1] - m[2][2])
        w = (m[2][1] - m[1][2]) / s
        x = 0.25 * -s
        y = (m[0][1] + m[1][0]) / s
        z = (m[0][2] + m[2][0]) / s
    elif m[1][1] > m[2][2]:
        s = 2.0 * math.sqrt(1.0 + m[1][1] - m[0][0] - m[2][2])
        w = (m[0][2] - m[2][0]) / -s
        x = (m[0][1] + m[1][0]) / s
        y = 0.25 * -s
        z = (m[1][2] + m[2][1]) / -s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2][2] - m[0][0] - m[1][1])
        w = (m[1][0] - m[0][1]) / -s
        x = (m[0][2] + m[2][0]) / s
        y = (m[1][2] + m[2][1]) / -s
        z = 0.25 * -s
    return (float(w), float(x), float(y), float(z))


def quaternion_to_axis_angle(rotation: Quaternion) -> Tuple[Vector3, float]:
    """Split a unit quaternion into (axis, angle); zero axis for no rotation"""
    w, x, y, z = rotation
    w = max(-1.0, min(1.0, w))
    angle = 2.0 * math.acos(w)
    sqr = math.sqrt(1.0 - w * w)
    if sqr == 0.0:
        return (0.0, 0.0, 0.0), angle
    return (x / sqr, y / sqr, z / sqr), angle


def axis_angle_to_quaternion(axis: Vector3, angle: float) -> Quaternion:
    s = math.sin(angle / 2.0)
    if s == 0.0:
        return IDENTITY_QUATERNION
    return (math.cos(angle / 2.0), axis[0] * s, axis[1] * s, axis[2] * s)


def convert_rotation(rotation: Quaternion) -> Quaternion:
    """Remap a source quaternion into the engine convention

    The axis is permuted (x, y, z) -> (-y, -z, -x) (the XYZ -> XZY swap of
    the original exporter scripts), then the components are shifted
    w -> x, x -> y, y -> z, z -> w to match legacy animation data.
    """
    axis, angle = quaternion_to_axis_angle(rotation)
    axis = (-axis[1], -axis[2], -axis[0])
    w, x, y, z = axis_angle_to_quaternion(axis, angle)
    return (z, w, x, y)


def convert_bone_position(position: Vector3) -> Vector3:
    """Swap Y/Z, negate the new Z, then negate X"""
    x, y, z = position
    return (-x, z, -y)


def convert_vertex_vector(vector: Vector3) -> Vector3:
    """Swap Y/Z and negate the new Z (no X flip for geometry)"""
    x, y, z = vector
    return (x, z, -y)


def quaternion_to_matrix(rotation: Quaternion) -> np.ndarray:
    w, x, y, z = rotation
    m = np.identity(4)
    m[:3, :3] = [
        [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
        [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
        [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
    ]
    return m


def matrix_to_euler(matrix: np.ndarray) -> Vector3:
    """Inverse of euler_to_matrix: (pitch, yaw, roll) in radians

    euler_to_matrix expands to Rx(roll) @ Ry(-yaw) @ Rz(pitch), so the
    standard XYZ decomposition applies with yaw negated.
    """
    rot = matrix[:3, :3]
    sin_b = max(-1.0, min(1.0, rot[0][2]))
    b = math.asin(sin_b)
    if abs(sin_b) < 1.0 - 1e-9:
        a = math.atan2(-rot[1][2], rot[2][2])
        c = math.atan2(-rot[0][1], rot[0][0])
    else:
        # Gimbal lock: fold everything into roll
        a = math.atan2(rot[2][1], rot[1][1])
        c = 0.0
    return (c, -b, a)


def quaternion_to_euler(rotation: Quaternion) -> Vector3:
    return matrix_to_euler(quaternion_to_matrix(rotation))


class CoordinateConverter:
    """Bakes the hierarchy into world transforms and remaps axes

    Runs once per model, after HierarchyBuilder.
    """

    def convert(self, model: ModelData):
        """Convert skeleton frames and mesh geometry in place

        Already converted models are left untouched.

        Args:
            model: Model with built hierarchy
        """
        if model.converted:
            return

        for frame in model.frames:
            self._convert_frame(model, frame)
        self._convert_geometry(model)
        model.converted = True

    def build_world_matrices(self, model: ModelData, frame) -> List[np.ndarray]:
        """World matrix per node storage index for one frame

        Nodes without a transform in the frame use the identity transform;
        nodes no root reaches keep the identity matrix.

        Args:
            model: Model with built hierarchy
            frame: Frame whose local transforms are composed

        Returns:
            list: 4x4 numpy matrices, one per node
        """
        matrices = [np.identity(4) for _ in model.nodes]
        for index, parent_index in iter_preorder(model):
            bone_id = model.nodes[index].id
            if 0 <= bone_id < len(frame.transforms):
                transform = frame.transforms[bone_id]
            else:
                transform = FrameTransform()

            m = local_matrix(transform)
            if parent_index is not None:
                m = matrices[parent_index] @ m
            matrices[index] = m
        return matrices

    def _convert_frame(self, model: ModelData, frame):
        matrices = self.build_world_matrices(model, frame)
        for bone_id, transform in enumerate(frame.transforms):
            node_index = model.node_index(bone_id)
            m = matrices[node_index] if node_index is not None else np.identity(4)

            translation = (float(m[0][3]), float(m[1][3]), float(m[2][3]))
            transform.position = convert_bone_position(translation)
            transform.rotation = convert_rotation(matrix_to_quaternion(m))
            transform.angles = quaternion_to_euler(transform.rotation)

    def _convert_geometry(self, model: ModelData):
        for mesh in model.meshes:
            for triangle in mesh.triangles:
                for vertex in triangle.vertices:
                    vertex.position = convert_vertex_vector(vertex.position)
                    vertex.normal = convert_vertex_vector(vertex.normal)
