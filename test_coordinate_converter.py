#!/usr/bin/env python3
"""
Coordinate conversion tests
World matrix composition, axis remapping and the legacy quaternion remap.
"""

import math
import sys

import numpy as np

from core.coordinate_converter import (
    CoordinateConverter, convert_rotation, convert_bone_position, convert_vertex_vector,
    euler_to_matrix, matrix_to_euler, matrix_to_quaternion, quaternion_to_matrix,
)
from readers import LineSource, SMDReader

HALF_SQRT2 = math.sqrt(0.5)


def load(text, convert=True):
    return SMDReader("inline.smd").load_from_source(LineSource.from_text(text), convert)


def assert_close(actual, expected, tol=1e-9):
    assert len(actual) == len(expected), f"{actual} != {expected}"
    for a, e in zip(actual, expected):
        assert abs(a - e) < tol, f"{actual} != {expected}"


def test_vertex_vector_remap():
    assert convert_vertex_vector((1.0, 2.0, 3.0)) == (1.0, 3.0, -2.0)
    # Not an involution: applying twice negates Y and Z
    twice = convert_vertex_vector(convert_vertex_vector((1.0, 2.0, 3.0)))
    assert twice == (1.0, -2.0, -3.0)


def test_bone_position_remap():
    assert convert_bone_position((1.0, 2.0, 3.0)) == (-1.0, 3.0, -2.0)


def test_identity_matrix_quaternion():
    assert_close(matrix_to_quaternion(np.identity(4)), (1.0, 0.0, 0.0, 0.0))


def test_identity_rotation_after_remap():
    # No rotation survives the axis permutation, then the component shift moves w into x
    assert_close(convert_rotation((1.0, 0.0, 0.0, 0.0)), (0.0, 1.0, 0.0, 0.0))


def test_pitch_quarter_turn():
    m = euler_to_matrix((math.pi / 2, 0.0, 0.0))
    q = matrix_to_quaternion(m)
    assert_close(q, (HALF_SQRT2, 0.0, 0.0, -HALF_SQRT2))
    assert_close(convert_rotation(q), (0.0, HALF_SQRT2, 0.0, HALF_SQRT2))


def test_quaternion_branches_for_half_turns():
    # Trace is -1 for every half turn, so the diagonal branches are used
    expected = {
        0: (0.0, -1.0, 0.0, 0.0),
        1: (0.0, 0.0, -1.0, 0.0),
        2: (0.0, 0.0, 0.0, -1.0),
    }
    for axis in (0, 1, 2):
        m = np.identity(4)
        for i in range(3):
            if i != axis:
                m[i][i] = -1.0
        assert_close(matrix_to_quaternion(m), expected[axis], tol=1e-12)


def test_half_turn_yaw_through_diagonal_branch():
    # Yaw of pi gives a world matrix of diag(-1, 1, -1): trace -1, Y dominant
    text = ('nodes\n0 "root" -1\n1 "child" 0\nend\n'
            'skeleton\ntime 0\n'
            f'0 0 0 0 0 {math.pi} 0\n'
            '1 -1 0 0 0 0 0\n'
            'end\n')
    model = load(text, convert=False)
    matrices = CoordinateConverter().build_world_matrices(model, model.frames[0])
    assert_close(matrix_to_quaternion(matrices[0]), (0.0, 0.0, -1.0, 0.0))

    CoordinateConverter().convert(model)
    root, child = model.frames[0].transforms
    assert_close(root.position, (0.0, 0.0, 0.0))
    assert_close(root.rotation, (0.0, 0.0, 1.0, 0.0))
    # Child offset (1, 0, 0) turned to (-1, 0, 0), then X flipped back
    assert_close(child.position, (1.0, 0.0, 0.0))
    assert_close(child.rotation, (0.0, 0.0, 1.0, 0.0))


def test_convert_runs_once():
    text = ('nodes\n0 "root" -1\nend\n'
            'skeleton\ntime 0\n0 1 2 3 0 0 0\nend\n'
            'triangles\ntex.bmp\n' + '0 1 2 3 0 0 1 0 0\n' * 3 + 'end\n')
    model = load(text)
    position = model.frames[0].transforms[0].position
    rotation = model.frames[0].transforms[0].rotation

    CoordinateConverter().convert(model)
    assert model.frames[0].transforms[0].position == position
    assert model.frames[0].transforms[0].rotation == rotation
    assert model.meshes[0].triangles[0].vertices[0].position == (1.0, 3.0, -2.0)


def test_euler_round_trip():
    for angles in [(0.1, 0.2, 0.3), (-1.0, 0.5, 2.0), (0.0, -0.7, 0.0), (3.0, 1.2, -2.5)]:
        m = euler_to_matrix(angles)
        assert np.allclose(euler_to_matrix(matrix_to_euler(m)), m, atol=1e-9)


def test_quaternion_matrix_consistency():
    q = (math.cos(0.3), math.sin(0.3) * 0.6, 0.0, math.sin(0.3) * 0.8)
    m = quaternion_to_matrix(q)
    assert np.allclose(m[:3, :3] @ m[:3, :3].T, np.identity(3))


def test_two_bone_frame():
    text = ('nodes\n0 "root" -1\n1 "child" 0\nend\n'
            'skeleton\ntime 0\n0 0 0 0 0 0 0\n1 1 0 0 0 0 0\nend\n')
    model = load(text)
    root, child = model.frames[0].transforms
    assert_close(root.position, (0.0, 0.0, 0.0))
    # Parsed as (-1, 0, 0), remapped with the X flip
    assert_close(child.position, (1.0, 0.0, 0.0))
    assert_close(root.rotation, (0.0, 1.0, 0.0, 0.0))
    assert model.converted


def test_child_inherits_parent_rotation():
    text = ('nodes\n0 "root" -1\n1 "child" 0\nend\n'
            'skeleton\ntime 0\n'
            f'0 0 0 0 {math.pi / 2} 0 0\n'
            '1 -1 0 0 0 0 0\n'
            'end\n')
    model = load(text, convert=False)
    converter = CoordinateConverter()
    matrices = converter.build_world_matrices(model, model.frames[0])

    # Child local offset (1, 0, 0) rotated a quarter turn about Z lands on (0, 1, 0)
    assert_close(matrices[1][:3, 3], (0.0, 1.0, 0.0))
    assert np.allclose(matrices[1][:3, :3], matrices[0][:3, :3])

    converter.convert(model)
    child = model.frames[0].transforms[1]
    assert_close(child.position, (0.0, 0.0, -1.0))


def test_world_matrices_follow_declared_ids():
    text = ('nodes\n5 "root" -1\n9 "child" 5\nend\n'
            'skeleton\ntime 0\n5 -1 0 0 0 0 0\n9 0 -2 0 0 0 0\nend\n')
    model = load(text, convert=False)
    matrices = CoordinateConverter().build_world_matrices(model, model.frames[0])
    assert_close(matrices[0][:3, 3], (1.0, 0.0, 0.0))
    assert_close(matrices[1][:3, 3], (1.0, -2.0, 0.0))


def test_geometry_pass():
    text = ('triangles\ntex.bmp\n'
            '0 1 2 3 0 1 0 0 0\n'
            '0 4 5 6 0 0 1 0 0\n'
            '0 7 8 9 1 0 0 0 0\n'
            'end\n')
    vertices = load(text).meshes[0].triangles[0].vertices
    assert vertices[0].position == (1.0, 3.0, -2.0)
    assert vertices[0].normal == (0.0, 0.0, -1.0)
    assert vertices[1].position == (4.0, 6.0, -5.0)
    assert vertices[1].normal == (0.0, 1.0, 0.0)
    assert vertices[2].normal == (1.0, 0.0, 0.0)


def test_raw_load_keeps_source_axes():
    text = ('nodes\n0 "root" -1\nend\n'
            'skeleton\ntime 0\n0 1 2 3 0 0 0\nend\n'
            'triangles\ntex.bmp\n' + '0 1 2 3 0 0 1 0 0\n' * 3 + 'end\n')
    model = load(text, convert=False)
    assert model.frames[0].transforms[0].position == (-1.0, 2.0, 3.0)
    assert model.meshes[0].triangles[0].vertices[0].position == (1.0, 2.0, 3.0)
    assert not model.converted


def test_angles_match_converted_rotation():
    text = ('nodes\n0 "root" -1\nend\n'
            'skeleton\ntime 0\n0 0 0 0 0.4 -0.3 1.1\nend\n')
    transform = load(text).frames[0].transforms[0]
    expected = quaternion_to_matrix(transform.rotation)[:3, :3]
    assert np.allclose(euler_to_matrix(transform.angles)[:3, :3], expected, atol=1e-9)


def test_slot_without_node_uses_identity():
    text = ('nodes\n0 "root" -1\nend\n'
            'skeleton\ntime 0\n0 1 0 0 0 0 0\n2 5 5 5 0 0 0\nend\n')
    transforms = load(text).frames[0].transforms
    assert len(transforms) == 3
    assert_close(transforms[2].position, (0.0, 0.0, 0.0))
    assert_close(transforms[2].rotation, (0.0, 1.0, 0.0, 0.0))


def main():
    """Run all tests"""
    tests = [(name, func) for name, func in sorted(globals().items())
             if name.startswith('test_') and callable(func)]

    print("=" * 60)
    print("Coordinate Converter Tests")
    print("=" * 60)

    failed = 0
    for name, func in tests:
        try:
            func()
            print(f"✓ PASS: {name}")
        except AssertionError as e:
            failed += 1
            print(f"✗ FAIL: {name} {e}")

    print()
    print(f"{len(tests) - failed}/{len(tests)} passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
