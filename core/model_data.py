#!/usr/bin/env python3
"""
Model Data Module
In-memory representation of a Studio Model Data (SMD) file.

Readers fill these structures block by block; the hierarchy builder and the
coordinate converter then mutate the same ModelData instance in place. Nothing
here references the source text, so consumers (renderers, animation systems)
only ever see ModelData.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple

Vector2 = Tuple[float, float]
Vector3 = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]  # (w, x, y, z)

IDENTITY_QUATERNION: Quaternion = (1.0, 0.0, 0.0, 0.0)

# Vertices farther than this from the origin mark their triangle as garbage
MAX_VERTEX_LENGTH = 524288.0


@dataclass
class Node:
    """Skeleton joint as declared in the nodes block

    Attributes:
        id: Declared bone id (the number bone-transform lines refer to)
        name: Bone name with quotes removed
        parent: Declared id of the parent bone, -1 for roots
        children: Storage indices of child nodes (filled by HierarchyBuilder)
    """
    id: int = -1
    name: str = ""
    parent: int = -1
    children: List[int] = field(default_factory=list)


@dataclass
class SkeletonSummary:
    """Skeleton-wide information

    Attributes:
        start_time: Time value of the first frame, -1 until one is seen
        root_nodes: Storage indices of nodes without a parent
        cyclic_nodes: Storage indices of nodes no root can reach
    """
    start_time: int = -1
    root_nodes: List[int] = field(default_factory=list)
    cyclic_nodes: List[int] = field(default_factory=list)


@dataclass
class FrameTransform:
    """Local (later world) transform of one bone in one frame

    Attributes:
        position: (x, y, z) translation
        angles: (pitch, yaw, roll) in radians, source order rx, ry, rz
        rotation: (w, x, y, z) quaternion, identity until conversion
    """
    position: Vector3 = (0.0, 0.0, 0.0)
    angles: Vector3 = (0.0, 0.0, 0.0)
    rotation: Quaternion = IDENTITY_QUATERNION


@dataclass
class Frame:
    """All bone transforms at one time step, indexed by bone id"""
    time: int = 0
    transforms: List[FrameTransform] = field(default_factory=list)

    def ensure_size(self, count: int):
        """Grow the transform list with identity entries up to count"""
        while len(self.transforms) < count:
            self.transforms.append(FrameTransform())


@dataclass
class Vertex:
    """Skinned vertex

    Attributes:
        bone: Primary bone id, -1 when the vertex line was unusable
        position: (x, y, z)
        normal: (x, y, z)
        uv: (u, v)
        weights: bone id -> weight
    """
    bone: int = -1
    position: Vector3 = (0.0, 0.0, 0.0)
    normal: Vector3 = (0.0, 0.0, 0.0)
    uv: Vector2 = (0.0, 0.0)
    weights: Dict[int, float] = field(default_factory=dict)


@dataclass
class Triangle:
    vertices: List[Vertex] = field(default_factory=lambda: [Vertex(), Vertex(), Vertex()])


@dataclass
class Mesh:
    """Triangles sharing one texture key (extension removed)"""
    texture: str = ""
    triangles: List[Triangle] = field(default_factory=list)


@dataclass
class ModelData:
    """Complete model parsed from an SMD file

    This is the single owner of every table. Node storage order is file order;
    node_index_by_id resolves declared ids (used by parent links and bone
    transform lines) to storage indices.

    Attributes:
        nodes: Nodes in declaration order
        frames: Skeleton frames in time order
        meshes: Meshes in first-seen texture order
        skeleton: Start time and root/cycle lists
        node_index_by_id: Declared node id -> index into nodes
        source_path: File the model was read from, if any
        converted: True once the coordinate conversion has run
    """
    nodes: List[Node] = field(default_factory=list)
    frames: List[Frame] = field(default_factory=list)
    meshes: List[Mesh] = field(default_factory=list)
    skeleton: SkeletonSummary = field(default_factory=SkeletonSummary)
    node_index_by_id: Dict[int, int] = field(default_factory=dict)
    source_path: Optional[str] = None
    converted: bool = False

    def add_node(self, node: Node) -> bool:
        """Append a node and register its declared id

        Args:
            node: Node to append

        Returns:
            bool: False if the id was already declared (first declaration
                  keeps the mapping), True otherwise
        """
        self.nodes.append(node)
        if node.id in self.node_index_by_id:
            return False
        self.node_index_by_id[node.id] = len(self.nodes) - 1
        return True

    def node_index(self, node_id: int) -> Optional[int]:
        """Storage index for a declared node id, None if undeclared"""
        return self.node_index_by_id.get(node_id)

    def find_or_add_mesh(self, texture: str) -> Mesh:
        """Return the mesh for texture, creating it on first use"""
        mesh = self.get_mesh_by_texture(texture)
        if mesh is None:
            mesh = Mesh(texture=texture)
            self.meshes.append(mesh)
        return mesh

    def get_mesh_by_texture(self, texture: str) -> Optional[Mesh]:
        for mesh in self.meshes:
            if mesh.texture == texture:
                return mesh
        return None

    def get_node_by_name(self, name: str) -> Optional[Node]:
        """Find node by name

        Args:
            name: Bone name to find

        Returns:
            Node if found, None otherwise
        """
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def triangle_count(self) -> int:
        return sum(len(mesh.triangles) for mesh in self.meshes)
