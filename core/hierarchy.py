#!/usr/bin/env python3
"""
Hierarchy Module
Turns the flat parent links of the nodes block into a bone tree.
"""

from typing import Iterator, List, Optional, Set, Tuple

from .model_data import ModelData


class HierarchyCycleError(ValueError):
    """Raised when a traversal reaches the same node twice"""

    def __init__(self, node_index: int):
        super().__init__(f"Bone hierarchy revisits node {node_index}")
        self.node_index = node_index


class HierarchyBuilder:
    """Builds parent/children relations and the root list of a model

    Runs once per model, after all blocks are parsed. Parent links are
    resolved through ModelData.node_index_by_id, so declared ids do not
    need to be contiguous.
    """

    def __init__(self, progress_callback=None):
        """Initialize hierarchy builder

        Args:
            progress_callback: Optional function to call for diagnostics
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback

    def log(self, message):
        """Send diagnostic message to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def build(self, model: ModelData):
        """Fill Node.children, root_nodes and cyclic_nodes

        Args:
            model: Parsed model, mutated in place
        """
        skeleton = model.skeleton
        for index, node in enumerate(model.nodes):
            if node.parent == -1:
                skeleton.root_nodes.append(index)
                continue

            parent_index = model.node_index(node.parent)
            if parent_index is None:
                self.log(f"  Warning: node {node.id} '{node.name}' has unknown parent "
                         f"{node.parent}, treating it as a root")
                skeleton.root_nodes.append(index)
                continue

            model.nodes[parent_index].children.append(index)

        # Anything a root cannot reach hangs off a parent cycle
        reachable = set(index for index, _ in iter_preorder(model))
        skeleton.cyclic_nodes = [i for i in range(len(model.nodes)) if i not in reachable]
        if skeleton.cyclic_nodes:
            names = ', '.join(model.nodes[i].name for i in skeleton.cyclic_nodes)
            self.log(f"  Warning: {len(skeleton.cyclic_nodes)} node(s) in a parent cycle: {names}")


def iter_preorder(model: ModelData) -> Iterator[Tuple[int, Optional[int]]]:
    """Walk the bone tree depth-first, parents before children

    Uses an explicit stack so deep skeletons cannot exhaust the call stack.
    Children are visited in declaration order.

    Args:
        model: Model whose hierarchy has been built

    Yields:
        tuple: (node_index, parent_index) with parent_index None for roots

    Raises:
        HierarchyCycleError: If a node is reached twice
    """
    visited: Set[int] = set()
    stack: List[Tuple[int, Optional[int]]] = [
        (root, None) for root in reversed(model.skeleton.root_nodes)
    ]
    while stack:
        index, parent_index = stack.pop()
        if index in visited:
            raise HierarchyCycleError(index)
        visited.add(index)
        yield index, parent_index

        for child in reversed(model.nodes[index].children):
            stack.append((child, index))


def node_depths(model: ModelData) -> List[Tuple[int, int]]:
    """Pre-order (node_index, depth) pairs for display"""
    depths = {}
    result = []
    for index, parent_index in iter_preorder(model):
        depth = 0 if parent_index is None else depths[parent_index] + 1
        depths[index] = depth
        result.append((index, depth))
    return result
