#!/usr/bin/env python3
"""
SMD Reader Module
Pure Python parser for Studio Model Data (.smd) files implementing the
BaseReader interface.

An SMD file is a sequence of blocks, each opened by a keyword line
(nodes, skeleton, triangles) and closed by a line reading "end". Parsing
is deliberately forgiving: short lines are skipped, bad numbers read as 0,
a gap in the skeleton's time values ends that block early and far-away
vertices drop their triangle. None of this raises.
"""

import math
from typing import List, Optional

from core.lenient import tokenize, strip_quotes, parse_int, parse_float, strip_extension
from core.model_data import (
    ModelData, Node, Frame, Triangle, Vertex, MAX_VERTEX_LENGTH
)
from .base_reader import BaseReader
from .line_source import LineSource

# Weight sums below this get the remainder assigned to the primary bone
WEIGHT_SUM_THRESHOLD = 0.999


class BlockScanner:
    """Yields the body lines of one block

    Stops at a line equal to "end" (any case) or when the source runs out.
    The "end" line itself is consumed.
    """

    def __init__(self, source: LineSource):
        self.source = source

    def next_block_line(self) -> Optional[str]:
        """Next non-empty, non-comment body line, None at end of block"""
        line = self.source.read_line()
        if line is None or line.lower() == 'end':
            return None
        return line

    def __iter__(self):
        while True:
            line = self.next_block_line()
            if line is None:
                return
            yield line


class NodeBlockParser:
    """Parses `<id> "<name>" <parent>` lines into ModelData.nodes"""

    def __init__(self, model: ModelData, reader: 'SMDReader'):
        self.model = model
        self.reader = reader

    def parse(self, scanner: BlockScanner):
        for line in scanner:
            args = tokenize(line)
            if len(args) < 3:
                continue

            node = Node(
                id=parse_int(strip_quotes(args[0])),
                name=strip_quotes(args[1]),
                parent=parse_int(strip_quotes(args[2]))
            )
            if not self.model.add_node(node):
                self.reader.log(f"  Warning: node id {node.id} declared twice, "
                                f"keeping the first declaration")


class SkeletonBlockParser:
    """Parses `time <n>` frames and their bone transform lines

    Time values must count up by exactly one. On the first gap the parser
    stops and leaves the remaining lines to the top-level loop.
    """

    def __init__(self, model: ModelData, reader: 'SMDReader'):
        self.model = model
        self.reader = reader

    def parse(self, scanner: BlockScanner):
        time = -1
        for line in scanner:
            args = tokenize(line)
            if len(args) < 2:
                continue

            if args[0].lower() == 'time':
                frame_time = parse_int(args[1])
                if time != -1 and frame_time != time + 1:
                    self.reader.log(f"  Skeleton truncated: time {frame_time} follows {time}, "
                                    f"keeping {len(self.model.frames)} frame(s)")
                    return
                if time == -1:
                    self.model.skeleton.start_time = frame_time
                time = frame_time
                self.model.frames.append(Frame(time=frame_time))

            elif time != -1 and len(args) >= 7:
                self._parse_bone_line(args, self.model.frames[-1])

    def _parse_bone_line(self, args: List[str], frame: Frame):
        bone_id = parse_int(args[0])
        if bone_id < 0:
            return

        frame.ensure_size(bone_id + 1)
        transform = frame.transforms[bone_id]
        # Source X points the other way
        transform.position = (-parse_float(args[1]), parse_float(args[2]), parse_float(args[3]))
        transform.angles = (parse_float(args[4]), parse_float(args[5]), parse_float(args[6]))


class TriangleBlockParser:
    """Parses material + three vertex lines per triangle into meshes"""

    def __init__(self, model: ModelData, reader: 'SMDReader'):
        self.model = model
        self.reader = reader
        self.dropped_triangles = 0

    def parse(self, scanner: BlockScanner):
        vertex_index = -1
        mesh = None
        triangle = None
        invalid = False

        for line in scanner:
            if vertex_index == -1:
                mesh = self.model.find_or_add_mesh(strip_extension(line))
                triangle = Triangle()
                mesh.triangles.append(triangle)
                vertex_index = 0
                invalid = False
                continue

            vertex = triangle.vertices[vertex_index]
            if self._parse_vertex(tokenize(line), vertex):
                invalid = True

            vertex_index += 1
            if vertex_index == 3:
                vertex_index = -1
                if invalid:
                    mesh.triangles.pop()
                    self.dropped_triangles += 1

        if self.dropped_triangles:
            self.reader.log(f"  Dropped {self.dropped_triangles} triangle(s) with vertices "
                            f"beyond {MAX_VERTEX_LENGTH:g} units")

    def _parse_vertex(self, args: List[str], vertex: Vertex) -> bool:
        """Fill vertex from its tokens

        Args:
            args: Vertex line tokens
            vertex: Vertex to fill (left at defaults for short lines)

        Returns:
            bool: True if the position is out of range
        """
        if len(args) < 9:
            return False

        vertex.bone = parse_int(args[0])
        vertex.position = (parse_float(args[1]), parse_float(args[2]), parse_float(args[3]))
        vertex.normal = (parse_float(args[4]), parse_float(args[5]), parse_float(args[6]))
        vertex.uv = (parse_float(args[7]), parse_float(args[8]))

        if len(args) >= 10:
            self._parse_weights(args, vertex)

        return math.sqrt(sum(c * c for c in vertex.position)) > MAX_VERTEX_LENGTH

    def _parse_weights(self, args: List[str], vertex: Vertex):
        num_links = parse_int(args[9])
        total = 0.0
        for i in range(num_links):
            bone_token = 10 + i * 2
            if bone_token + 1 >= len(args):
                break
            bone_id = parse_int(args[bone_token])
            weight = parse_float(args[bone_token + 1])
            vertex.weights.setdefault(bone_id, weight)
            total += weight

        # Remainder goes to the primary bone unless it is already linked
        if total < WEIGHT_SUM_THRESHOLD:
            vertex.weights.setdefault(vertex.bone, 1.0 - total)


class SMDReader(BaseReader):
    """Reader for Studio Model Data text files"""

    BLOCK_PARSERS = {
        'nodes': NodeBlockParser,
        'skeleton': SkeletonBlockParser,
        'triangles': TriangleBlockParser,
    }

    def get_format_name(self) -> str:
        return "Studio Model Data"

    def parse(self, source: LineSource) -> ModelData:
        """Dispatch each top-level keyword line to its block parser

        Unknown top-level lines (such as "version 1") are ignored.

        Args:
            source: Opened line source

        Returns:
            ModelData: Parsed model
        """
        model = ModelData()
        scanner = BlockScanner(source)
        while True:
            line = source.read_line()
            if line is None:
                break

            parser_class = self.BLOCK_PARSERS.get(line.lower())
            if parser_class is not None:
                parser_class(model, self).parse(scanner)
        return model
