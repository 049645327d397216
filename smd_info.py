#!/usr/bin/env python3
"""
SMD Info - Command Line Version
Loads a Studio Model Data (.smd) file and prints what it contains
"""

import argparse
import sys
from pathlib import Path

from readers import is_supported_format, SUPPORTED_EXTENSIONS
from smd_loader import SMDModelLoader


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='smd-info',
        description='Load a Studio Model Data (.smd) file and print a summary',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summary of a model on disk
  python smd_info.py models/player.smd

  # Resolve a logical path against content roots, print the bone tree
  python smd_info.py models/player.smd --search-path ./content --tree

  # Inspect frame 0 in source coordinates (no conversion)
  python smd_info.py idle.smd --raw --frame 0
        """
    )

    parser.add_argument('input', type=str, help='Input model file (.smd)')
    parser.add_argument('--search-path', action='append', default=[],
                        help='Content root for logical lookup (repeatable)')
    parser.add_argument('--raw', action='store_true',
                        help='Skip coordinate conversion (source axes)')
    parser.add_argument('--tree', action='store_true',
                        help='Print the bone hierarchy')
    parser.add_argument('--meshes', action='store_true',
                        help='Print triangle counts per texture')
    parser.add_argument('--frame', type=int,
                        help='Print bone transforms of this frame index')

    args = parser.parse_args(argv)

    # Validate file extension
    if not is_supported_format(args.input):
        print(f"Error: Unsupported file format: {Path(args.input).suffix.lower()}", file=sys.stderr)
        print(f"Supported formats: {', '.join(sorted(SUPPORTED_EXTENSIONS))}", file=sys.stderr)
        return 1

    loader = SMDModelLoader(search_paths=args.search_path)
    model = loader.load(args.input, convert=not args.raw)
    if model is None:
        print(f"Error: Could not open model file: {args.input}", file=sys.stderr)
        return 1

    if args.tree:
        print("\nBone hierarchy:")
        for line in loader.format_hierarchy(model):
            print(f"  {line}")

    if args.meshes:
        print("\nMeshes:")
        for texture, count in loader.summarize(model)['mesh_triangles'].items():
            print(f"  {texture}: {count} triangles")

    if args.frame is not None:
        if not 0 <= args.frame < len(model.frames):
            print(f"Error: Frame {args.frame} out of range (model has {len(model.frames)})",
                  file=sys.stderr)
            return 1
        print()
        for line in loader.format_frame(model, args.frame):
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
