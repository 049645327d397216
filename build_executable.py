#!/usr/bin/env python3
"""
Build script for creating a standalone smd-info executable using PyInstaller
Install the build extra first: pip install -e .[build]
"""

import PyInstaller.__main__
import sys


def build():
    """Build standalone executable"""

    # Determine platform
    if sys.platform.startswith('win'):
        exe_name = 'smd-info.exe'
    else:
        exe_name = 'smd-info'

    print("=" * 50)
    print("Building Standalone Executable")
    print("=" * 50)
    print(f"Platform: {sys.platform}")
    print(f"Output: {exe_name}")
    print("=" * 50)

    # PyInstaller arguments
    args = [
        'smd_info.py',
        '--name=' + exe_name,
        '--onefile',  # Single executable file
        '--console',
        '--clean',
        '--noconfirm',
        '--hidden-import=smd_loader',
        # Readers module
        '--hidden-import=readers',
        '--hidden-import=readers.base_reader',
        '--hidden-import=readers.line_source',
        '--hidden-import=readers.smd_reader',
        # Core module
        '--hidden-import=core.model_data',
        '--hidden-import=core.lenient',
        '--hidden-import=core.hierarchy',
        '--hidden-import=core.coordinate_converter',
        '--hidden-import=numpy',
    ]

    # Run PyInstaller
    try:
        PyInstaller.__main__.run(args)

        print("\n" + "=" * 50)
        print("Build Complete!")
        print("=" * 50)

        if sys.platform.startswith('win'):
            print(f"\nExecutable location: dist\\{exe_name}")
        else:
            print(f"\nExecutable location: dist/{exe_name}")

    except Exception as e:
        print(f"\nBuild failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    build()
