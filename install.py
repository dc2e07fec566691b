#!/usr/bin/env python3
"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Installer script for running from a source checkout.

Usage:
    python install.py                 # Interactive install
    python install.py --global        # Install to ~/.claude/
    python install.py --local         # Install to ./.claude/
    python install.py --both          # Install to both
    python install.py --status        # Show what is installed
    python install.py --uninstall     # Remove installation
"""

import sys
from pathlib import Path


def main():
    """Main installer entry point."""
    src_dir = Path(__file__).parent / 'src' / 'hydra_cc'

    if not src_dir.exists():
        print(f"\nError: Source directory not found at {src_dir}")
        print("Please run this script from the repository root.")
        sys.exit(1)

    # Add source to path
    sys.path.insert(0, str(Path(__file__).parent / 'src'))

    try:
        from hydra_cc.cli import main as cli_main
    except ImportError as e:
        print(f"\nError importing module: {e}")
        print("Install the dependencies first: pip install click httpx")
        sys.exit(1)

    cli_main()


if __name__ == '__main__':
    main()
