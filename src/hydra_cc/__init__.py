"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Installer, status inspector and session hooks for the Hydra agent bundle.
"""

__version__ = "1.0.0"

PACKAGE_NAME = "hail-hydra-cc"
