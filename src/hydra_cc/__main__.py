"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Allows ``python -m hydra_cc``.
"""

from .cli import main

if __name__ == '__main__':
    main()
