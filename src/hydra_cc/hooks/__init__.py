"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Hook entry points run by Claude Code.

Each hook receives one JSON document on stdin. None of them may ever fail or
stall the host: every fault is caught and turned into a neutral result.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO


def read_payload(stream: Optional[TextIO] = None) -> Dict[str, Any]:
    """Parse the hook input. Empty input is an empty payload; bad JSON raises ValueError."""
    text = (stream or sys.stdin).read()
    if not text.strip():
        return {}
    data = json.loads(text)
    return data if isinstance(data, dict) else {}


def dig(data: Any, *keys: str) -> Any:
    """Nested dict lookup that yields None on any missing level."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data
