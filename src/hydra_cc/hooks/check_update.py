"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

SessionStart hook: start a background update check if the cache is stale.
"""

import logging
import sys
from typing import Optional, TextIO

from ..update_check import UpdateChecker


logger = logging.getLogger(__name__)


def main(stdin: Optional[TextIO] = None, checker: Optional[UpdateChecker] = None):
    try:
        # Drain the session JSON so the host never sees a broken pipe
        (stdin or sys.stdin).read()
    except Exception:
        logger.debug("Could not read hook input", exc_info=True)

    try:
        (checker or UpdateChecker()).trigger()
    except Exception:
        logger.debug("Update check trigger failed", exc_info=True)
