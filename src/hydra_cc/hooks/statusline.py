"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Status line hook.

Receives session JSON on stdin and writes one line:
    🐲 │ Opus │ Ctx: 37% ████░░░░░░ │ $0.42 │ my-project │ ⚡ v1.1.0 available

The context bar is green below 50%, yellow below 80%, red above.
"""

import logging
import os
import sys
from typing import Any, Dict, Optional, TextIO

import click

from ..paths import HydraPaths
from ..update_check import UpdateCache, read_cache
from . import dig, read_payload


logger = logging.getLogger(__name__)

DRAGON = '\U0001F432'
FALLBACK = f'{DRAGON} Hydra'
SEPARATOR = ' │ '
BAR_WIDTH = 10


def context_color(pct: int) -> str:
    if pct < 50:
        return 'green'
    if pct < 80:
        return 'yellow'
    return 'red'


def context_bar(pct: int) -> str:
    filled = min(BAR_WIDTH, max(0, int(pct / 10 + 0.5)))
    return '█' * filled + '░' * (BAR_WIDTH - filled)


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def render(payload: Dict[str, Any], cache: Optional[UpdateCache] = None) -> str:
    model = dig(payload, 'model', 'display_name') or 'Unknown'
    pct = int(_number(dig(payload, 'context_window', 'used_percentage')) + 0.5)
    cost = _number(dig(payload, 'cost', 'total_cost_usd'))
    current_dir = dig(payload, 'workspace', 'current_dir') or payload.get('cwd') or ''
    dir_name = os.path.basename(str(current_dir).rstrip('/\\'))

    parts = [
        click.style(DRAGON, fg='green'),
        click.style(str(model), dim=True),
        click.style(f'Ctx: {pct}% {context_bar(pct)}', fg=context_color(pct)),
        click.style(f'${cost:.2f}', dim=True),
        click.style(dir_name, dim=True),
    ]

    if cache is not None and cache.update_available:
        parts.append(click.style(f'⚡ v{cache.latest} available', fg='yellow'))

    return SEPARATOR.join(parts)


def write_line(stdout: TextIO, line: str):
    """Write ``line``; a stream that cannot encode it gets UTF-8 bytes instead."""
    try:
        stdout.write(line)
    except UnicodeEncodeError:
        buffer = getattr(stdout, 'buffer', None)
        if buffer is not None:
            buffer.write(line.encode('utf-8'))
        else:
            stdout.write(line.encode('ascii', 'replace').decode('ascii'))
    stdout.flush()


def main(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
    stdout = stdout or sys.stdout
    try:
        payload = read_payload(stdin)
        cache = read_cache(HydraPaths.resolve().cache_path)
        line = render(payload, cache)
    except Exception:
        logger.debug("Status line fell back", exc_info=True)
        line = FALLBACK

    try:
        write_line(stdout, line)
    except Exception:
        logger.debug("Status line could not be written", exc_info=True)
