"""
Loader for PostgreSQL EXPLAIN text output.

This module handles:
- Reading plan text from files, strings or stdin
- Enforcing resource limits before anything is analyzed
- Wrapping the result in an immutable PlanText

Error handling philosophy: reading is the only place that can fail. A file
that cannot be read raises PlanSourceError; content that merely looks odd
is passed through and left to the analyzers, which skip what they cannot
interpret.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from pgexplain.exceptions import PlanSourceError
from pgexplain.parser.config import DEFAULT_CONFIG, ParserConfig
from pgexplain.parser.models import PlanText

logger = logging.getLogger(__name__)


def load_plan(
    source: str | Path | PlanText,
    config: ParserConfig | None = None,
) -> PlanText:
    """
    Load EXPLAIN text output into a PlanText.

    Accepts:
    - Path: reads the file
    - str: treated as the plan text itself
    - PlanText: returned as-is (after the line limit check)

    Raises:
        PlanSourceError: If the file cannot be read or exceeds limits.

    Example:
        >>> plan = load_plan(Path("slow_query.txt"))
        >>> plan = load_plan(subprocess_output)
    """
    config = config or DEFAULT_CONFIG

    if isinstance(source, PlanText):
        plan = source
    elif isinstance(source, Path):
        plan = PlanText.from_string(_read_file(source, config))
    else:
        plan = PlanText.from_string(source)

    _check_line_count(plan, config, str(source) if isinstance(source, Path) else None)
    logger.debug("Loaded plan with %d lines", len(plan))
    return plan


def load_plan_file(path: str | Path, config: ParserConfig | None = None) -> PlanText:
    """Convenience wrapper around load_plan() for file inputs."""
    return load_plan(Path(path), config)


def load_plan_stream(stream: TextIO | None = None, config: ParserConfig | None = None) -> PlanText:
    """Read plan text from a stream (stdin by default)."""
    stream = stream or sys.stdin
    try:
        text = stream.read()
    except OSError as e:
        raise PlanSourceError(f"Cannot read plan from stream: {e}", source="stdin") from e
    return load_plan(text, config)


def _read_file(path: Path, config: ParserConfig) -> str:
    if not path.exists():
        raise PlanSourceError(f"File not found: {path}", source=str(path))
    if not path.is_file():
        raise PlanSourceError(f"Path is not a file: {path}", source=str(path))

    size_mb = path.stat().st_size / (1024 * 1024)
    if size_mb > config.max_file_size_mb:
        raise PlanSourceError(
            f"File too large: {size_mb:.1f}MB exceeds limit of "
            f"{config.max_file_size_mb:.1f}MB",
            source=str(path),
        )

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PlanSourceError(f"Cannot read {path}: {e}", source=str(path)) from e


def _check_line_count(plan: PlanText, config: ParserConfig, source: str | None) -> None:
    if len(plan) > config.max_lines:
        raise PlanSourceError(
            f"Plan has {len(plan):,} lines, exceeding limit of {config.max_lines:,}",
            source=source,
        )
