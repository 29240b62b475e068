"""
Parser configuration with resource limits.

These limits prevent pathological inputs (a multi-GB log file passed by
mistake) from being loaded into memory. The defaults are generous for
normal usage but will catch genuinely problematic files.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ParserConfig(BaseModel):
    """
    Configuration for the plan text loader.

    Attributes:
        max_file_size_mb: Maximum file size to read.
        max_lines: Maximum number of plan lines kept for analysis.

    Example:
        # Stricter limits for untrusted input
        config = ParserConfig(max_file_size_mb=1, max_lines=5_000)
    """

    max_file_size_mb: float = Field(
        default=50.0,
        gt=0,
        description="Maximum file size in megabytes",
    )

    max_lines: int = Field(
        default=200_000,
        gt=0,
        description="Maximum number of plan lines",
    )


DEFAULT_CONFIG = ParserConfig()

STRICT_CONFIG = ParserConfig(
    max_file_size_mb=5.0,
    max_lines=20_000,
)
