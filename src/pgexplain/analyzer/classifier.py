"""Operation-type classification for single plan lines."""

from __future__ import annotations

from pgexplain.parser.patterns import OPERATION_TYPES

UNKNOWN_OPERATION = "Unknown Operation"


def classify_operation(line: str) -> str:
    """
    Return a short operation label for a plan line.

    The vocabulary is checked in its fixed order and matched by substring,
    so "Bitmap Index Scan" lines report "Index Scan" and "Parallel Seq Scan"
    lines report "Seq Scan". Unrecognized lines fall back to their first
    one or two words.

    Example:
        >>> classify_operation("  ->  Hash Join  (cost=1.00..2.00 rows=1 width=4)")
        'Hash Join'
        >>> classify_operation("Limit  (cost=0.00..1.00 rows=1 width=4)")
        'Limit (cost=0.00..1.00'
    """
    trimmed = line.strip()

    for operation in OPERATION_TYPES:
        if operation in trimmed:
            return operation

    parts = trimmed.split()
    if len(parts) >= 2:
        return " ".join(parts[:2])
    if len(parts) == 1:
        return parts[0]
    return UNKNOWN_OPERATION
