"""
Regex patterns and lookup tables for PostgreSQL EXPLAIN text output.

All tables here are immutable module constants: the classifier, the
context walker and the recommendation validator read them but never
modify them.

Reference: https://www.postgresql.org/docs/current/using-explain.html
"""

from __future__ import annotations

import re

# cost=<startup>..<total>
COST_PATTERN = re.compile(r"cost=(\d+\.?\d*)\.\.(\d+\.?\d*)")

# rows=<estimate>; the first occurrence on a line is the planner estimate
ROWS_PATTERN = re.compile(r"rows=(\d+)")

# "<ScanKind> on <table>"
TABLE_NAME_PATTERN = re.compile(
    r"(?:Seq Scan|Parallel Seq Scan|Index Scan|Index Only Scan|Bitmap Heap Scan)"
    r"\s+on\s+(\w+)"
)

# Filter: (<expr>), allowing one level of nested parentheses
FILTER_PATTERN = re.compile(r"Filter:\s*\(([^)]+(?:\([^)]*\)[^)]*)*)\)")

# Identifier immediately followed by a comparison operator
FILTER_COLUMN_PATTERN = re.compile(
    r"\b(\w+)\s*(?:=|>|<|>=|<=|!=|<>|~~|LIKE|IN|IS)"
)

HASH_COND_PATTERN = re.compile(r"Hash Cond:\s*\(([^)]+)\)")
MERGE_COND_PATTERN = re.compile(r"Merge Cond:\s*\(([^)]+)\)")

# a.b = c.d
JOIN_COLUMN_PATTERN = re.compile(r"(\w+)\.(\w+)\s*=\s*(\w+)\.(\w+)")

SORT_KEY_PATTERN = re.compile(r"Sort Key:\s*(.+)")

# Strict SQL identifier used to validate recommended columns
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Fixed-priority operation vocabulary; first entry contained in a line wins
OPERATION_TYPES: tuple[str, ...] = (
    "Seq Scan",
    "Index Scan",
    "Index Only Scan",
    "Bitmap Heap Scan",
    "Bitmap Index Scan",
    "Nested Loop",
    "Hash Join",
    "Merge Join",
    "Sort",
    "Aggregate",
    "Hash",
    "Materialize",
    "Gather",
    "Parallel Seq Scan",
)

# Schemas that never receive index recommendations
SYSTEM_SCHEMAS: tuple[str, ...] = ("pg_catalog", "information_schema")

# Prefixes that mark psql/server error output instead of a plan
ERROR_PREFIXES: tuple[str, ...] = ("ERROR:", "FATAL:", "psql:")

# Child-line indentation accepted by the lookahead window
INDENT_PREFIXES: tuple[str, ...] = ("  ", "\t")
