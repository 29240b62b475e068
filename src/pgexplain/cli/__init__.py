"""Command-line interface for pgexplain."""
