"""Subcommands; each module exposes register(app)."""
