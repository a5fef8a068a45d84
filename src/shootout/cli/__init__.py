"""Command-line interface for shootout."""
