"""Command-line interface for nbstat."""
