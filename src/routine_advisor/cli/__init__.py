"""Command-line interface for routine-advisor."""
