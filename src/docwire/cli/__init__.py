"""Command-line interface for docwire."""
