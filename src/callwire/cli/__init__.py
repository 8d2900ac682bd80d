"""Command-line interface for callwire."""
