"""Command line interface for flowpath."""
