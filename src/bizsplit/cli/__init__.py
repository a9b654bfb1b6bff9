"""Command line interface for bizsplit."""
