"""Command-line interface for dirwalk."""
