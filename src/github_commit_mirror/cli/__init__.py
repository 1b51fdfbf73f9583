"""Command-line interface for GitHub Commit Mirror."""
