"""GitHub Commit Mirror - local mirror of GitHub commit history."""

__version__ = "0.1.0"
