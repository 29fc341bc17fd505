"""Command-line client for the Tekton Results API."""

__version__ = "0.2.0"
