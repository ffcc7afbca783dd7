"""Command-line interface for the Shrike pipeline."""
