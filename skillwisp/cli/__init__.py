"""Command-line interface for skillwisp."""
