"""Command-line interface for cryptoprice."""
