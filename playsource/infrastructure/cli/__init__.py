"""Command line interface for resolving and searching playable media."""
