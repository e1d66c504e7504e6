"""Command line interface for Scobo."""
