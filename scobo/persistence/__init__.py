"""Persistence layer for Scobo."""
