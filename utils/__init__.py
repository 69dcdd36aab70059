"""Presentation helpers for the Library System CLI."""
