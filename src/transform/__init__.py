"""Markdown article transformation."""
