"""Standalone command-line helpers."""
