"""Adapters for external collaborators (benchmark runners)."""
