"""Chesslens — board editor with live UCI engine analysis."""

__version__ = "0.1.0"
