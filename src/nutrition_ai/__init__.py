"""Vertex AI powered nutrition analysis and recipe generation."""

__version__ = "1.0.0"
