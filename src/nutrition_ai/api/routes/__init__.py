"""API route modules."""

from . import analysis

__all__ = ["analysis"]
