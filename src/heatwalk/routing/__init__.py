"""Routing collaborators."""

from .tabular import TabularRouter

__all__ = ["TabularRouter"]
