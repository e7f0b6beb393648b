"""Core ranking engine."""

from .filters import FilterItem, FilterProfile
from .ranker import Ranker, Selection

__all__ = ["Ranker", "Selection", "FilterItem", "FilterProfile"]
