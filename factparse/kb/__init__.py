"""
In-memory fact store for ground facts.
"""

from .fact_store import FactStore
from .models import Fact, WILDCARD

__all__ = ["FactStore", "Fact", "WILDCARD"]
