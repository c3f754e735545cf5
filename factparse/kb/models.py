"""
Data models for the fact store.
"""

from dataclasses import dataclass
from typing import Tuple

# Reserved atom: a stored argument equal to this cannot be told apart from a
# wildcard in a query pattern.
WILDCARD = "?"


@dataclass(frozen=True)
class Fact:
    """A ground predicate application, e.g. parent(john, mary)."""
    predicate: str
    arguments: Tuple[str, ...]

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def __str__(self) -> str:
        return f"{self.predicate}({', '.join(self.arguments)})"
