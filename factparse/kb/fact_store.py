"""
Fact Store for holding ground facts and answering wildcard pattern lookups.
"""

import logging
import threading
from typing import List, Dict, Any, Optional, Sequence, Tuple

from .models import Fact, WILDCARD

logger = logging.getLogger(__name__)


class FactStore:
    """In-memory storage for facts, keyed by case-folded predicate name."""

    def __init__(self, wildcard: str = WILDCARD):
        self.wildcard = wildcard

        self.facts: Dict[str, List[Tuple[str, ...]]] = {}  # predicate -> argument tuples
        self._lock = threading.RLock()

    def add_fact(self, predicate: str, arguments: Sequence[str]) -> Fact:
        """Append a fact under the predicate. Duplicates and mixed arities are kept."""
        pred = predicate.lower()
        args = tuple(arguments)

        with self._lock:
            self.facts.setdefault(pred, []).append(args)

        fact = Fact(predicate=pred, arguments=args)
        logger.info(f"Added fact: {fact}")
        return fact

    def query(self, predicate: str, pattern: Sequence[str]) -> List[Tuple[str, ...]]:
        """
        Find stored argument tuples matching a pattern.

        Args:
            predicate: Predicate name, matched case-insensitively
            pattern: One atom per argument; the wildcard matches anything,
                other atoms must equal the stored atom ignoring case

        Returns:
            Matching argument tuples in insertion order
        """
        pred = predicate.lower()
        pattern = tuple(pattern)
        results = []

        with self._lock:
            candidates = list(self.facts.get(pred, []))

        for args in candidates:
            # Facts of another arity are skipped, the scan goes on
            if len(args) != len(pattern):
                continue

            if all(
                atom == self.wildcard or atom.lower() == value.lower()
                for atom, value in zip(pattern, args)
            ):
                results.append(args)

        logger.debug(f"Query {pred}({', '.join(pattern)}) matched {len(results)} facts")
        return results

    def dump(self) -> str:
        """Render every fact grouped by predicate, predicates sorted by name."""
        with self._lock:
            snapshot = {pred: list(facts) for pred, facts in self.facts.items()}

        if not snapshot:
            return "Database is empty."

        lines = []
        for pred in sorted(snapshot):
            if lines:
                lines.append("")
            lines.append(f"Predicate: {pred}")
            for args in snapshot[pred]:
                lines.append(f"  {Fact(pred, args)}")

        return "\n".join(lines)

    def get_facts(self, predicate: Optional[str] = None) -> List[Fact]:
        """Get stored facts, optionally only those for one predicate."""
        with self._lock:
            if predicate is not None:
                pred = predicate.lower()
                return [Fact(pred, args) for args in self.facts.get(pred, [])]
            return [
                Fact(pred, args)
                for pred, facts in self.facts.items()
                for args in facts
            ]

    def predicates(self) -> List[str]:
        """Get all predicate names in sorted order."""
        with self._lock:
            return sorted(self.facts)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the fact store."""
        with self._lock:
            if not self.facts:
                return {
                    "total_facts": 0,
                    "predicates": [],
                    "facts_per_predicate": {},
                    "arities": {}
                }

            return {
                "total_facts": sum(len(facts) for facts in self.facts.values()),
                "predicates": sorted(self.facts),
                "facts_per_predicate": {
                    pred: len(facts) for pred, facts in sorted(self.facts.items())
                },
                "arities": {
                    pred: sorted(set(len(args) for args in facts))
                    for pred, facts in sorted(self.facts.items())
                }
            }

    def __len__(self) -> int:
        with self._lock:
            return sum(len(facts) for facts in self.facts.values())

    def __contains__(self, predicate: str) -> bool:
        with self._lock:
            return predicate.lower() in self.facts
