"""
Statement Interpreter for turning declarative sentences into facts.
"""

import logging
from typing import Callable, Dict, Any, List, Optional, Iterable
from dataclasses import dataclass, field

from ..kb.fact_store import FactStore
from ..kb.models import Fact
from .tokenizer import split_words, normalize_atom

logger = logging.getLogger(__name__)


@dataclass
class Extraction:
    """Predicate and arguments pulled out of a sentence, before storage."""
    predicate: str
    arguments: List[str]


@dataclass
class StatementRule:
    """One sentence pattern: a check on the lowered text and an extractor over its words."""
    name: str
    description: str
    matches: Callable[[str, List[str]], bool]
    extract: Callable[[List[str]], Optional[Extraction]]


@dataclass
class StatementOutcome:
    """Result of interpreting one sentence."""
    sentence: str
    parsed: bool
    rule: Optional[str]
    fact: Optional[Fact]
    reasoning: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def _lower(word: str) -> str:
    return word.lower()


class StatementInterpreter:
    """Rule-based converter from simple English statements to facts."""

    def __init__(self, fact_store: FactStore, config: Optional[Dict[str, Any]] = None):
        self.fact_store = fact_store
        self.config = config or {}

        # Tested top to bottom, first match wins
        self.rules: List[StatementRule] = [
            StatementRule(
                name="location",
                description="X lives in Y -> lives_in(x, y)",
                matches=lambda text, words: "lives in" in text,
                extract=self._extract_location,
            ),
            StatementRule(
                name="relation_of",
                description="X is the R of Y -> r(x, y)",
                matches=lambda text, words: "is the" in text and " of " in text,
                extract=self._extract_relationship,
            ),
            StatementRule(
                name="property",
                description="X is P -> p(x)",
                matches=lambda text, words: " is " in text and len(words) == 3,
                extract=self._extract_property,
            ),
            StatementRule(
                name="is_relation",
                description="longer sentence containing 'is' -> relationship",
                matches=lambda text, words: " is " in text,
                extract=self._extract_relationship,
            ),
            StatementRule(
                name="triple",
                description="X R Y -> r(x, y)",
                matches=lambda text, words: len(words) >= 3,
                extract=self._extract_relationship,
            ),
        ]

    def interpret(self, sentence: str) -> StatementOutcome:
        """
        Interpret a sentence and store the fact it expresses.

        Args:
            sentence: A declarative English sentence

        Returns:
            StatementOutcome describing the fact added, or why none was
        """
        words = split_words(sentence)

        if not words:
            return self._unparsed(sentence, None, "Empty sentence, nothing to parse")

        text = sentence.lower()
        rule = self._select_rule(text, words)

        if rule is None:
            return self._unparsed(sentence, None, "Could not parse sentence pattern")

        logger.debug(f"Sentence {sentence!r} matched rule {rule.name}")

        extraction = rule.extract(words)
        if extraction is None:
            return self._unparsed(
                sentence, rule.name,
                f"Sentence looked like '{rule.description}' but its words did not fit"
            )

        fact = self.fact_store.add_fact(extraction.predicate, extraction.arguments)

        return StatementOutcome(
            sentence=sentence,
            parsed=True,
            rule=rule.name,
            fact=fact,
            reasoning=f"Matched '{rule.description}'",
            metadata={"word_count": len(words)}
        )

    def interpret_all(self, sentences: Iterable[str]) -> List[StatementOutcome]:
        """Interpret sentences in order; an unparsed one does not stop the rest."""
        return [self.interpret(sentence) for sentence in sentences]

    def _select_rule(self, text: str, words: List[str]) -> Optional[StatementRule]:
        for rule in self.rules:
            if rule.matches(text, words):
                return rule
        return None

    def _unparsed(self, sentence: str, rule: Optional[str], reasoning: str) -> StatementOutcome:
        logger.warning(f"Unparsed statement {sentence!r}: {reasoning}")
        return StatementOutcome(
            sentence=sentence,
            parsed=False,
            rule=rule,
            fact=None,
            reasoning=reasoning
        )

    def _extract_location(self, words: List[str]) -> Optional[Extraction]:
        """Find 'lives in' and take the words around it."""
        for i, word in enumerate(words):
            if (_lower(word) == "lives" and i >= 1 and i + 2 < len(words)
                    and _lower(words[i + 1]) == "in"):
                subject = normalize_atom(words[i - 1])
                location = normalize_atom(words[i + 2])
                return Extraction("lives_in", [subject, location])
        return None

    def _extract_relationship(self, words: List[str]) -> Optional[Extraction]:
        """Find 'is the R of', else fall back to 'subject relation object'."""
        for i, word in enumerate(words):
            if (_lower(word) == "is" and i >= 1 and i + 4 < len(words)
                    and _lower(words[i + 1]) == "the"
                    and _lower(words[i + 3]) == "of"):
                subject = normalize_atom(words[i - 1])
                relation = normalize_atom(words[i + 2])
                obj = normalize_atom(words[i + 4])
                return Extraction(relation, [subject, obj])

        if len(words) >= 3:
            subject = normalize_atom(words[0])
            relation = normalize_atom(words[1])
            obj = normalize_atom(words[2])
            return Extraction(relation, [subject, obj])

        return None

    def _extract_property(self, words: List[str]) -> Optional[Extraction]:
        """'X is P' becomes p(x)."""
        if len(words) >= 3 and _lower(words[1]) == "is":
            subject = normalize_atom(words[0])
            prop = normalize_atom(words[2])
            return Extraction(prop, [subject])
        return None

    def get_rules(self) -> List[Dict[str, str]]:
        """Get the rule names and descriptions in evaluation order."""
        return [{"name": rule.name, "description": rule.description} for rule in self.rules]
