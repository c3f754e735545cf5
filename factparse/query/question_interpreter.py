"""
Question Interpreter for answering canned English question patterns from the fact store.
"""

import logging
from typing import Callable, Dict, Any, List, Optional, Iterable, Sequence, Tuple
from dataclasses import dataclass, field
from enum import Enum

from ..kb.fact_store import FactStore
from ..kb.models import Fact
from ..parser.tokenizer import normalized_words, first_word, strip_punctuation

logger = logging.getLogger(__name__)


class QuestionType(Enum):
    """Kinds of answers a question can produce."""
    LIST = "list"  # one value per matching fact
    YES_NO = "yes_no"
    DIRECT = "direct"  # raw pattern lookup, whole tuples
    UNRECOGNIZED = "unrecognized"


@dataclass
class Lookup:
    """A store query derived from a question."""
    predicate: str
    pattern: Tuple[str, ...]
    slot: Optional[int] = None
    label: str = "Answer"


@dataclass
class QuestionRule:
    """One question pattern: a check on the lowered question and a lookup builder."""
    name: str
    question_type: QuestionType
    matches: Callable[[str], bool]
    build: Callable[[str], Optional[Lookup]]


@dataclass
class Answer:
    """Result of answering a question."""
    question: str
    question_type: QuestionType
    rule: Optional[str] = None
    predicate: Optional[str] = None
    pattern: Tuple[str, ...] = ()
    results: List[Tuple[str, ...]] = field(default_factory=list)
    slot: Optional[int] = None
    label: str = "Answer"
    reasoning: str = ""

    @property
    def recognized(self) -> bool:
        return self.question_type != QuestionType.UNRECOGNIZED

    @property
    def values(self) -> List[str]:
        """The rendered slot of every matching fact, in store order."""
        if self.slot is None:
            return []
        return [result[self.slot] for result in self.results if self.slot < len(result)]

    @property
    def text(self) -> str:
        """One-line answer."""
        if self.question_type == QuestionType.UNRECOGNIZED:
            return "Could not understand query format."
        if self.question_type == QuestionType.YES_NO:
            return "Yes" if self.results else "No (or unknown)"
        if not self.results:
            return "No matches found."
        if self.question_type == QuestionType.DIRECT:
            return "; ".join(str(Fact(self.predicate, result)) for result in self.results)
        return ", ".join(self.values)

    def render(self) -> str:
        """Multi-line answer: a labeled list, or a single answer line."""
        if self.question_type == QuestionType.UNRECOGNIZED:
            return self.text
        if self.question_type == QuestionType.YES_NO or not self.results:
            return f"Answer: {self.text}"

        lines = [f"{self.label}:"]
        if self.question_type == QuestionType.DIRECT:
            lines.extend(f"  - {Fact(self.predicate, result)}" for result in self.results)
        else:
            lines.extend(f"  - {value}" for value in self.values)
        return "\n".join(lines)


class QuestionInterpreter:
    """Rule-based converter from simple English questions to fact store lookups."""

    def __init__(self, fact_store: FactStore, config: Optional[Dict[str, Any]] = None):
        self.fact_store = fact_store
        self.config = config or {}
        self.wildcard = fact_store.wildcard

        # Tested top to bottom, first match wins
        self.rules: List[QuestionRule] = [
            QuestionRule(
                name="who_relation",
                question_type=QuestionType.LIST,
                matches=lambda text: "who is the" in text,
                build=self._build_who_relation,
            ),
            QuestionRule(
                name="what_does",
                question_type=QuestionType.LIST,
                matches=lambda text: "what does" in text,
                build=self._build_what_does,
            ),
            QuestionRule(
                name="where_lives",
                question_type=QuestionType.LIST,
                matches=lambda text: "where does" in text and "live" in text,
                build=self._build_where_lives,
            ),
            QuestionRule(
                name="yes_no_relation_of",
                question_type=QuestionType.YES_NO,
                matches=lambda text: text.startswith("is ") and self._is_relation_of(text),
                build=self._build_yes_no_relation_of,
            ),
            QuestionRule(
                name="yes_no",
                question_type=QuestionType.YES_NO,
                matches=lambda text: text.startswith("is "),
                build=self._build_yes_no,
            ),
        ]

    def ask(self, question: str) -> Answer:
        """
        Answer a question from the fact store.

        Args:
            question: An English question

        Returns:
            Answer with the lookup performed and its results
        """
        text = question.lower()
        rule = self._select_rule(text)

        if rule is None:
            return self._unrecognized(question, None, "No question pattern matched")

        lookup = rule.build(text)
        if lookup is None:
            return self._unrecognized(
                question, rule.name,
                f"Question looked like '{rule.name}' but could not be turned into a lookup"
            )

        results = self.fact_store.query(lookup.predicate, lookup.pattern)
        logger.info(f"Answered {question!r} via {rule.name}: {len(results)} matching facts")

        return Answer(
            question=question,
            question_type=rule.question_type,
            rule=rule.name,
            predicate=lookup.predicate,
            pattern=lookup.pattern,
            results=results,
            slot=lookup.slot,
            label=lookup.label,
            reasoning=f"Looked up {lookup.predicate}({', '.join(lookup.pattern)})"
        )

    def ask_all(self, questions: Iterable[str]) -> List[Answer]:
        """Answer questions in order."""
        return [self.ask(question) for question in questions]

    def direct_query(self, predicate: str, pattern: Sequence[str]) -> Answer:
        """Run a raw pattern lookup and wrap the matching tuples in an Answer."""
        predicate = predicate.lower()
        pattern = tuple(pattern)
        results = self.fact_store.query(predicate, pattern)

        return Answer(
            question=f"{predicate}({', '.join(pattern)})",
            question_type=QuestionType.DIRECT,
            rule="direct",
            predicate=predicate,
            pattern=pattern,
            results=results,
            label="Results",
            reasoning=f"Direct lookup returned {len(results)} facts"
        )

    def _select_rule(self, text: str) -> Optional[QuestionRule]:
        for rule in self.rules:
            if rule.matches(text):
                logger.debug(f"Question {text!r} matched rule {rule.name}")
                return rule
        return None

    def _unrecognized(self, question: str, rule: Optional[str], reasoning: str) -> Answer:
        logger.warning(f"Unrecognized question {question!r}: {reasoning}")
        return Answer(
            question=question,
            question_type=QuestionType.UNRECOGNIZED,
            rule=rule,
            reasoning=reasoning
        )

    def _build_who_relation(self, text: str) -> Optional[Lookup]:
        """'who is the R of X' -> r(?, x)"""
        of_pos = text.find("of ")
        start = text.find("is the ")
        if of_pos == -1 or start == -1:
            return None

        start += len("is the ")
        end = text.find(" of", start)
        if end == -1:
            return None

        relation = strip_punctuation(text[start:end])
        if not relation:
            return None

        obj = first_word(text[of_pos + len("of "):])
        return Lookup(relation, (self.wildcard, obj), slot=0, label="Who")

    def _build_what_does(self, text: str) -> Optional[Lookup]:
        """'what does X R' -> r(x, ?)"""
        pos = text.find("what does ")
        if pos == -1:
            return None

        words = normalized_words(text[pos + len("what does "):])
        if len(words) < 2:
            return None

        subject, relation = words[0], words[1]
        return Lookup(relation, (subject, self.wildcard), slot=1, label="Answer")

    def _build_where_lives(self, text: str) -> Optional[Lookup]:
        """'where does X live' -> lives_in(x, ?)"""
        pos = text.find("where does ")
        if pos == -1:
            return None

        subject = first_word(text[pos + len("where does "):])
        return Lookup("lives_in", (subject, self.wildcard), slot=1, label="Location")

    def _is_relation_of(self, text: str) -> bool:
        words = normalized_words(text)
        return len(words) >= 6 and words[2] == "the" and words[4] == "of"

    def _build_yes_no_relation_of(self, text: str) -> Optional[Lookup]:
        """'is X the R of Y' -> r(x, y)"""
        words = normalized_words(text)
        return Lookup(words[3], (words[1], words[5]))

    def _build_yes_no(self, text: str) -> Optional[Lookup]:
        """'is X P' -> p(x); 'is X R Y' -> r(x, y)"""
        words = normalized_words(text)

        if len(words) == 3:
            return Lookup(words[2], (words[1],))
        if len(words) >= 4:
            return Lookup(words[2], (words[1], words[3]))
        return None

    def get_rules(self) -> List[Dict[str, str]]:
        """Get the rule names and answer types in evaluation order."""
        return [
            {"name": rule.name, "question_type": rule.question_type.value}
            for rule in self.rules
        ]
