"""
Tokenizing and atom normalization shared by the statement and question interpreters.
"""

import string
from typing import List

WHITESPACE = " \t\n\r"


def split_words(text: str) -> List[str]:
    """Split on single spaces, trimming each piece and dropping empty ones."""
    words = []
    for token in text.split(" "):
        token = token.strip(WHITESPACE)
        if token:
            words.append(token)
    return words


def strip_punctuation(word: str) -> str:
    """Remove trailing punctuation characters."""
    return word.rstrip(string.punctuation)


def normalize_atom(word: str) -> str:
    """Turn a raw word into a fact atom: lower-cased, trailing punctuation removed."""
    return strip_punctuation(word.lower())


def normalized_words(text: str) -> List[str]:
    """Split on any whitespace and normalize every token.

    Tokens made only of punctuation become empty strings but keep their slot.
    """
    return [normalize_atom(word) for word in text.split()]


def first_word(text: str) -> str:
    """Return the first whitespace-delimited token, normalized, or '' if none."""
    words = text.split()
    return normalize_atom(words[0]) if words else ""
