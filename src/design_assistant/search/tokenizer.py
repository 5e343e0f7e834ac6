"""
Query Tokenizer

Turns free-text queries into the lowercase search tokens used by both the
database filter and the heuristic scorer.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

# Small English stopword list so natural phrasing ("hey, send me the latest
# ORCA mockup please") reduces to the words that carry meaning.
STOPWORDS = frozenset(
    """
    a an the and or but if then else when what which who whom this that those
    these is are was were be been being am do does did doing have has had having
    can could should would may might must will shall i you he she it we they me
    him her us them my your our their to from in on at for of by with as about
    into over after before up down out off again further once here there why
    how hey please share send latest new newest
    """.split()
)

MIN_TOKEN_LENGTH = 3

_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def _split_words(query: str) -> List[str]:
    return [w for w in _SPLIT_RE.split((query or "").lower()) if w]


def _singularize(word: str) -> str:
    # Naive: "files" -> "file", but also "is" -> "i"
    return word[:-1] if word.endswith("s") else word


def tokenize(query: str) -> List[str]:
    """
    Normalize a query into an ordered list of search tokens.

    Words are singularized by stripping one trailing "s", then filtered by
    length and stopwords. If that filter removes everything, the raw words
    are returned instead so any alphanumeric query yields some tokens.
    """
    words = _split_words(query)
    tokens = [
        t for t in map(_singularize, words)
        if len(t) >= MIN_TOKEN_LENGTH and t not in STOPWORDS
    ]
    return tokens or words


def primary_token(tokens: Sequence[str]) -> Optional[str]:
    """
    Return the longest token, preferring the earliest on ties.
    """
    best: Optional[str] = None
    for token in tokens:
        if best is None or len(token) > len(best):
            best = token
    return best
