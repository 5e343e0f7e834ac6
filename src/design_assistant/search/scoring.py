"""
Heuristic Scorer

Deterministic substring/prefix scoring of file records against query tokens.
Pure functions: no I/O, no state.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, List, NamedTuple, Sequence

from ..db.models import FileRecord


# Points awarded per token
NAME_CONTAINS = 8
NAME_PREFIX = 4
PROJECT_CONTAINS = 3
TAGS_CONTAINS = 3
DESCRIPTION_CONTAINS = 2

_WORD_SPLIT_RE = re.compile(r"[^a-z0-9]+")


class ScoredCandidate(NamedTuple):
    """A file record paired with its heuristic relevance score."""
    record: FileRecord
    score: int


def _text(value: Any) -> str:
    return str(value).lower() if value else ""


def _tags_text(record: FileRecord) -> str:
    tags = getattr(record, "tags", None)
    if isinstance(tags, (list, tuple)):
        return " ".join(str(t) for t in tags).lower()
    return _text(tags or getattr(record, "tags_text", None))


def score_record(record: FileRecord, tokens: Sequence[str]) -> int:
    """
    Score a single record.

    Per token: name contains +8, a word of the name starts with it +4
    (both can apply), project contains +3, tags contain +3, description contains +2.
    """
    name = _text(getattr(record, "file_name", None) or getattr(record, "name", None))
    project = _text(getattr(record, "project", None))
    tags = _tags_text(record)
    description = _text(getattr(record, "description", None))
    name_words = [w for w in _WORD_SPLIT_RE.split(name) if w]

    total = 0
    for token in tokens:
        if not token:
            continue
        if token in name:
            total += NAME_CONTAINS
        if any(word.startswith(token) for word in name_words):
            total += NAME_PREFIX
        if token in project:
            total += PROJECT_CONTAINS
        if token in tags:
            total += TAGS_CONTAINS
        if token in description:
            total += DESCRIPTION_CONTAINS
    return total


def score(records: Iterable[FileRecord], tokens: Sequence[str]) -> List[ScoredCandidate]:
    """Score every record, keeping input order."""
    return [ScoredCandidate(r, score_record(r, tokens)) for r in records]


def rank(records: Iterable[FileRecord], tokens: Sequence[str]) -> List[ScoredCandidate]:
    """
    Return only positively scored records, best first.

    `sorted` is stable, so equal scores keep fetch order (newest upload first).
    """
    positives = [c for c in score(records, tokens) if c.score > 0]
    return sorted(positives, key=lambda c: c.score, reverse=True)
