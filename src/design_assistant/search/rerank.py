"""
Result Rankers

The pipeline hands its heuristic top-N to a ranker before access filtering.
Which ranker is used is decided once, when the pipeline is built:

- PassthroughRanker : keeps the heuristic order (no reasoning service configured)
- SemanticReranker  : asks the reasoning service to reorder the candidates

The semantic reranker may reorder and truncate but never invents or silently
drops candidates. Unusable model output means "no opinion" and the heuristic
order is returned as-is. Transport failures are raised as RerankServiceError.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from ..db.models import FileRecord
from ..llm.client import LLMClient

logger = logging.getLogger("design_assistant.rerank")


RERANK_SYSTEM_PROMPT = """You are a retrieval and ranking assistant for design files.
Given a user query and a JSON array of file metadata, return the best matches in order.
Output strictly as JSON: {"ranked": [{"index": <number>, "score": <0..1>} ...] } where index refers to the original position in the input array."""


class PassthroughRanker:
    """Keeps the heuristic order."""

    async def rerank(
        self,
        query: str,
        candidates: Sequence[FileRecord],
        top_k: int,
    ) -> List[FileRecord]:
        return list(candidates)


class SemanticReranker:
    """
    Reorders candidates using an LLM.

    Parameters
    ----------
    client : LLMClient
        Reasoning-service client used for the single ranking call.
    """

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    async def rerank(
        self,
        query: str,
        candidates: Sequence[FileRecord],
        top_k: int,
    ) -> List[FileRecord]:
        """
        Return at most `top_k` candidates in the order the model prefers.

        Candidates the model does not mention are appended in their original
        order before truncation.

        Raises
        ------
        RerankServiceError
            If the reasoning service cannot be reached.
        """
        candidates = list(candidates)
        if len(candidates) <= 1:
            return candidates

        user_payload = json.dumps(
            {"query": query, "items": serialize_candidates(candidates)}
        )
        text = await self._client.complete(RERANK_SYSTEM_PROMPT, user_payload)

        ranked = parse_ranking(text)
        if ranked is None:
            logger.info("evt=rerank_fallback reason=unparseable_response")
            return candidates

        order = reconcile_order(ranked, len(candidates))
        return [candidates[i] for i in order][:top_k]


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _join_tags(tags: Any) -> str:
    if isinstance(tags, (list, tuple)):
        return ", ".join(str(t) for t in tags)
    return str(tags) if tags else ""


def serialize_candidates(candidates: Sequence[FileRecord]) -> List[Dict[str, str]]:
    """Describe candidates for the model; `id` is the positional index."""
    return [
        {
            "id": str(i),
            "name": c.file_name or c.name or "",
            "tags": _join_tags(c.tags if c.tags else c.tags_text),
            "description": c.description or "",
            "url": c.file_url or "",
        }
        for i, c in enumerate(candidates)
    ]


def parse_ranking(text: str) -> Optional[List[Any]]:
    """
    Extract the `ranked` array from a model response.

    Returns None when the text is not a JSON object with a list under
    `ranked`.
    """
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        return None

    if not isinstance(parsed, dict):
        return None

    ranked = parsed.get("ranked")
    if not isinstance(ranked, list):
        return None
    return ranked


def _numeric_score(entry: Dict[str, Any]) -> float:
    value = entry.get("score")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def reconcile_order(ranked: Sequence[Any], count: int) -> List[int]:
    """
    Turn model entries into a complete permutation of `range(count)`.

    Entries with a missing or out-of-range integer index are ignored. The
    rest are sorted by score (highest first, ties keep model order) and
    de-duplicated; unmentioned positions follow in ascending order.
    """
    valid = [
        entry for entry in ranked
        if isinstance(entry, dict)
        and isinstance(entry.get("index"), int)
        and not isinstance(entry.get("index"), bool)
        and 0 <= entry["index"] < count
    ]
    valid.sort(key=_numeric_score, reverse=True)

    order: List[int] = []
    seen = set()
    for entry in valid:
        index = entry["index"]
        if index not in seen:
            seen.add(index)
            order.append(index)

    order.extend(i for i in range(count) if i not in seen)
    return order
