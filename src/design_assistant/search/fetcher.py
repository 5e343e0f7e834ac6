"""
Tiered Candidate Fetcher

Pulls candidate rows from the record store through an ordered chain of fetch
strategies and scores them locally. The chain stops at the first strategy
whose rows contain at least one positively scored record.

Tiers
-----
1. filtered : workspace rows whose text columns contain the primary token
2. recent   : most recent workspace rows
3. legacy   : most recent rows across ALL workspaces

The legacy tier serves files uploaded before tenant scoping existed. It is
read-only and only reached when the workspace itself has no match.
"""

from __future__ import annotations

import logging
import uuid
from typing import Awaitable, Callable, List, NamedTuple, Optional, Sequence, Tuple

from ..db.file_store import FileStore
from ..db.models import FileRecord
from .scoring import ScoredCandidate, rank
from .tokenizer import primary_token

logger = logging.getLogger("design_assistant.fetcher")


DEFAULT_WORKING_SET = 200
LEGACY_TIER = "legacy"

FetchStrategy = Callable[
    [FileStore, Sequence[str], uuid.UUID, int],
    Awaitable[List[FileRecord]],
]


class FetchResult(NamedTuple):
    """Ranked candidates plus the name of the tier that produced them."""
    tier: Optional[str]
    candidates: List[ScoredCandidate]

    @property
    def used_legacy_fallback(self) -> bool:
        return self.tier == LEGACY_TIER


# ---------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------

async def fetch_filtered(
    store: FileStore,
    tokens: Sequence[str],
    workspace_id: uuid.UUID,
    limit: int,
) -> List[FileRecord]:
    primary = primary_token(tokens)
    if not primary:
        return []
    return await store.select_files(workspace_id=workspace_id, contains=primary, limit=limit)


async def fetch_recent(
    store: FileStore,
    tokens: Sequence[str],
    workspace_id: uuid.UUID,
    limit: int,
) -> List[FileRecord]:
    return await store.select_files(workspace_id=workspace_id, limit=limit)


async def fetch_legacy(
    store: FileStore,
    tokens: Sequence[str],
    workspace_id: uuid.UUID,
    limit: int,
) -> List[FileRecord]:
    return await store.select_files(limit=limit)


DEFAULT_STRATEGIES: Tuple[Tuple[str, FetchStrategy], ...] = (
    ("filtered", fetch_filtered),
    ("recent", fetch_recent),
    (LEGACY_TIER, fetch_legacy),
)


# ---------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------

class TieredFetcher:
    """
    Runs fetch strategies in order until one yields a positive match.

    Store errors are not caught here; they propagate to the caller as
    `StoreQueryError`.
    """

    def __init__(
        self,
        store: FileStore,
        strategies: Sequence[Tuple[str, FetchStrategy]] = DEFAULT_STRATEGIES,
        working_set: int = DEFAULT_WORKING_SET,
    ) -> None:
        self._store = store
        self._strategies = tuple(strategies)
        self._working_set = working_set

    async def fetch(
        self,
        tokens: Sequence[str],
        workspace_id: uuid.UUID,
    ) -> FetchResult:
        """
        Return ranked candidates from the first tier with a positive match.

        Parameters
        ----------
        tokens : Sequence[str]
            Normalized query tokens.
        workspace_id : uuid.UUID
            Requesting tenant.

        Returns
        -------
        FetchResult
            `tier` is None and `candidates` empty when no tier matched.
        """
        for tier, strategy in self._strategies:
            rows = await strategy(self._store, tokens, workspace_id, self._working_set)
            candidates = rank(rows, tokens)

            logger.debug(
                "evt=fetch_tier tier=%s rows=%d positives=%d",
                tier,
                len(rows),
                len(candidates),
            )

            if candidates:
                if tier == LEGACY_TIER:
                    logger.info(
                        "evt=legacy_fallback workspace=%s matches=%d",
                        workspace_id,
                        len(candidates),
                    )
                return FetchResult(tier, candidates)

        return FetchResult(None, [])
