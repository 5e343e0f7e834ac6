"""
Search Pipeline

Entry point of the retrieval path:

    query -> tokenize -> tiered fetch + heuristic rank -> ranker -> access filter

The pipeline is request-scoped. It is built with an explicit record-store
handle and ranker, holds no state between calls, and never writes to the
store.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Protocol, Sequence

from ..db.file_store import FileStore
from ..db.models import FileRecord
from .access import filter_accessible
from .fetcher import DEFAULT_WORKING_SET, TieredFetcher
from .rerank import PassthroughRanker
from .tokenizer import tokenize

logger = logging.getLogger("design_assistant.search")


class Ranker(Protocol):
    async def rerank(
        self,
        query: str,
        candidates: Sequence[FileRecord],
        top_k: int,
    ) -> List[FileRecord]:
        ...


class SearchPipeline:
    def __init__(
        self,
        store: FileStore,
        ranker: Optional[Ranker] = None,
        working_set: int = DEFAULT_WORKING_SET,
        rerank_top_k: int = 5,
    ) -> None:
        self._fetcher = TieredFetcher(store, working_set=working_set)
        self._ranker = ranker or PassthroughRanker()
        self._rerank_top_k = rerank_top_k

    async def search(
        self,
        query: str,
        workspace_id: uuid.UUID,
        requester_email: Optional[str],
        limit: int = 10,
    ) -> List[FileRecord]:
        """
        Return the records matching `query` that the requester may view.

        Parameters
        ----------
        query : str
            Free-text query.
        workspace_id : uuid.UUID
            Tenant the requester belongs to.
        requester_email : Optional[str]
            Used only by the access filter.
        limit : int
            Maximum number of heuristic matches passed to the ranker.

        Returns
        -------
        List[FileRecord]
            Best match first; empty when nothing matched.

        Raises
        ------
        StoreQueryError
            If a record-store query fails.
        RerankServiceError
            If the reasoning service cannot be reached.
        """
        tokens = tokenize(query)
        logger.info(
            "evt=search_start workspace=%s tokens=%s",
            workspace_id,
            tokens,
        )

        fetched = await self._fetcher.fetch(tokens, workspace_id)
        results = [c.record for c in fetched.candidates[:limit]]
        logger.info(
            "evt=search_results_raw tier=%s count=%d",
            fetched.tier,
            len(results),
        )

        if not results:
            return []

        results = await self._ranker.rerank(query, results, self._rerank_top_k)

        accessible = filter_accessible(results, requester_email)
        logger.info("evt=search_results_accessible count=%d", len(accessible))
        return accessible
