from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..db import FileStore, get_async_session
from ..llm.client import LLMClient
from ..search.pipeline import Ranker, SearchPipeline
from ..search.rerank import PassthroughRanker, SemanticReranker


@lru_cache
def get_llm_client() -> LLMClient:
    return LLMClient()


@lru_cache
def get_ranker() -> Ranker:
    # Decided once per process: semantic reranking only when a key is configured
    if settings.reranking_available:
        return SemanticReranker(get_llm_client())
    return PassthroughRanker()


def get_file_store(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> FileStore:
    return FileStore(session)


def get_search_pipeline(
    store: Annotated[FileStore, Depends(get_file_store)],
    ranker: Annotated[Ranker, Depends(get_ranker)],
) -> SearchPipeline:
    return SearchPipeline(
        store,
        ranker,
        working_set=settings.search_working_set,
        rerank_top_k=settings.rerank_top_k,
    )


async def verify_service_key(
    x_api_key: Optional[str] = Header(None, alias="x-api-key"),
) -> None:
    """
    Require the configured shared key when one is set.
    """
    if settings.service_api_key is None:
        return

    expected = settings.service_api_key.get_secret_value()
    if not expected:
        return

    if x_api_key != expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing API key",
        )
