"""
Search Routes

This module defines the file search endpoint used by the chat bot. The bot
resolves the requester's team and email and forwards the raw message text;
the response lists matching files, best first.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from .models import SearchRequest, SearchResponse, FileResult
from .dependencies import get_file_store, get_search_pipeline, verify_service_key
from ..db import FileStore
from ..search.pipeline import SearchPipeline

router = APIRouter(
    prefix="/search",
    tags=["search"],
    dependencies=[Depends(verify_service_key)],
)


@router.post(
    "/",
    response_model=SearchResponse,
    summary="Natural-language design file search",
    status_code=status.HTTP_200_OK,
)
async def search(
    req: SearchRequest,
    store: Annotated[FileStore, Depends(get_file_store)],
    pipeline: Annotated[SearchPipeline, Depends(get_search_pipeline)],
) -> SearchResponse:
    """
    Search the requesting team's files.

    An empty `results` list means nothing matched. Store or reasoning-service
    failures are turned into a 502 by `search_error_handler`.
    """
    workspace = await store.get_or_create_workspace(req.team_id, req.team_name)

    records = await pipeline.search(
        req.query,
        workspace.id,
        req.requester_email,
        limit=req.limit,
    )

    results = [FileResult.model_validate(r) for r in records]
    return SearchResponse(query=req.query, results=results, count=len(results))
