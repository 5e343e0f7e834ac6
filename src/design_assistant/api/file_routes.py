"""
File Routes

Registers metadata for files uploaded through the chat upload flow. The
binary itself is stored elsewhere; only its URL is recorded here.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from .models import FileCreateRequest, FileCreateResponse
from .dependencies import get_file_store, verify_service_key
from ..db import FileStore

router = APIRouter(
    prefix="/files",
    tags=["files"],
    dependencies=[Depends(verify_service_key)],
)


@router.post(
    "/",
    response_model=FileCreateResponse,
    summary="Register uploaded file metadata",
    status_code=status.HTTP_201_CREATED,
)
async def create_file(
    req: FileCreateRequest,
    store: Annotated[FileStore, Depends(get_file_store)],
) -> FileCreateResponse:
    workspace = await store.get_or_create_workspace(req.team_id, req.team_name)

    record = await store.add_file(
        workspace,
        file_name=req.file_name.strip(),
        file_url=req.file_url.strip(),
        user_id=req.user_id,
        tags=req.tags,
        description=req.description,
        slack_file_id=req.slack_file_id,
        privacy=req.privacy,
        allowed_user_emails=req.allowed_user_emails,
    )
    return FileCreateResponse(id=record.id)
