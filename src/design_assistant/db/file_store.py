"""
File Store

PostgreSQL-backed record store for design-file metadata.

The search pipeline only ever calls `select_files`; the write helpers exist
for the upload flow and for workspace bootstrap.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Union

from sqlalchemy import or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import StoreQueryError
from .models import FileRecord, Workspace

logger = logging.getLogger("design_assistant.store")


# Text columns searched by the substring ("contains") filter
SEARCHABLE_COLUMNS = (
    FileRecord.file_name,
    FileRecord.name,
    FileRecord.description,
    FileRecord.project,
    FileRecord.tags_text,
)


def flatten_tags(tags: Union[Sequence[Any], str, None]) -> Optional[str]:
    """
    Collapse tags into the space-separated text stored in `tags_text`.
    """
    if tags is None:
        return None
    if isinstance(tags, str):
        return tags or None
    return " ".join(str(t) for t in tags) or None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FileStore:
    """
    Record-store handle bound to a single async session.

    A new instance is created per request and passed explicitly into the
    search pipeline.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize with an async database session.

        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        """
        self._session = session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def select_files(
        self,
        workspace_id: Optional[uuid.UUID] = None,
        contains: Optional[str] = None,
        limit: int = 200,
    ) -> List[FileRecord]:
        """
        Return file records ordered by upload time, newest first.

        Parameters
        ----------
        workspace_id : Optional[uuid.UUID]
            Tenant scope. When None the query spans every tenant, including
            legacy rows that predate workspaces.
        contains : Optional[str]
            Case-insensitive substring matched against the searchable text
            columns (any column may match).
        limit : int
            Maximum number of rows.

        Raises
        ------
        StoreQueryError
            If the database query fails.
        """
        stmt = select(FileRecord)

        if workspace_id is not None:
            stmt = stmt.where(FileRecord.workspace_id == workspace_id)

        if contains:
            pattern = f"%{_escape_like(contains)}%"
            stmt = stmt.where(
                or_(*(col.ilike(pattern, escape="\\") for col in SEARCHABLE_COLUMNS))
            )

        stmt = stmt.order_by(FileRecord.uploaded_at.desc()).limit(limit)

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(
                "File query failed (%s): workspace=%s contains=%r",
                type(exc).__name__,
                workspace_id,
                contains,
            )
            raise StoreQueryError(f"File query failed: {type(exc).__name__}") from exc

        return list(result.scalars().all())

    async def get_workspace(self, team_id: str) -> Optional[Workspace]:
        try:
            result = await self._session.execute(
                select(Workspace).where(Workspace.team_id == team_id)
            )
        except SQLAlchemyError as exc:
            raise StoreQueryError(f"Workspace lookup failed: {type(exc).__name__}") from exc
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def get_or_create_workspace(
        self,
        team_id: str,
        team_name: Optional[str] = None,
    ) -> Workspace:
        """
        Return the workspace for a chat-platform team, creating it on first use.

        The insert ignores a conflicting `team_id`, so concurrent first
        requests from the same team resolve to the single stored row.
        """
        existing = await self.get_workspace(team_id)
        if existing is not None:
            return existing

        stmt = (
            pg_insert(Workspace)
            .values(
                team_id=team_id,
                team_name=team_name or "Unknown Team",
                installed_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(index_elements=[Workspace.team_id])
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StoreQueryError(f"Workspace creation failed: {type(exc).__name__}") from exc

        workspace = await self.get_workspace(team_id)
        if workspace is None:
            raise StoreQueryError(f"Workspace for team {team_id} missing after insert")

        if result.rowcount:
            logger.info("Created workspace %s for team %s", workspace.id, team_id)
        return workspace

    async def add_file(
        self,
        workspace: Workspace,
        file_name: str,
        file_url: str,
        user_id: Optional[str] = None,
        tags: Union[Sequence[str], str, None] = None,
        description: Optional[str] = None,
        slack_file_id: Optional[str] = None,
        privacy: Optional[str] = None,
        allowed_user_emails: Optional[Sequence[str]] = None,
    ) -> FileRecord:
        """
        Persist metadata for an already-stored file.

        The legacy `name` column and the flattened `tags_text` column are
        filled in so that older readers and the substring filter see the row.
        """
        now = datetime.now(timezone.utc)
        if tags is not None and not isinstance(tags, str):
            tags = list(tags)

        record = FileRecord(
            workspace_id=workspace.id,
            team_id=workspace.team_id,
            user_id=user_id,
            file_name=file_name,
            name=file_name,
            project=None,
            tags=tags or None,
            tags_text=flatten_tags(tags),
            description=description or None,
            file_url=file_url,
            slack_file_id=slack_file_id or None,
            uploaded_at=now,
            last_accessed_at=now,
            privacy=privacy,
            allowed_user_emails=list(allowed_user_emails) if allowed_user_emails else None,
        )
        self._session.add(record)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StoreQueryError(f"File insert failed: {type(exc).__name__}") from exc

        return record
