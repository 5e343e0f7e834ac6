"""
SQLAlchemy Models

Defines the database schema for:
- Workspaces (one per chat-platform team)
- File records (metadata for uploaded design assets)
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional, List

from sqlalchemy import (
    String,
    Text,
    DateTime,
    ForeignKey,
    Index,
    func,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ---------------------------------------------------------------------
# Workspace Model
# ---------------------------------------------------------------------

class Workspace(Base):
    """
    A tenant. Created lazily the first time a team interacts with the bot.
    """
    __tablename__ = "workspaces"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    team_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    team_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    installed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# ---------------------------------------------------------------------
# File Record Model
# ---------------------------------------------------------------------

class FileRecord(Base):
    """
    Metadata for one uploaded design asset.

    Rows written before workspaces existed have a NULL `workspace_id` and may
    only carry the legacy `name` column; both shapes are read by the search
    pipeline.
    """
    __tablename__ = "files"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    workspace_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="SET NULL"),
        nullable=True,
    )
    team_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    file_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # legacy
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    project: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Either a list of strings or a free-text string, depending on the writer
    tags: Mapped[Optional[Any]] = mapped_column(JSONB, nullable=True)
    tags_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slack_file_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    last_accessed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    privacy: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)  # public | company | restricted
    allowed_user_emails: Mapped[Optional[List[str]]] = mapped_column(JSONB, nullable=True)

    __table_args__ = (
        Index("idx_files_workspace_id", "workspace_id"),
        Index("idx_files_team_id", "team_id"),
        Index("idx_files_uploaded_at", "uploaded_at"),
    )

    @property
    def display_name(self) -> str:
        return (self.file_name or self.name or "").strip() or "Untitled"
