"""
API Models

Pydantic models used for request/response validation on the search and
file-registration endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Optional, Literal, Union

from pydantic import BaseModel, Field, ConfigDict

from ..config import settings


# ---------------------------------------------------------------------
# Search Models
# ---------------------------------------------------------------------

class SearchRequest(BaseModel):
    """
    Natural-language file search issued on behalf of a chat user.
    """
    query: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1, description="Chat-platform team identifier.")
    team_name: Optional[str] = None
    requester_email: Optional[str] = Field(
        default=None,
        description="Email of the asking user, resolved upstream by the bot.",
    )
    limit: int = Field(default_factory=lambda: settings.search_limit, ge=1, le=50)

    model_config = ConfigDict(extra="forbid")


class FileResult(BaseModel):
    """
    A single file returned by search.
    """
    id: uuid.UUID
    display_name: str
    file_url: Optional[str] = None
    description: Optional[str] = None
    project: Optional[str] = None
    tags: Optional[Any] = None
    privacy: Optional[str] = None
    uploaded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SearchResponse(BaseModel):
    query: str
    results: List[FileResult] = Field(default_factory=list)
    count: int = Field(..., ge=0)


# ---------------------------------------------------------------------
# File Registration Models
# ---------------------------------------------------------------------

class FileCreateRequest(BaseModel):
    """
    Metadata for a file that has already been stored (or is linked by URL).
    """
    team_id: str = Field(..., min_length=1)
    team_name: Optional[str] = None
    user_id: Optional[str] = None
    file_name: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)
    tags: Optional[Union[List[str], str]] = None
    description: Optional[str] = None
    slack_file_id: Optional[str] = None
    privacy: Optional[str] = None
    allowed_user_emails: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class FileCreateResponse(BaseModel):
    status: Literal["created"] = "created"
    id: uuid.UUID
