import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from design_assistant.db.models import FileRecord


SEARCHABLE = ("file_name", "name", "description", "project", "tags_text")


class InMemoryFileStore:
    """
    Stand-in for FileStore that applies the same filters to a list of rows.

    Every call is recorded in `calls` as (workspace_id, contains, limit).
    """

    def __init__(self, records: List[FileRecord]) -> None:
        self.records = list(records)
        self.calls = []

    async def select_files(
        self,
        workspace_id: Optional[uuid.UUID] = None,
        contains: Optional[str] = None,
        limit: int = 200,
    ) -> List[FileRecord]:
        self.calls.append((workspace_id, contains, limit))

        rows = self.records
        if workspace_id is not None:
            rows = [r for r in rows if r.workspace_id == workspace_id]
        if contains:
            needle = contains.lower()
            rows = [
                r for r in rows
                if any(needle in (getattr(r, col) or "").lower() for col in SEARCHABLE)
            ]
        rows = sorted(rows, key=lambda r: r.uploaded_at, reverse=True)
        return rows[:limit]


@pytest.fixture
def make_file():
    """
    Factory for FileRecord rows. Each call is uploaded one minute earlier
    than the previous one, so creation order is newest-first order.
    """
    base = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(workspace_id=None, **fields) -> FileRecord:
        counter["n"] += 1
        fields.setdefault("uploaded_at", base - timedelta(minutes=counter["n"]))
        return FileRecord(id=uuid.uuid4(), workspace_id=workspace_id, **fields)

    return _make


@pytest.fixture
def workspace_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def store_factory():
    return InMemoryFileStore
