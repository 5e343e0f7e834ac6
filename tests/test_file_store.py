"""
FileStore tests

The session is mocked; these check the SQL that would be sent and the
error wrapping, not a live database.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from design_assistant.core.errors import StoreQueryError
from design_assistant.db.file_store import FileStore, flatten_tags
from design_assistant.db.models import FileRecord, Workspace


def _result(rows):
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    return result


def _sql(session) -> str:
    stmt = session.execute.call_args.args[0]
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.fixture
def session():
    mock = AsyncMock()
    mock.add = MagicMock()
    return mock


@pytest.mark.asyncio
async def test_select_files_scoped_with_contains(session):
    row = FileRecord(file_name="logo")
    session.execute.return_value = _result([row])
    ws = uuid.uuid4()

    rows = await FileStore(session).select_files(workspace_id=ws, contains="logo", limit=200)

    assert rows == [row]
    sql = _sql(session)
    assert "files.workspace_id = " in sql
    for column in ("file_name", "name", "description", "project", "tags_text"):
        assert f"files.{column} ILIKE" in sql
    assert "ORDER BY files.uploaded_at DESC" in sql
    assert "LIMIT" in sql


@pytest.mark.asyncio
async def test_select_files_unscoped_for_legacy(session):
    session.execute.return_value = _result([])

    await FileStore(session).select_files(limit=200)

    sql = _sql(session)
    assert "WHERE" not in sql
    assert "ORDER BY files.uploaded_at DESC" in sql


@pytest.mark.asyncio
async def test_select_files_wraps_database_errors(session):
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    with pytest.raises(StoreQueryError):
        await FileStore(session).select_files(workspace_id=uuid.uuid4())


@pytest.mark.asyncio
async def test_get_or_create_workspace_returns_existing(session):
    existing = Workspace(id=uuid.uuid4(), team_id="T123", team_name="Acme")
    session.execute.return_value = _result([existing])

    workspace = await FileStore(session).get_or_create_workspace("T123", "Other")

    assert workspace is existing
    session.add.assert_not_called()


def _compiled(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


@pytest.mark.asyncio
async def test_get_or_create_workspace_creates(session):
    created = Workspace(id=uuid.uuid4(), team_id="T999", team_name="Unknown Team")
    session.execute.side_effect = [_result([]), MagicMock(rowcount=1), _result([created])]

    workspace = await FileStore(session).get_or_create_workspace("T999", None)

    assert workspace is created
    insert = session.execute.call_args_list[1].args[0]
    assert "INSERT INTO workspaces" in _compiled(insert)
    assert "ON CONFLICT (team_id) DO NOTHING" in _compiled(insert)
    assert insert.compile(dialect=postgresql.dialect()).params["team_name"] == "Unknown Team"
    session.add.assert_not_called()


@pytest.mark.asyncio
async def test_get_or_create_workspace_concurrent_insert_returns_stored_row(session):
    winner = Workspace(id=uuid.uuid4(), team_id="T999", team_name="Acme")
    session.execute.side_effect = [_result([]), MagicMock(rowcount=0), _result([winner])]

    workspace = await FileStore(session).get_or_create_workspace("T999", "Acme")

    assert workspace is winner
    assert session.execute.await_count == 3


@pytest.mark.asyncio
async def test_get_or_create_workspace_wraps_insert_errors(session):
    session.execute.side_effect = [
        _result([]),
        OperationalError("INSERT", {}, Exception("down")),
    ]

    with pytest.raises(StoreQueryError):
        await FileStore(session).get_or_create_workspace("T999")


@pytest.mark.asyncio
async def test_add_file_fills_legacy_columns(session):
    workspace = Workspace(id=uuid.uuid4(), team_id="T123")

    record = await FileStore(session).add_file(
        workspace,
        file_name="ORCA Dashboard Mockup v2",
        file_url="https://cdn.example.com/orca.fig",
        tags=["dashboard", "mockup", "orca"],
        description="",
    )

    assert record.workspace_id == workspace.id
    assert record.team_id == "T123"
    assert record.name == "ORCA Dashboard Mockup v2"
    assert record.tags == ["dashboard", "mockup", "orca"]
    assert record.tags_text == "dashboard mockup orca"
    assert record.description is None
    assert record.uploaded_at is not None
    session.add.assert_called_once_with(record)


def test_flatten_tags():
    assert flatten_tags(None) is None
    assert flatten_tags("") is None
    assert flatten_tags("dashboard, mockup") == "dashboard, mockup"
    assert flatten_tags(["a", "b"]) == "a b"
    assert flatten_tags([]) is None
