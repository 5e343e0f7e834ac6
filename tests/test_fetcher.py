import uuid
from unittest.mock import AsyncMock

import pytest

from design_assistant.core.errors import StoreQueryError
from design_assistant.db.file_store import FileStore
from design_assistant.search.fetcher import (
    TieredFetcher,
    fetch_filtered,
    fetch_recent,
    fetch_legacy,
)


@pytest.mark.asyncio
async def test_filtered_tier_uses_primary_token(make_file, workspace_id, store_factory):
    """Tier 1 pushes the longest token down as a scoped substring filter."""
    hit = make_file(workspace_id, file_name="ORCA Dashboard Mockup v2")
    store = store_factory([hit])

    result = await TieredFetcher(store).fetch(["orca", "dashboard", "mockup"], workspace_id)

    assert result.tier == "filtered"
    assert [c.record for c in result.candidates] == [hit]
    assert store.calls == [(workspace_id, "dashboard", 200)]
    assert result.used_legacy_fallback is False


@pytest.mark.asyncio
async def test_recent_tier_when_filter_finds_nothing(make_file, workspace_id, store_factory):
    # "mockup" matches via tags only (a list, so not visible to the tags_text filter)
    record = make_file(workspace_id, file_name="v2 final", tags=["mockup"])
    store = store_factory([record])

    result = await TieredFetcher(store).fetch(["mockup"], workspace_id)

    assert result.tier == "recent"
    assert [c.record for c in result.candidates] == [record]
    assert store.calls == [
        (workspace_id, "mockup", 200),
        (workspace_id, None, 200),
    ]


@pytest.mark.asyncio
async def test_no_tokens_skips_filtered_query(workspace_id, store_factory):
    store = store_factory([])

    result = await TieredFetcher(store).fetch([], workspace_id)

    assert result.tier is None
    assert result.candidates == []
    # recent + legacy only
    assert store.calls == [(workspace_id, None, 200), (None, None, 200)]


@pytest.mark.asyncio
async def test_legacy_tier_serves_other_tenants(make_file, workspace_id, store_factory):
    """Records from other (or no) workspaces are used only when ours has no match."""
    own = make_file(workspace_id, file_name="brand guide")
    legacy = make_file(None, file_name="Homepage hero")
    foreign = make_file(uuid.uuid4(), file_name="homepage footer")
    store = store_factory([own, legacy, foreign])

    result = await TieredFetcher(store).fetch(["homepage"], workspace_id)

    assert result.tier == "legacy"
    assert result.used_legacy_fallback is True
    assert [c.record for c in result.candidates] == [legacy, foreign]
    assert store.calls[-1] == (None, None, 200)


@pytest.mark.asyncio
async def test_legacy_not_queried_when_workspace_matches(make_file, workspace_id, store_factory):
    own = make_file(workspace_id, file_name="homepage v3")
    other = make_file(uuid.uuid4(), file_name="homepage v1")
    store = store_factory([own, other])

    result = await TieredFetcher(store).fetch(["homepage"], workspace_id)

    assert [c.record for c in result.candidates] == [own]
    assert all(call[0] == workspace_id for call in store.calls)


@pytest.mark.asyncio
async def test_empty_store_returns_empty_result(workspace_id, store_factory):
    result = await TieredFetcher(store_factory([])).fetch(["logo"], workspace_id)
    assert result.tier is None
    assert result.candidates == []


@pytest.mark.asyncio
async def test_working_set_cap_is_forwarded(workspace_id, store_factory):
    store = store_factory([])
    await TieredFetcher(store, working_set=25).fetch(["logo"], workspace_id)
    assert {call[2] for call in store.calls} == {25}


@pytest.mark.asyncio
async def test_custom_strategy_chain(make_file, workspace_id):
    record = make_file(workspace_id, file_name="logo")

    async def only_tier(store, tokens, ws_id, limit):
        return [record]

    result = await TieredFetcher(AsyncMock(), strategies=[("only", only_tier)]).fetch(
        ["logo"], workspace_id
    )
    assert result.tier == "only"


@pytest.mark.asyncio
async def test_store_errors_propagate(workspace_id):
    store = AsyncMock(spec=FileStore)
    store.select_files.side_effect = StoreQueryError("boom")

    with pytest.raises(StoreQueryError):
        await TieredFetcher(store).fetch(["logo"], workspace_id)


@pytest.mark.asyncio
async def test_strategy_functions_call_store(workspace_id):
    store = AsyncMock(spec=FileStore)
    store.select_files.return_value = []

    await fetch_filtered(store, ["ui", "wireframe"], workspace_id, 10)
    await fetch_recent(store, ["ui"], workspace_id, 10)
    await fetch_legacy(store, ["ui"], workspace_id, 10)

    assert [c.kwargs for c in store.select_files.call_args_list] == [
        {"workspace_id": workspace_id, "contains": "wireframe", "limit": 10},
        {"workspace_id": workspace_id, "limit": 10},
        {"limit": 10},
    ]
