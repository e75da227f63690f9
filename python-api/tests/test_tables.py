"""
Tests for the ZeroDB Tables API wrapper.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from integrations.zerodb.tables import TablesAPI

ROWS_PATH = "/v1/public/projects/proj-1/database/tables/events/rows"


@pytest.fixture
def api():
    client = MagicMock()
    client.project_id = "proj-1"
    client._request = AsyncMock(return_value={})
    return TablesAPI(client)


@pytest.mark.asyncio
async def test_query_rows_serialises_filter(api):
    api.client._request.return_value = {"rows": [{"event_id": "e1"}]}

    rows = await api.query_rows("events", filter={"status": {"$in": ["active"]}}, limit=5)

    assert rows == [{"event_id": "e1"}]
    method, path = api.client._request.call_args[0]
    params = api.client._request.call_args[1]["params"]
    assert (method, path) == ("GET", ROWS_PATH)
    assert params["limit"] == 5
    assert json.loads(params["filter"]) == {"status": {"$in": ["active"]}}


@pytest.mark.asyncio
async def test_query_rows_without_filter(api):
    rows = await api.query_rows("events")

    assert rows == []
    assert "filter" not in api.client._request.call_args[1]["params"]


@pytest.mark.asyncio
async def test_query_all_rows_pages_until_short_page(api):
    api.client._request.side_effect = [
        {"rows": [{"n": 1}, {"n": 2}]},
        {"rows": [{"n": 3}, {"n": 4}]},
        {"rows": [{"n": 5}]},
    ]

    rows = await api.query_all_rows("events", page_size=2)

    assert [r["n"] for r in rows] == [1, 2, 3, 4, 5]
    skips = [c[1]["params"]["skip"] for c in api.client._request.call_args_list]
    assert skips == [0, 2, 4]


@pytest.mark.asyncio
async def test_update_rows_sends_filter_and_update(api):
    api.client._request.return_value = {"matched_count": 1, "modified_count": 1}

    result = await api.update_rows(
        "events",
        filter={"event_id": "e1"},
        update={"$addToSet": {"participants": "u1"}},
    )

    assert result["matched_count"] == 1
    api.client._request.assert_called_once_with(
        "PATCH",
        ROWS_PATH,
        json={"filter": {"event_id": "e1"}, "update": {"$addToSet": {"participants": "u1"}}},
    )


@pytest.mark.asyncio
async def test_insert_rows(api):
    await api.insert_rows("events", rows=[{"event_id": "e1"}])

    api.client._request.assert_called_once_with(
        "POST", ROWS_PATH, json={"rows": [{"event_id": "e1"}]}
    )


@pytest.mark.asyncio
async def test_delete_rows(api):
    await api.delete_rows("events", filter={"event_id": "e1"})

    api.client._request.assert_called_once_with(
        "DELETE", ROWS_PATH, json={"filter": {"event_id": "e1"}}
    )


@pytest.mark.asyncio
async def test_delete_table(api):
    await api.delete("events")

    api.client._request.assert_called_once_with(
        "DELETE", "/v1/public/projects/proj-1/database/tables/events"
    )
