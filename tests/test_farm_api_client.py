"""
Unit tests for the FarmArea API client.

Tests cover:
- Successful API responses
- camelCase request bodies
- No retry on any error
- Async context manager
- Error handling
"""
import json

import pytest
import httpx
import respx
from unittest.mock import AsyncMock

from farmarea.domain.models import AreaCreate, AreaUpdate, NoteCreate, Point, TaskCreate, TaskStatus
from farmarea.infrastructure.farm_api_client import FarmAPIClient, FarmAPIError


BASE_URL = "http://test/api"

AREA_JSON = {
    "id": "area-1",
    "name": "North Field",
    "description": "",
    "hectares": 12.5,
    "cropType": "Wheat",
    "color": "#ef4444",
    "points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 10}, {"x": 0, "y": 10}],
    "userId": "user-1",
    "createdAt": "2025-03-01T10:00:00+00:00",
}

TASK_JSON = {
    "id": "task-1",
    "title": "Soil Sampling",
    "status": "pending",
    "assignee": "Mike",
    "dueDate": "2025-03-01",
    "areaId": "area-1",
    "createdAt": "2025-03-01T10:00:00+00:00",
}


@pytest.fixture
def square():
    return [Point(x=0, y=0), Point(x=10, y=0), Point(x=10, y=10), Point(x=0, y=10)]


# ============================================================
# API Client Initialization Tests
# ============================================================

class TestAPIClientInitialization:
    """Tests for API client initialization."""

    def test_client_initialization(self):
        """Client should default to the configured base URL."""
        client = FarmAPIClient()

        assert client.base_url == "http://localhost:8000/api"
        assert client.client is not None

    def test_trailing_slash_stripped(self):
        client = FarmAPIClient(base_url=f"{BASE_URL}/")

        assert client.base_url == BASE_URL


# ============================================================
# Async Context Manager Tests
# ============================================================

class TestAsyncContextManager:
    """Tests for async context manager functionality."""

    @pytest.mark.asyncio
    async def test_context_manager_enter(self):
        """__aenter__ should return the client instance."""
        client = FarmAPIClient(base_url=BASE_URL)

        async with client as ctx_client:
            assert ctx_client is client

    @pytest.mark.asyncio
    async def test_context_manager_exit_closes_client(self):
        """__aexit__ should close the HTTP client."""
        client = FarmAPIClient(base_url=BASE_URL)
        client.close = AsyncMock()

        async with client:
            pass

        client.close.assert_called_once()


# ============================================================
# API Response Tests
# ============================================================

class TestAPIResponses:
    """Tests for API response handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_areas(self):
        """list_areas should parse camelCase JSON into Area models."""
        respx.get(f"{BASE_URL}/areas").mock(return_value=httpx.Response(200, json=[AREA_JSON]))

        async with FarmAPIClient(base_url=BASE_URL) as client:
            areas = await client.list_areas()

        assert len(areas) == 1
        assert areas[0].crop_type == "Wheat"
        assert areas[0].points[2] == Point(x=10, y=10)

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_area_sends_camel_case(self, square):
        route = respx.post(f"{BASE_URL}/areas").mock(return_value=httpx.Response(201, json=AREA_JSON))
        payload = AreaCreate(name="North Field", crop_type="Wheat", hectares=12.5, color="#ef4444", points=square)

        async with FarmAPIClient(base_url=BASE_URL) as client:
            area = await client.create_area(payload)

        body = json.loads(route.calls.last.request.content)
        assert body["cropType"] == "Wheat"
        assert "crop_type" not in body
        assert body["points"][1] == {"x": 10.0, "y": 0.0}
        assert area.id == "area-1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_update_area_sends_only_set_fields(self):
        route = respx.patch(f"{BASE_URL}/areas/area-1").mock(return_value=httpx.Response(200, json=AREA_JSON))

        async with FarmAPIClient(base_url=BASE_URL) as client:
            await client.update_area("area-1", AreaUpdate(crop_type="Barley"))

        assert json.loads(route.calls.last.request.content) == {"cropType": "Barley"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_task(self):
        route = respx.post(f"{BASE_URL}/areas/area-1/tasks").mock(
            return_value=httpx.Response(201, json=TASK_JSON)
        )
        payload = TaskCreate(title="Soil Sampling", assignee="Mike", due_date="2025-03-01")

        async with FarmAPIClient(base_url=BASE_URL) as client:
            task = await client.create_task("area-1", payload)

        body = json.loads(route.calls.last.request.content)
        assert body["dueDate"] == "2025-03-01"
        assert body["status"] == "pending"
        assert task.status == TaskStatus.PENDING

    @pytest.mark.asyncio
    @respx.mock
    async def test_transition_task(self):
        route = respx.post(f"{BASE_URL}/tasks/task-1/transition").mock(
            return_value=httpx.Response(200, json={**TASK_JSON, "status": "completed"})
        )

        async with FarmAPIClient(base_url=BASE_URL) as client:
            task = await client.transition_task("task-1", TaskStatus.COMPLETED)

        assert json.loads(route.calls.last.request.content) == {"status": "completed"}
        assert task.status == TaskStatus.COMPLETED

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_note(self):
        route = respx.post(f"{BASE_URL}/areas/area-1/notes").mock(
            return_value=httpx.Response(201, json={
                "id": "note-1",
                "content": "Early sprouting",
                "author": "You",
                "date": "2025-03-01",
                "areaId": "area-1",
                "createdAt": "2025-03-01T10:00:00+00:00",
            })
        )

        async with FarmAPIClient(base_url=BASE_URL) as client:
            note = await client.create_note("area-1", NoteCreate(content="Early sprouting", author="You", date="2025-03-01"))

        assert json.loads(route.calls.last.request.content)["content"] == "Early sprouting"
        assert note.area_id == "area-1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_returns_none(self):
        """204 responses should give None without decoding a body."""
        respx.delete(f"{BASE_URL}/areas/area-1").mock(return_value=httpx.Response(204))

        async with FarmAPIClient(base_url=BASE_URL) as client:
            assert await client.delete_area("area-1") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_farm_settings(self):
        respx.get(f"{BASE_URL}/farm-settings").mock(
            return_value=httpx.Response(200, json={"id": None, "name": "FarmArea", "userId": None})
        )

        async with FarmAPIClient(base_url=BASE_URL) as client:
            settings = await client.get_farm_settings()

        assert settings.name == "FarmArea"


# ============================================================
# Error Handling Tests
# ============================================================

class TestErrorHandling:
    """Tests for error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_error_no_retry(self):
        """4xx errors should surface the API's error message once."""
        respx.get(f"{BASE_URL}/areas/missing").mock(
            return_value=httpx.Response(404, json={"error": "Area not found", "detail": None})
        )

        async with FarmAPIClient(base_url=BASE_URL) as client:
            with pytest.raises(FarmAPIError, match="404 - Area not found") as exc_info:
                await client.get_area("missing")

        assert exc_info.value.status_code == 404
        assert respx.calls.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_error_no_retry(self):
        """Server errors are not retried either."""
        route = respx.get(f"{BASE_URL}/areas")
        route.side_effect = [
            httpx.Response(500, text="Internal Server Error"),
            httpx.Response(200, json=[]),
        ]

        async with FarmAPIClient(base_url=BASE_URL) as client:
            with pytest.raises(FarmAPIError, match="500 - Internal Server Error"):
                await client.list_areas()

        assert respx.calls.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error(self):
        respx.get(f"{BASE_URL}/user").mock(side_effect=httpx.ConnectError("connection refused"))

        async with FarmAPIClient(base_url=BASE_URL) as client:
            with pytest.raises(FarmAPIError, match="API request error") as exc_info:
                await client.get_user()

        assert exc_info.value.status_code is None


# ============================================================
# End-to-End Tests
# ============================================================

class TestAgainstApplication:
    """Drive the real application through the client over ASGI."""

    @pytest.mark.asyncio
    async def test_area_lifecycle(self, database, square):
        from farmarea.main import app

        transport = httpx.ASGITransport(app=app)
        async with FarmAPIClient(base_url=BASE_URL, transport=transport) as client:
            area = await client.create_area(AreaCreate(name="South Paddock", points=square))
            await client.create_task(area.id, TaskCreate(title="Fence repair", assignee="Dave", due_date="2025-04-01"))

            assert [a.name for a in await client.list_areas()] == ["South Paddock"]
            assert len(await client.list_tasks(area.id)) == 1

            await client.delete_area(area.id)

            assert await client.list_tasks(area.id) == []
            with pytest.raises(FarmAPIError) as exc_info:
                await client.get_area(area.id)
            assert exc_info.value.status_code == 404
