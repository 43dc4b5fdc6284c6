"""
Infrastructure layer: async client for the FarmArea REST API.

Used by the view controllers. Requests are never retried; any non-2xx
status or transport failure is raised as ``FarmAPIError``.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from farmarea.config import settings
from farmarea.domain.models import (
    Area,
    AreaCreate,
    AreaUpdate,
    FarmSettings,
    Note,
    NoteCreate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    User,
    UserUpdate,
)
from farmarea.infrastructure.api_constants import APIConstants, FarmAreaAPIEndpoints as Endpoints

logger = logging.getLogger(__name__)


class FarmAPIError(Exception):
    """A request to the FarmArea API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _body(payload: BaseModel) -> Dict[str, Any]:
    return payload.model_dump(by_alias=True, exclude_unset=True, mode="json")


class FarmAPIClient:
    """Client for the FarmArea REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. ``http://localhost:8000/api``
            timeout: Transport timeout in seconds
            transport: Custom httpx transport (ASGI app, mocks)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": APIConstants.CONTENT_TYPE_JSON},
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            transport=transport,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "FarmAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            FarmAPIError: If the request fails
        """
        try:
            response = await self.client.request(method, endpoint, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.warning(f"{method} {endpoint} failed: {e.response.status_code} - {message}")
            raise FarmAPIError(
                f"API request failed: {e.response.status_code} - {message}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            logger.warning(f"{method} {endpoint} failed: {e}")
            raise FarmAPIError(f"API request error: {str(e)}")

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------
    # User and settings
    # ------------------------------------------------------------

    async def get_user(self) -> User:
        return User.model_validate(await self._make_request("GET", Endpoints.USER))

    async def update_user(self, payload: UserUpdate) -> User:
        data = await self._make_request("PATCH", Endpoints.USER, json=_body(payload))
        return User.model_validate(data)

    async def get_farm_settings(self) -> FarmSettings:
        return FarmSettings.model_validate(await self._make_request("GET", Endpoints.FARM_SETTINGS))

    async def update_farm_settings(self, name: str) -> FarmSettings:
        data = await self._make_request("PATCH", Endpoints.FARM_SETTINGS, json={"name": name})
        return FarmSettings.model_validate(data)

    # ------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------

    async def list_areas(self) -> List[Area]:
        data = await self._make_request("GET", Endpoints.AREAS)
        return [Area.model_validate(item) for item in data]

    async def get_area(self, area_id: str) -> Area:
        return Area.model_validate(await self._make_request("GET", Endpoints.area(area_id)))

    async def create_area(self, payload: AreaCreate) -> Area:
        data = await self._make_request(
            "POST", Endpoints.AREAS,
            json=payload.model_dump(by_alias=True, mode="json"),
        )
        return Area.model_validate(data)

    async def update_area(self, area_id: str, payload: AreaUpdate) -> Area:
        data = await self._make_request("PATCH", Endpoints.area(area_id), json=_body(payload))
        return Area.model_validate(data)

    async def delete_area(self, area_id: str) -> None:
        await self._make_request("DELETE", Endpoints.area(area_id))

    # ------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------

    async def list_tasks(self, area_id: str) -> List[Task]:
        data = await self._make_request("GET", Endpoints.area_tasks(area_id))
        return [Task.model_validate(item) for item in data]

    async def create_task(self, area_id: str, payload: TaskCreate) -> Task:
        data = await self._make_request(
            "POST", Endpoints.area_tasks(area_id),
            json=payload.model_dump(by_alias=True, mode="json"),
        )
        return Task.model_validate(data)

    async def update_task(self, task_id: str, payload: TaskUpdate) -> Task:
        data = await self._make_request("PATCH", Endpoints.task(task_id), json=_body(payload))
        return Task.model_validate(data)

    async def transition_task(self, task_id: str, status: TaskStatus) -> Task:
        data = await self._make_request(
            "POST", Endpoints.task_transition(task_id), json={"status": status.value}
        )
        return Task.model_validate(data)

    async def delete_task(self, task_id: str) -> None:
        await self._make_request("DELETE", Endpoints.task(task_id))

    # ------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------

    async def list_notes(self, area_id: str) -> List[Note]:
        data = await self._make_request("GET", Endpoints.area_notes(area_id))
        return [Note.model_validate(item) for item in data]

    async def create_note(self, area_id: str, payload: NoteCreate) -> Note:
        data = await self._make_request(
            "POST", Endpoints.area_notes(area_id),
            json=payload.model_dump(by_alias=True, mode="json"),
        )
        return Note.model_validate(data)

    async def delete_note(self, note_id: str) -> None:
        await self._make_request("DELETE", Endpoints.note(note_id))


def _error_message(response: httpx.Response) -> str:
    """Pull the one-line error out of an API error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text
