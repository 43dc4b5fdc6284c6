"""
Shared plumbing for the view controllers: request scoping and notifications.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Set

logger = logging.getLogger(__name__)


class RequestCancelled(Exception):
    """The response arrived after its view closed or a newer request replaced it."""
    pass


class RequestScope:
    """
    Ties async API calls to the lifetime of a view.

    Each call is tagged with a key naming the state it feeds ("areas",
    "tasks", ...). A response is only handed back if the scope is still
    open and no newer call with the same key was started; otherwise
    ``RequestCancelled`` is raised and the caller drops the result.
    ``close()`` also cancels everything still in flight.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()
        self._generations: Dict[str, int] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def run(self, key: str, request: Awaitable[Any]) -> Any:
        """
        Await a request within the scope.

        Args:
            key: Name of the state the response will update
            request: Awaitable API call

        Returns:
            The response

        Raises:
            RequestCancelled: If the response is stale
        """
        if self._closed:
            if asyncio.iscoroutine(request):
                request.close()
            raise RequestCancelled(f"View closed before '{key}' was requested")

        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation

        task = asyncio.ensure_future(request)
        self._tasks.add(task)
        try:
            result = await task
        except asyncio.CancelledError:
            if self._closed:
                raise RequestCancelled(f"View closed while '{key}' was in flight")
            raise
        finally:
            self._tasks.discard(task)

        if self._closed or self._generations.get(key) != generation:
            logger.debug(f"Dropping stale '{key}' response")
            raise RequestCancelled(f"Stale '{key}' response")
        return result

    def close(self) -> None:
        """Cancel in-flight requests and refuse new ones."""
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            logger.debug(f"Cancelled {len(self._tasks)} in-flight request(s)")


@dataclass(frozen=True)
class Notification:
    """A transient message shown to the user (toast)."""
    title: str
    description: str = ""
    variant: str = "default"

    @classmethod
    def error(cls, title: str, description: str = "") -> "Notification":
        return cls(title=title, description=description, variant="destructive")
