"""
API endpoint constants and configuration.

This module contains all FarmArea REST endpoint paths, relative to the API
base URL (``.../api``).
"""


class FarmAreaAPIEndpoints:
    """FarmArea API endpoint paths."""

    USER = "/user"
    FARM_SETTINGS = "/farm-settings"

    AREAS = "/areas"
    AREA_BY_ID = "/areas/{area_id}"
    AREA_TASKS = "/areas/{area_id}/tasks"
    AREA_NOTES = "/areas/{area_id}/notes"

    TASK_BY_ID = "/tasks/{task_id}"
    TASK_TRANSITION = "/tasks/{task_id}/transition"

    NOTE_BY_ID = "/notes/{note_id}"

    @classmethod
    def area(cls, area_id: str) -> str:
        return cls.AREA_BY_ID.format(area_id=area_id)

    @classmethod
    def area_tasks(cls, area_id: str) -> str:
        return cls.AREA_TASKS.format(area_id=area_id)

    @classmethod
    def area_notes(cls, area_id: str) -> str:
        return cls.AREA_NOTES.format(area_id=area_id)

    @classmethod
    def task(cls, task_id: str) -> str:
        return cls.TASK_BY_ID.format(task_id=task_id)

    @classmethod
    def task_transition(cls, task_id: str) -> str:
        return cls.TASK_TRANSITION.format(task_id=task_id)

    @classmethod
    def note(cls, note_id: str) -> str:
        return cls.NOTE_BY_ID.format(note_id=note_id)


class APIConstants:
    """General API configuration constants."""

    CONTENT_TYPE_JSON = "application/json"
