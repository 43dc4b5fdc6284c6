"""
Domain error taxonomy.

Every failure surfaces as exactly one of these, and the error middleware maps
each to a single HTTP status.
"""


class FarmAreaError(Exception):
    """Base class for all FarmArea domain errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FarmAreaError):
    """An entity id has no matching row visible to the current user."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(FarmAreaError):
    """A request or state change breaks a domain rule."""

    status_code = 400


class DraftNotReadyError(ValidationError):
    """Raised when a polygon draft is confirmed before it holds all points."""
    pass
