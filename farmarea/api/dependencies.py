"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from farmarea.config import settings
from farmarea.infrastructure.database import get_db
from farmarea.infrastructure.repository import FarmRepository
from farmarea.services.application.farm_service import FarmService


def get_repository(
    db: Annotated[Session, Depends(get_db)],
) -> FarmRepository:
    """
    Dependency factory for FarmRepository.

    Args:
        db: Request-scoped database session (injected)

    Returns:
        FarmRepository instance
    """
    return FarmRepository(db, default_farm_name=settings.default_farm_name)


def get_farm_service(
    repository: Annotated[FarmRepository, Depends(get_repository)],
) -> FarmService:
    """
    Dependency factory for FarmService.

    Args:
        repository: Farm repository (injected)

    Returns:
        FarmService instance
    """
    return FarmService(repository=repository)


def resolve_session_user(repository: FarmRepository) -> str:
    """
    Get or create the configured session user.

    The email only finds the row the first time; afterwards the id is
    pinned, so profile edits (including the email) keep the same user.

    Args:
        repository: Farm repository

    Returns:
        Id of the session user
    """
    user = repository.get_user_by_email(settings.session_user_email)
    if user is None:
        user = repository.create_user(
            name=settings.session_user_name,
            email=settings.session_user_email,
            role=settings.session_user_role,
            avatar=settings.session_user_avatar,
            bio=settings.session_user_bio,
        )
    return user.id


def get_current_user_id(
    request: Request,
    repository: Annotated[FarmRepository, Depends(get_repository)],
) -> str:
    """
    Resolve the user the request acts for.

    Returns the id pinned at startup. It is resolved again only when no id
    is pinned yet or the pinned user no longer exists.

    Returns:
        Id of the current user
    """
    user_id = getattr(request.app.state, "session_user_id", None)
    if user_id is None or repository.get_user(user_id) is None:
        user_id = resolve_session_user(repository)
        request.app.state.session_user_id = user_id
    return user_id


# Type aliases for cleaner route signatures
FarmServiceDep = Annotated[FarmService, Depends(get_farm_service)]
CurrentUserDep = Annotated[str, Depends(get_current_user_id)]
