"""
API router for the user profile and farm settings.
"""
from fastapi import APIRouter

from farmarea.api.dependencies import CurrentUserDep, FarmServiceDep
from farmarea.api.models.responses import ERROR_RESPONSES
from farmarea.domain.models import FarmSettings, FarmSettingsUpdate, User, UserUpdate


router = APIRouter(tags=["user"])


@router.get(
    "/user",
    response_model=User,
    summary="Get the current user",
    responses={404: ERROR_RESPONSES[404]},
)
def get_user(user_id: CurrentUserDep, service: FarmServiceDep) -> User:
    return service.get_user(user_id)


@router.patch(
    "/user",
    response_model=User,
    summary="Update the current user's profile",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def update_user(payload: UserUpdate, user_id: CurrentUserDep, service: FarmServiceDep) -> User:
    return service.update_user(user_id, payload)


@router.get(
    "/farm-settings",
    response_model=FarmSettings,
    summary="Get farm settings",
    description="Returns the saved settings, or `{\"name\": \"FarmArea\"}` when none exist.",
)
def get_farm_settings(user_id: CurrentUserDep, service: FarmServiceDep) -> FarmSettings:
    return service.get_farm_settings(user_id)


@router.patch(
    "/farm-settings",
    response_model=FarmSettings,
    summary="Rename the farm",
    responses={400: ERROR_RESPONSES[400]},
)
def update_farm_settings(
    payload: FarmSettingsUpdate,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> FarmSettings:
    return service.update_farm_settings(user_id, payload)
