"""
API router for area endpoints.
"""
from typing import Annotated, List

from fastapi import APIRouter, Path, Response, status

from farmarea.api.dependencies import CurrentUserDep, FarmServiceDep
from farmarea.api.models.responses import ERROR_RESPONSES
from farmarea.domain.models import Area, AreaCreate, AreaUpdate


router = APIRouter(
    prefix="/areas",
    tags=["areas"],
)

AreaId = Annotated[str, Path(description="Unique identifier for the area")]


@router.get(
    "",
    response_model=List[Area],
    summary="List the current user's areas",
)
def list_areas(user_id: CurrentUserDep, service: FarmServiceDep) -> List[Area]:
    return service.list_areas(user_id)


@router.get(
    "/{area_id}",
    response_model=Area,
    summary="Get one area",
    responses={404: ERROR_RESPONSES[404]},
)
def get_area(area_id: AreaId, user_id: CurrentUserDep, service: FarmServiceDep) -> Area:
    return service.get_area(user_id, area_id)


@router.post(
    "",
    response_model=Area,
    status_code=status.HTTP_201_CREATED,
    summary="Create an area",
    description="""
    Create an area from a confirmed 4-point draft.

    Points are percentages (0-100) of the base image's width and height,
    in click order. The owner and creation time are set by the server.
    """,
    responses={400: ERROR_RESPONSES[400]},
)
def create_area(payload: AreaCreate, user_id: CurrentUserDep, service: FarmServiceDep) -> Area:
    return service.create_area(user_id, payload)


@router.patch(
    "/{area_id}",
    response_model=Area,
    summary="Update some fields of an area",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def update_area(
    area_id: AreaId,
    payload: AreaUpdate,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Area:
    return service.update_area(user_id, area_id, payload)


@router.delete(
    "/{area_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an area with its tasks and notes",
)
def delete_area(area_id: AreaId, user_id: CurrentUserDep, service: FarmServiceDep) -> Response:
    service.delete_area(user_id, area_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
