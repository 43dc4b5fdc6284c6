"""
API router for note endpoints. Notes are append-only: there is no update.
"""
from typing import Annotated, List

from fastapi import APIRouter, Path, Response, status

from farmarea.api.dependencies import CurrentUserDep, FarmServiceDep
from farmarea.api.models.responses import ERROR_RESPONSES
from farmarea.domain.models import Note, NoteCreate


router = APIRouter(tags=["notes"])


@router.get(
    "/areas/{area_id}/notes",
    response_model=List[Note],
    summary="List an area's notes",
)
def list_notes(
    area_id: Annotated[str, Path(description="Area the notes belong to")],
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> List[Note]:
    return service.list_notes(user_id, area_id)


@router.post(
    "/areas/{area_id}/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    summary="Add a note to an area",
    responses={400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
)
def create_note(
    area_id: Annotated[str, Path(description="Area the note belongs to")],
    payload: NoteCreate,
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Note:
    return service.create_note(user_id, area_id, payload)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a note",
)
def delete_note(
    note_id: Annotated[str, Path(description="Unique identifier for the note")],
    user_id: CurrentUserDep,
    service: FarmServiceDep,
) -> Response:
    service.delete_note(user_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
