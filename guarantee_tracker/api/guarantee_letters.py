"""
Guarantee letter endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from ..exceptions import RecordNotFoundError
from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateGuaranteeLetterRequest, UpdateGuaranteeLetterRequest, camelize


router = APIRouter()


@router.get("")
async def list_guarantee_letters(
    project_id: Optional[str] = Query(None, alias="projectId"),
    bank_id: Optional[str] = Query(None, alias="bankId"),
    system: TrackerSystem = Depends(get_tracker_system)
):
    """List letters with their bank and project, optionally for one project or bank"""
    with failure_message("Failed to fetch guarantee letters"):
        letters = system.letters.list_letters(project_id=project_id, bank_id=bank_id)
    return camelize([letter.to_dict() for letter in letters])


@router.get("/{letter_id}")
async def get_guarantee_letter(letter_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get a letter with its bank and project"""
    with failure_message("Failed to fetch guarantee letter"):
        letter = system.letters.get_letter(letter_id)
    if letter is None:
        raise RecordNotFoundError(system.letters.entity_name, letter_id)
    return camelize(letter.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_guarantee_letter(
    request: CreateGuaranteeLetterRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Create a new guarantee letter"""
    with failure_message("Failed to create guarantee letter"):
        letter = system.letters.create(**request.values())
        linked = system.letters.get_letter(letter.id)
    return camelize(linked.to_dict())


@router.patch("/{letter_id}")
async def update_guarantee_letter(
    letter_id: str,
    request: UpdateGuaranteeLetterRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided letter fields"""
    with failure_message("Failed to update guarantee letter"):
        system.letters.update(letter_id, request.values())
        linked = system.letters.get_letter(letter_id)
    return camelize(linked.to_dict())


@router.delete("/{letter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_guarantee_letter(letter_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a guarantee letter"""
    with failure_message("Failed to delete guarantee letter"):
        system.letters.delete(letter_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
