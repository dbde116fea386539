"""
Bank credit endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from ..exceptions import RecordNotFoundError
from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateCreditRequest, UpdateCreditRequest, camelize


router = APIRouter()


def _credit_list(system: TrackerSystem, project_id: Optional[str] = None,
                 bank_id: Optional[str] = None):
    with failure_message("Failed to fetch credits"):
        credits = system.credits.list_credits(project_id=project_id, bank_id=bank_id)
    return camelize([credit.to_dict() for credit in credits])


@router.get("")
async def list_credits(
    project_id: Optional[str] = Query(None, alias="projectId"),
    bank_id: Optional[str] = Query(None, alias="bankId"),
    system: TrackerSystem = Depends(get_tracker_system)
):
    """List credits with their bank and project, optionally for one project or bank"""
    return _credit_list(system, project_id=project_id, bank_id=bank_id)


@router.get("/project/{project_id}")
async def list_project_credits(project_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Credits drawn for one project"""
    return _credit_list(system, project_id=project_id)


@router.get("/bank/{bank_id}")
async def list_bank_credits(bank_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Credits drawn from one bank"""
    return _credit_list(system, bank_id=bank_id)


@router.get("/{credit_id}")
async def get_credit(credit_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get a credit with its bank and project"""
    with failure_message("Failed to fetch credit"):
        credit = system.credits.get_credit(credit_id)
    if credit is None:
        raise RecordNotFoundError(system.credits.entity_name, credit_id)
    return camelize(credit.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_credit(
    request: CreateCreditRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Create a new credit"""
    with failure_message("Failed to create credit"):
        credit = system.credits.create(**request.values())
        linked = system.credits.get_credit(credit.id)
    return camelize(linked.to_dict())


@router.patch("/{credit_id}")
async def update_credit(
    credit_id: str,
    request: UpdateCreditRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided credit fields"""
    with failure_message("Failed to update credit"):
        system.credits.update(credit_id, request.values())
        linked = system.credits.get_credit(credit_id)
    return camelize(linked.to_dict())


@router.delete("/{credit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_credit(credit_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a credit"""
    with failure_message("Failed to delete credit"):
        system.credits.delete(credit_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
