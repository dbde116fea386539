"""
Bank endpoints
"""

from fastapi import APIRouter, Depends, Response, status

from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateBankRequest, UpdateBankRequest, camelize


router = APIRouter()


@router.get("")
async def list_banks(system: TrackerSystem = Depends(get_tracker_system)):
    """List all banks, newest first"""
    with failure_message("Failed to fetch banks"):
        banks = system.banks.list()
    return camelize([bank.to_dict() for bank in banks])


@router.get("/{bank_id}")
async def get_bank(bank_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get bank by ID"""
    with failure_message("Failed to fetch bank"):
        bank = system.banks.require(bank_id)
    return camelize(bank.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_bank(
    request: CreateBankRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Create a new bank"""
    with failure_message("Failed to create bank"):
        bank = system.banks.create(**request.values())
    return camelize(bank.to_dict())


@router.patch("/{bank_id}")
async def update_bank(
    bank_id: str,
    request: UpdateBankRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided bank fields"""
    with failure_message("Failed to update bank"):
        bank = system.banks.update(bank_id, request.values())
    return camelize(bank.to_dict())


@router.delete("/{bank_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bank(bank_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a bank; its letters and credits are kept"""
    with failure_message("Failed to delete bank"):
        system.banks.delete(bank_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
