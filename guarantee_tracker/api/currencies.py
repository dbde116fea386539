"""
Currency endpoints
"""

from fastapi import APIRouter, Depends, Response, status

from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateCurrencyRequest, UpdateCurrencyRequest, camelize


router = APIRouter()


@router.get("")
async def list_currencies(system: TrackerSystem = Depends(get_tracker_system)):
    """List active currencies"""
    with failure_message("Failed to fetch currencies"):
        currencies = system.currencies.list_active()
    return camelize([currency.to_dict() for currency in currencies])


@router.get("/{currency_id}")
async def get_currency(currency_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get currency by ID"""
    with failure_message("Failed to fetch currency"):
        currency = system.currencies.require(currency_id)
    return camelize(currency.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_currency(
    request: CreateCurrencyRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Add a currency; codes must be unique"""
    with failure_message("Failed to create currency"):
        currency = system.currencies.create(**request.values())
    return camelize(currency.to_dict())


@router.patch("/{currency_id}")
async def update_currency(
    currency_id: str,
    request: UpdateCurrencyRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided currency fields"""
    with failure_message("Failed to update currency"):
        currency = system.currencies.update(currency_id, request.values())
    return camelize(currency.to_dict())


@router.delete("/{currency_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_currency(currency_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a currency"""
    with failure_message("Failed to delete currency"):
        system.currencies.delete(currency_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
