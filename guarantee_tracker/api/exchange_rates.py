"""
Exchange rate endpoints
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response, status

from ..currency import round_money
from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import ExchangeRateRequest, UpdateExchangeRateRequest, camelize


router = APIRouter()


@router.get("")
async def list_exchange_rates(system: TrackerSystem = Depends(get_tracker_system)):
    """List stored rates, most recently updated first"""
    with failure_message("Failed to fetch exchange rates"):
        rates = system.exchange_rates.list()
    return camelize([rate.to_dict() for rate in rates])


@router.post("")
async def save_exchange_rate(
    request: ExchangeRateRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Create or update the rate for a (fromCurrency, toCurrency) pair"""
    with failure_message("Failed to save exchange rate"):
        rate = system.exchange_rates.upsert(
            from_currency=request.from_currency,
            to_currency=request.to_currency,
            rate=request.rate
        )
    return camelize(rate.to_dict())


@router.get("/convert")
async def convert_amount(
    amount: Decimal = Query(...),
    from_currency: str = Query(..., alias="from", min_length=1),
    to_currency: str = Query(..., alias="to", min_length=1),
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Convert an amount with the stored rates; unknown pairs come back unconverted"""
    with failure_message("Failed to convert amount"):
        converter = system.exchange_rates.converter()
        rate = converter.get_rate(from_currency, to_currency)
        converted = converter.convert(amount, from_currency, to_currency)

    return camelize({
        "amount": str(amount),
        "from_currency": from_currency.upper(),
        "to_currency": to_currency.upper(),
        "rate": str(rate) if rate is not None else None,
        "converted_amount": str(round_money(converted)),
    })


@router.get("/{rate_id}")
async def get_exchange_rate(rate_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get exchange rate by ID"""
    with failure_message("Failed to fetch exchange rate"):
        rate = system.exchange_rates.require(rate_id)
    return camelize(rate.to_dict())


@router.patch("/{rate_id}")
async def update_exchange_rate(
    rate_id: str,
    request: UpdateExchangeRateRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided exchange rate fields"""
    with failure_message("Failed to update exchange rate"):
        rate = system.exchange_rates.update(rate_id, request.values())
    return camelize(rate.to_dict())


@router.delete("/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exchange_rate(rate_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete an exchange rate"""
    with failure_message("Failed to delete exchange rate"):
        system.exchange_rates.delete(rate_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
