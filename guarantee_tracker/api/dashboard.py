"""
Dashboard statistics endpoint
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query

from ..reporting import compute_dashboard_stats
from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import camelize


router = APIRouter()

CURRENCY_CODE_PATTERN = r"^[A-Za-z]{3,10}$"


@router.get("")
async def get_dashboard_stats(
    currency: Optional[str] = Query(None, pattern=CURRENCY_CODE_PATTERN),
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Counts, totals and due-date windows; totals converted when ``currency`` is given"""
    with failure_message("Failed to fetch dashboard statistics"):
        stats = compute_dashboard_stats(
            letters=system.letters.list(),
            credits=system.credits.list(),
            project_count=system.projects.count(),
            bank_count=system.banks.count(),
            converter=system.exchange_rates.converter() if currency else None,
            target_currency=currency,
        )
    return camelize(stats.to_dict())
