"""
Letter payment endpoints

Route order matters: the fixed ``/summaries`` and ``/letter/{letter_id}``
paths are declared before ``/{payment_id}``.
"""

from fastapi import APIRouter, Depends, Response, status

from ..payments import summarize_all
from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateLetterPaymentRequest, UpdateLetterPaymentRequest, camelize


router = APIRouter()


@router.get("")
async def list_letter_payments(system: TrackerSystem = Depends(get_tracker_system)):
    """List all payments, newest first"""
    with failure_message("Failed to fetch letter payments"):
        payments = system.payments.list()
    return camelize([payment.to_dict() for payment in payments])


@router.get("/summaries")
async def list_payment_summaries(system: TrackerSystem = Depends(get_tracker_system)):
    """Commission reconciliation for every letter"""
    with failure_message("Failed to fetch payment summaries"):
        summaries = summarize_all(system.letters.list(), system.payments.list())
    return camelize([summary.to_dict() for summary in summaries])


@router.get("/letter/{letter_id}")
async def list_payments_for_letter(letter_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Payments recorded against one letter"""
    with failure_message("Failed to fetch letter payments"):
        payments = system.payments.list_for_letter(letter_id)
    return camelize([payment.to_dict() for payment in payments])


@router.get("/{letter_id}/summary")
async def get_payment_summary(letter_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Commission owed, paid and remaining for one letter"""
    with failure_message("Failed to fetch payment summary"):
        summary = system.payments.summarize(letter_id)
    return camelize(summary.to_dict())


@router.get("/{payment_id}")
async def get_letter_payment(payment_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get payment by ID"""
    with failure_message("Failed to fetch letter payment"):
        payment = system.payments.require(payment_id)
    return camelize(payment.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_letter_payment(
    request: CreateLetterPaymentRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Record a commission payment against a letter"""
    with failure_message("Failed to create letter payment"):
        payment = system.payments.create(**request.values())
    return camelize(payment.to_dict())


@router.patch("/{payment_id}")
async def update_letter_payment(
    payment_id: str,
    request: UpdateLetterPaymentRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided payment fields"""
    with failure_message("Failed to update letter payment"):
        payment = system.payments.update(payment_id, request.values())
    return camelize(payment.to_dict())


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_letter_payment(payment_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a payment"""
    with failure_message("Failed to delete letter payment"):
        system.payments.delete(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
