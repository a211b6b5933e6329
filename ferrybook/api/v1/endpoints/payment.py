"""
Payment API Endpoints
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ferrybook.core.database import get_session
from ferrybook.core.security import get_current_user
from ferrybook.models.user import User
from ferrybook.services.payment_service import PaymentInput, payment_service
from ferrybook.schemas.payment import PaymentSubmit, PaymentResponse, PaymentResultResponse

router = APIRouter()


@router.post(
    "/{booking_id}",
    response_model=PaymentResultResponse,
    responses={status.HTTP_402_PAYMENT_REQUIRED: {"model": PaymentResultResponse}}
)
async def submit_payment(
    booking_id: UUID,
    payment_data: PaymentSubmit,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """Pay for a booking; a declined card returns 402 and can be retried"""
    result = await payment_service.submit_payment(
        db,
        booking_id,
        PaymentInput(
            payment_method=payment_data.payment_method,
            cardholder_name=payment_data.cardholder_name,
            card_number=payment_data.card_number,
            expiry_month=payment_data.expiry_month,
            expiry_year=payment_data.expiry_year,
            cvv=payment_data.cvv
        ),
        user=current_user
    )

    response = PaymentResultResponse(
        success=result.success,
        booking_code=result.booking.booking_code,
        payment_status=result.booking.payment_status,
        reason=result.reason,
        payment=PaymentResponse.model_validate(result.payment) if result.payment else None
    )
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            content=response.model_dump(mode="json")
        )
    return response


@router.get("/{booking_id}", response_model=List[PaymentResponse])
async def list_payments(
    booking_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session)
):
    """Payment attempts recorded for a booking"""
    return await payment_service.list_payments(db, booking_id, user=current_user)
