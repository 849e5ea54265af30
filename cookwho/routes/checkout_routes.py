from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from cookwho.core.exceptions import CheckoutError
from cookwho.models.order import CheckoutRequest, CheckoutResponse
from cookwho.services.checkout_service import create_payment_intent
from cookwho.utils.logger import get_logger

logger = get_logger("Checkout_Route")

router = APIRouter(prefix="/api", tags=["Checkout"])

@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(payload: CheckoutRequest):
    """Create a payment intent for the basket and hand the client secret to the payment form."""
    try:
        return await run_in_threadpool(create_payment_intent, payload.items)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CheckoutError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error")
