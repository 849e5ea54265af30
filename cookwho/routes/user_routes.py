from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from cookwho.core.dependencies import get_current_user, get_store
from cookwho.db.document_store import DocumentStore
from cookwho.models.order import OrderOut
from cookwho.models.user import UserOut
from cookwho.services.order_service import list_user_orders
from cookwho.utils.logger import get_logger

logger = get_logger("User_Route")

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/me", response_model=UserOut)
async def get_me(current_user: UserOut = Depends(get_current_user)):
    return current_user

@router.get("/me/orders", response_model=List[OrderOut])
async def get_my_orders(current_user: UserOut = Depends(get_current_user), store: DocumentStore = Depends(get_store)):
    try:
        return await list_user_orders(store, current_user.id)
    except Exception:
        logger.exception("Error fetching orders")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching orders")
