# routes/basket_routes.py
from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, status
from cookwho.core.dependencies import BasketSession, get_basket, get_current_user, get_store
from cookwho.core.exceptions import BasketConflictError, CheckoutError
from cookwho.db.document_store import DocumentStore
from cookwho.models.basket import AddToBasketRequest, BasketOut
from cookwho.models.order import ConfirmOrderRequest, OrderOut
from cookwho.models.user import UserOut
from cookwho.services.basket_service import add_to_basket, alert_cook, build_basket_item
from cookwho.services.order_service import confirm_order
from cookwho.utils.logger import get_logger

logger = get_logger("Basket_Route")

router = APIRouter(prefix="/basket", tags=["Basket"])

def _out(session: BasketSession) -> BasketOut:
    return BasketOut(
        items=session.store.items,
        total_price=session.store.total_price,
        notifications=session.notifications,
    )

@router.get("", response_model=BasketOut)
async def get_basket_contents(session: BasketSession = Depends(get_basket)):
    return _out(session)

@router.post("/items", response_model=BasketOut)
async def add_basket_item(
    payload: AddToBasketRequest,
    background_tasks: BackgroundTasks,
    session: BasketSession = Depends(get_basket),
    store: DocumentStore = Depends(get_store),
):
    """
    Add a cook's dish. Items from a second restaurant answer 409 unless
    confirm_clear is set, which empties the basket first.
    """
    try:
        item = await build_basket_item(store, payload.restaurant_id, payload.item_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    try:
        add_to_basket(session.store, item, confirm_clear=payload.confirm_clear)
    except BasketConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    # restaurants are keyed by their cook's user id
    background_tasks.add_task(alert_cook, store, item.restaurant_id, item.name)
    return _out(session)

@router.post("/items/{item_id}/increment", response_model=BasketOut)
async def increment_item(item_id: str, session: BasketSession = Depends(get_basket)):
    session.store.increment_quantity(item_id)
    return _out(session)

@router.post("/items/{item_id}/decrement", response_model=BasketOut)
async def decrement_item(item_id: str, session: BasketSession = Depends(get_basket)):
    session.store.decrement_quantity(item_id)
    return _out(session)

@router.delete("/items/{item_id}", response_model=BasketOut)
async def remove_item(item_id: str, session: BasketSession = Depends(get_basket)):
    session.store.remove_item(item_id)
    return _out(session)

@router.delete("", response_model=BasketOut)
async def clear_basket(session: BasketSession = Depends(get_basket)):
    session.store.clear_basket()
    return _out(session)

@router.post("/confirm", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def confirm_basket_order(
    payload: ConfirmOrderRequest = Body(...),
    session: BasketSession = Depends(get_basket),
    current_user: UserOut = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    try:
        return await confirm_order(store, session.store, current_user, payload.payment_intent_id)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CheckoutError as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(e))
    except Exception:
        logger.exception("Error confirming order")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not record your order")
