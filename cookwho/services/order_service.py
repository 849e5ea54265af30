from datetime import datetime, timezone
from typing import List

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import DuplicateKeyError

from cookwho.core.exceptions import AppException, CheckoutError
from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import collection, ORDERS
from cookwho.db.mutations import CollectionMutations
from cookwho.models.user import UserOut
from cookwho.services.basket_store import BasketStore
from cookwho.services.checkout_service import amount_in_minor_units, retrieve_payment_intent
from cookwho.utils.logger import get_logger

logger = get_logger("Order_Service")

PAID_INTENT_STATUSES = {"succeeded", "processing"}

async def confirm_order(store: DocumentStore, basket: BasketStore, user: UserOut, payment_intent_id: str) -> dict:
    """
    Records the basket as a paid order once Stripe reports the payment, then
    clears the basket. The basket is left alone on any failure.
    """
    items = basket.items
    if not items:
        raise AppException(status_code=400, detail="Basket is empty")
    if await store.exists(collection(ORDERS).where("stripe_payment_intent_id", payment_intent_id)):
        logger.warning(f"Payment intent {payment_intent_id} already used by an order")
        raise CheckoutError("This payment has already been used for an order")
    intent = await run_in_threadpool(retrieve_payment_intent, payment_intent_id)
    if intent.status not in PAID_INTENT_STATUSES:
        raise CheckoutError(f"Payment not completed (status: {intent.status})")
    amount = amount_in_minor_units(items)
    if intent.amount != amount:
        raise CheckoutError("Payment amount does not match basket total")

    order_doc = {
        "user_id": user.id,
        "cook_id": basket.restaurant_id,
        "items": [item.model_dump() for item in items],
        "total_price": amount,
        "status": "paid",
        "created_at": datetime.now(timezone.utc),
        "stripe_payment_intent_id": payment_intent_id,
    }
    try:
        ref = await CollectionMutations(store, ORDERS).add_document(order_doc)
    except DuplicateKeyError as e:
        raise CheckoutError("This payment has already been used for an order") from e
    basket.clear_basket()
    logger.info("Order created", extra={"order_id": ref.id, "user": user.id, "cook_id": order_doc["cook_id"]})
    return {"id": ref.id, **order_doc}

async def list_user_orders(store: DocumentStore, user_id: str) -> List[dict]:
    orders = await store.get_documents(collection(ORDERS).where("user_id", user_id).order("created_at", descending=True))
    logger.info(f"Fetched {len(orders)} orders for user {user_id}")
    return orders
