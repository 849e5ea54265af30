import math
from typing import List

import stripe

from cookwho.core.exceptions import CheckoutError
from cookwho.models.basket import BasketItem
from cookwho.settings.config import settings
from cookwho.utils.logger import get_logger

logger = get_logger("Checkout_Service")

def amount_in_minor_units(items: List[BasketItem]) -> int:
    """Basket total in pence, rounded half up."""
    total = sum(item.price * item.quantity for item in items)
    return int(math.floor(total * 100 + 0.5))

def create_payment_intent(items: List[BasketItem]) -> dict:
    """
    Creates a Stripe PaymentIntent for the basket and returns {"clientSecret": ...}.
    ValueError for an empty basket, CheckoutError when Stripe fails.
    """
    if not items:
        raise ValueError("Basket is empty")
    amount = amount_in_minor_units(items)
    try:
        intent = stripe.PaymentIntent.create(
            api_key=settings.STRIPE_SECRET_KEY,
            amount=amount,
            currency=settings.CHECKOUT_CURRENCY,
            automatic_payment_methods={"enabled": True},
        )
    except stripe.StripeError as e:
        logger.error(f"Error creating payment intent: {e}", exc_info=True)
        raise CheckoutError(str(e)) from e
    logger.info(f"Payment intent {intent.id} created for {amount} {settings.CHECKOUT_CURRENCY}")
    return {"clientSecret": intent.client_secret}

def retrieve_payment_intent(payment_intent_id: str):
    try:
        return stripe.PaymentIntent.retrieve(payment_intent_id, api_key=settings.STRIPE_SECRET_KEY)
    except stripe.StripeError as e:
        logger.error(f"Error retrieving payment intent {payment_intent_id}: {e}")
        raise CheckoutError(str(e)) from e
