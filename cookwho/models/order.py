from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime
from cookwho.models.basket import BasketItem

OrderStatus = Literal["paid"]

class CheckoutRequest(BaseModel):
    items: List[BasketItem] = Field(default_factory=list)

class CheckoutResponse(BaseModel):
    clientSecret: str

class ConfirmOrderRequest(BaseModel):
    payment_intent_id: str

class OrderOut(BaseModel):
    id: str
    user_id: str
    cook_id: str
    items: List[BasketItem]
    # minor currency units (pence)
    total_price: int
    status: OrderStatus
    created_at: datetime
    stripe_payment_intent_id: Optional[str] = None
