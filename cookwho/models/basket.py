# models/basket.py
from pydantic import BaseModel, Field
from typing import List, Optional

class BasketItem(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    restaurant_id: str
    restaurant_name: str
    image_urls: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    master_category_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class Notification(BaseModel):
    title: str
    description: str

class AddToBasketRequest(BaseModel):
    restaurant_id: str
    item_id: str
    # must be true to replace a basket holding another restaurant's items
    confirm_clear: bool = False

class BasketOut(BaseModel):
    items: List[BasketItem]
    total_price: float
    notifications: List[Notification] = Field(default_factory=list)
