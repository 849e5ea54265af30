# models/restaurant.py
from pydantic import BaseModel, Field
from typing import List, Optional
from cookwho.models.menu import CookMenuItem
from cookwho.models.user import UserOut

class RestaurantUpsert(BaseModel):
    name: str = Field(min_length=2)
    description: Optional[str] = None
    # geocoded into latitude/longitude when given
    postcode: Optional[str] = None
    restaurant_image_url: Optional[str] = None
    showcase_image_urls: List[str] = Field(default_factory=list)
    is_available: bool = True

class AvailabilityUpdate(BaseModel):
    is_available: bool

class RestaurantOut(BaseModel):
    id: str
    user_id: str
    name: str
    rating: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    # kilometres from the caller, when their location is known
    distance: Optional[float] = None
    email: Optional[str] = None
    restaurant_image_url: Optional[str] = None
    showcase_image_urls: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    is_available: bool = False

class RestaurantListResponse(BaseModel):
    restaurants: List[RestaurantOut]
    location_error: Optional[str] = None

class CookPage(BaseModel):
    restaurant: RestaurantOut
    cook: UserOut
    menu_items: List[CookMenuItem]
    distance: Optional[float] = None
