from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Cuisine = Literal["English", "Indian", "Italian"]

class MasterMenuCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    cuisine: Cuisine

class MasterMenuCategory(MasterMenuCategoryCreate):
    id: str

class MenuItemCreate(BaseModel):
    master_category_id: str
    name: Optional[str] = None  # defaults to the category name
    description: str = ""
    price: float = Field(..., ge=0)
    tags: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)

class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None

class CookMenuItem(BaseModel):
    id: str
    master_category_id: str
    name: str
    description: str = ""
    price: float
    tags: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
