from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, pattern=r"^[a-zA-Z0-9_]+$")
    display_name: str
    email: EmailStr
    password: str = Field(..., min_length=6)
    mobile: Optional[str] = None
    postcode: Optional[str] = None
    is_cook: bool = False

class UserOut(BaseModel):
    id: str
    username: str
    display_name: str
    email: str
    mobile: Optional[str] = None
    postcode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_cook: bool = False
    is_admin: bool = False

class UserLogin(BaseModel):
    email: EmailStr
    password: str
