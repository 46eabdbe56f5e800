from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional
from churchfinder.models.user import UserRole, UserStatus

class HomeLocation(BaseModel):
    home_latitude: Optional[float] = Field(None, ge=-90, le=90)
    home_longitude: Optional[float] = Field(None, ge=-180, le=180)
    home_city: Optional[str] = None
    home_state: Optional[str] = None

    @model_validator(mode='after')
    def check_coordinates_pair(self):
        if (self.home_latitude is None) != (self.home_longitude is None):
            raise ValueError("home_latitude and home_longitude must be provided together")
        return self

class UserCreate(HomeLocation):
    email: EmailStr
    display_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)

class UserUpdate(HomeLocation):
    display_name: Optional[str] = Field(None, min_length=1)

class User(BaseModel):
    id: UUID
    email: EmailStr
    display_name: str
    role: UserRole
    status: UserStatus
    home_latitude: Optional[float] = None
    home_longitude: Optional[float] = None
    home_city: Optional[str] = None
    home_state: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class LoginResponse(Token):
    user: User
