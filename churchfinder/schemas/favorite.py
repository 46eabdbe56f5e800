from datetime import date, datetime
from pydantic import BaseModel, field_validator
from typing import Optional

from churchfinder.schemas.church import ChurchSummary

class FavoriteCreate(BaseModel):
    church_id: int

class FavoriteRead(BaseModel):
    id: int
    church_id: int
    church: ChurchSummary
    created_at: datetime

    class Config:
        from_attributes = True

class CheckInCreate(BaseModel):
    church_id: int
    visit_date: Optional[date] = None

    @field_validator('visit_date')
    @classmethod
    def not_in_future(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > date.today():
            raise ValueError("visit_date cannot be in the future")
        return v

class CheckInRead(BaseModel):
    id: int
    church_id: int
    church: ChurchSummary
    visit_date: date
    created_at: datetime

    class Config:
        from_attributes = True
