from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Optional

from churchfinder.models.common import ClaimStatus, Weekday


def normalize_service_times(value: Optional[Dict[str, List[str]]]) -> Optional[Dict[str, List[str]]]:
    """Canonical day keys, stripped labels, no blanks or repeats."""
    if value is None:
        return None
    schedule: Dict[str, List[str]] = {}
    for raw_day, labels in value.items():
        day = Weekday.parse(raw_day).value
        bucket = schedule.setdefault(day, [])
        for label in labels or []:
            label = str(label).strip()
            if label and label not in bucket:
                bucket.append(label)
    return {day: labels for day, labels in schedule.items() if labels}


def normalize_languages(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is None:
        return None
    seen = set()
    names = []
    for name in value:
        name = str(name).strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            names.append(name)
    return names


def validate_founded_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1000 <= value <= date.today().year:
        raise ValueError(f"founded_year must be between 1000 and {date.today().year}")
    return value


class ChurchBase(BaseModel):
    name: str = Field(..., min_length=1)
    denomination: str = Field(..., min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str = "US"
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    founded_year: Optional[int] = None
    average_attendance: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    verified: bool = False

class ChurchCreate(ChurchBase):
    service_times: Dict[str, List[str]] = {}
    languages: List[str] = []

    @field_validator('service_times')
    @classmethod
    def validate_service_times(cls, v):
        return normalize_service_times(v)

    @field_validator('languages')
    @classmethod
    def validate_languages(cls, v):
        return normalize_languages(v)

    @field_validator('founded_year')
    @classmethod
    def check_founded_year(cls, v):
        return validate_founded_year(v)

# Columns an update may change but never set to null
NON_NULLABLE_FIELDS = ("name", "denomination", "country", "latitude", "longitude", "verified")

class ChurchUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    denomination: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    founded_year: Optional[int] = None
    average_attendance: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    verified: Optional[bool] = None
    service_times: Optional[Dict[str, List[str]]] = None
    languages: Optional[List[str]] = None

    @field_validator('service_times')
    @classmethod
    def validate_service_times(cls, v):
        return normalize_service_times(v)

    @field_validator('languages')
    @classmethod
    def validate_languages(cls, v):
        return normalize_languages(v)

    @field_validator('founded_year')
    @classmethod
    def check_founded_year(cls, v):
        return validate_founded_year(v)

    @model_validator(mode='after')
    def check_required_not_cleared(self):
        cleared = [field for field in NON_NULLABLE_FIELDS if field in self.model_fields_set and getattr(self, field) is None]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self

class ChurchRead(ChurchBase):
    id: int
    service_times: Dict[str, List[str]] = {}
    languages: List[str] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ChurchSummary(BaseModel):
    """Listing row: enough to render a result card or a map pin."""
    id: int
    name: str
    denomination: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: float
    longitude: float
    image_url: Optional[str] = None
    verified: bool
    service_times: Dict[str, List[str]] = {}
    languages: List[str] = []
    distance_miles: Optional[float] = None

    class Config:
        from_attributes = True

class ChurchClaimCreate(BaseModel):
    message: Optional[str] = None

class ChurchClaimRead(BaseModel):
    id: int
    church_id: int
    message: Optional[str] = None
    status: ClaimStatus
    created_at: datetime

    class Config:
        from_attributes = True
