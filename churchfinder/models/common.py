import enum
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# enums
class Weekday(str, enum.Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Accept full names or common abbreviations ("Sun", "wed", "Thurs")."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for day in cls:
            if day.value == key or (len(key) >= 3 and day.value.startswith(key)):
                return day
        raise ValueError(f"Invalid day '{value}'. Must be one of: {', '.join(d.value for d in cls)}")

class ClaimStatus(str, enum.Enum):
    PENDING = "pending"
