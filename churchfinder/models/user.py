import uuid
from sqlalchemy import Column, DateTime, Enum, Float, String, Uuid, func, event
from sqlalchemy.orm import relationship as db_relationship
import enum
from churchfinder.core.database import Base
from churchfinder.models.common import utcnow

class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"

class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    DISABLED = "disabled"

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER.value)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.ACTIVE.value)

    # Optional home location
    home_latitude = Column(Float, nullable=True)
    home_longitude = Column(Float, nullable=True)
    home_city = Column(String, nullable=True)
    home_state = Column(String, nullable=True)

    favorites = db_relationship("Favorite", back_populates="user", cascade="all, delete-orphan")
    check_ins = db_relationship("CheckIn", back_populates="user", cascade="all, delete-orphan")

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow
    )

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    def __repr__(self):
        return f"<User {self.email}>"

@event.listens_for(User, 'before_update')
def receive_before_update(mapper, connection, target):
    target.updated_at = utcnow()
