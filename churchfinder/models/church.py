from typing import Dict, List
from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Index, Integer, String, Table, Text, UniqueConstraint, false, func
from sqlalchemy.orm import relationship as db_relationship
from churchfinder.core.database import Base
from churchfinder.models.common import Weekday, utcnow


# Association table for languages
church_languages = Table(
    'church_languages',
    Base.metadata,
    Column('church_id', Integer, ForeignKey('churches.id', ondelete="CASCADE"), primary_key=True),
    Column('language_id', Integer, ForeignKey('languages.id', ondelete="CASCADE"), primary_key=True),
    Column('created_at', DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now()),
)


class ServiceTime(Base):
    __tablename__ = "service_times"

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey('churches.id', ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Enum(Weekday), nullable=False)
    time_label = Column(String, nullable=False)

    church = db_relationship("Church", back_populates="service_time_rows")

    __table_args__ = (
        UniqueConstraint('church_id', 'day', 'time_label', name='uq_service_time'),
    )


class Church(Base):
    __tablename__ = "churches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    denomination = Column(String, nullable=False)

    # Address
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)
    country = Column(String, nullable=False, default="US", server_default="US")

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Contact
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    website = Column(String, nullable=True)

    description = Column(Text, nullable=True)
    founded_year = Column(Integer, nullable=True)
    average_attendance = Column(Integer, nullable=True)
    image_url = Column(String, nullable=True)
    verified = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    service_time_rows = db_relationship(
        "ServiceTime",
        back_populates="church",
        cascade="all, delete-orphan",
        order_by="ServiceTime.id",
    )
    languages_rel = db_relationship("Language", secondary=church_languages, back_populates="churches_ref")
    favorites = db_relationship("Favorite", back_populates="church", cascade="all, delete-orphan")
    check_ins = db_relationship("CheckIn", back_populates="church", cascade="all, delete-orphan")
    claims = db_relationship("ChurchClaim", back_populates="church", cascade="all, delete-orphan")

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    __table_args__ = (
        Index('ix_churches_location', 'latitude', 'longitude'),
        Index('ix_churches_state_city', 'state', 'city'),
        Index('ix_churches_denomination', 'denomination'),
    )

    @property
    def service_times(self) -> Dict[str, List[str]]:
        """Weekly schedule as day -> time labels, days in calendar order."""
        schedule: Dict[str, List[str]] = {}
        for day in Weekday:
            labels = [row.time_label for row in self.service_time_rows if Weekday(row.day) == day]
            if labels:
                schedule[day.value] = labels
        return schedule

    @property
    def languages(self) -> List[str]:
        return sorted(lang.name for lang in self.languages_rel)

    def __repr__(self):
        return f"<Church {self.id} {self.name}>"
