from datetime import date
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship as db_relationship
from churchfinder.core.database import Base
from churchfinder.models.common import utcnow


class CheckIn(Base):
    """A record that a user attended a church on a given date. Not a rating."""
    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    church_id = Column(Integer, ForeignKey('churches.id', ondelete="CASCADE"), nullable=False, index=True)
    visit_date = Column(Date, nullable=False, default=date.today)

    user = db_relationship("User", back_populates="check_ins")
    church = db_relationship("Church", back_populates="check_ins")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'church_id', 'visit_date', name='uq_check_in_user_church_date'),
    )
