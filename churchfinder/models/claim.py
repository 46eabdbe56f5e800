from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text, Uuid, func
from sqlalchemy.orm import relationship as db_relationship
from churchfinder.core.database import Base
from churchfinder.models.common import ClaimStatus, utcnow


class ChurchClaim(Base):
    """Request by a user to take over management of a church listing."""
    __tablename__ = "church_claims"

    id = Column(Integer, primary_key=True, index=True)
    church_id = Column(Integer, ForeignKey('churches.id', ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    status = Column(Enum(ClaimStatus), nullable=False, default=ClaimStatus.PENDING.value)

    church = db_relationship("Church", back_populates="claims")
    user = db_relationship("User")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
