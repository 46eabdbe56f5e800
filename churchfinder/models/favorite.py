from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship as db_relationship
from churchfinder.core.database import Base
from churchfinder.models.common import utcnow


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    church_id = Column(Integer, ForeignKey('churches.id', ondelete="CASCADE"), nullable=False)

    user = db_relationship("User", back_populates="favorites")
    church = db_relationship("Church", back_populates="favorites")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    # A church can only be saved once per user
    __table_args__ = (
        UniqueConstraint('user_id', 'church_id', name='uq_favorite_user_church'),
    )
