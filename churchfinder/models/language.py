from sqlalchemy import Column, DateTime, Integer, String, Text, func
from churchfinder.core.database import Base
from churchfinder.models.common import utcnow
from sqlalchemy.orm import relationship as db_relationship
from churchfinder.models.church import church_languages

class Language(Base):
    __tablename__ = "languages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)

    # Relationship with churches
    churches_ref = db_relationship("Church", secondary=church_languages, back_populates="languages_rel")

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)
