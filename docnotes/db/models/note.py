from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from docnotes.db.base import BaseModel


class Note(BaseModel):
    __tablename__ = "notes"

    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    image_path = Column(String(512), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)

    # Relationships
    owner = relationship("User", back_populates="notes")
