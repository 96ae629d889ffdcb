from datetime import datetime

from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship

from docnotes.db.base import Base, BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="Untitled")
    content = Column(JSON, nullable=False, default=lambda: {"blocks": []})
    # Текстовая проекция блоков для поиска
    search_text = Column(Text, nullable=False, default="")
    is_public = Column(Boolean, nullable=False, default=False, index=True)
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    owner = relationship("User", back_populates="owned_documents")
    shares = relationship("DocumentShare", back_populates="document", cascade="all, delete-orphan")
    images = relationship("Image", back_populates="document", cascade="all, delete-orphan")


class DocumentShare(Base):
    __tablename__ = "document_shares"

    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    viewer_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    can_edit = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    document = relationship("Document", back_populates="shares")
    viewer = relationship("User")


class Image(Base):
    __tablename__ = "images"

    # Идентификатор блока уникален только внутри документа
    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String(64), primary_key=True)
    storage_path = Column(String(512), nullable=False)
    position = Column(JSON, nullable=False)
    size = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    document = relationship("Document", back_populates="images")
