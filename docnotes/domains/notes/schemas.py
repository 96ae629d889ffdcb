from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime
import uuid

from docnotes.domains.documents.blocks import is_storage_reference
from docnotes.domains.identity.schemas import UserPublic


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(default="", max_length=1000000)
    image_path: Optional[str] = Field(None, max_length=512)
    is_public: bool = False

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('image_path')
    @classmethod
    def validate_image_path(cls, v):
        if v and not is_storage_reference(v):
            raise ValueError('Image path must be a storage reference')
        return v or None


class NoteResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    content: str
    image_url: Optional[str] = None
    is_public: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteEnvelope(BaseModel):
    note: NoteResponse


class NoteListResponse(BaseModel):
    notes: List[NoteResponse]


class PublicProfileResponse(BaseModel):
    user: UserPublic
    notes: List[NoteResponse]
