from pydantic import AliasChoices, BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List, Literal, Dict, Any
import uuid
from datetime import datetime

from docnotes.domains.documents.blocks import Block, BlockMetadata, DocumentContent
from docnotes.domains.documents.entities import DEFAULT_TITLE


def _normalize_title(v):
    if v is None:
        return v
    v = v.strip()
    return v or DEFAULT_TITLE


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(DEFAULT_TITLE, max_length=255)
    content: DocumentContent = Field(default_factory=DocumentContent)
    is_public: bool = Field(False, validation_alias=AliasChoices("is_public", "isPublic"))

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _normalize_title(v)


class DocumentUpdate(BaseModel):
    """Частичное обновление; version - версия, которую видел клиент"""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[DocumentContent] = None
    is_public: Optional[bool] = Field(None, validation_alias=AliasChoices("is_public", "isPublic"))
    version: Optional[int] = Field(None, ge=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _normalize_title(v)

    def changes(self) -> Dict[str, Any]:
        """Только переданные поля (кроме version)"""
        return {
            name: getattr(self, name)
            for name in ("title", "content", "is_public")
            if name in self.model_fields_set and getattr(self, name) is not None
        }


class DocumentSummary(BaseModel):
    """Документ в списках и результатах поиска (без содержимого)"""
    id: uuid.UUID
    title: str
    is_public: bool
    version: int
    owner_id: uuid.UUID
    owner_nickname: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(DocumentSummary):
    content: DocumentContent


class DocumentEnvelope(BaseModel):
    document: DocumentResponse


class DocumentListResponse(BaseModel):
    documents: List[DocumentSummary]


class DocumentSearchResponse(BaseModel):
    documents: List[DocumentSummary]
    query: str


class SuccessResponse(BaseModel):
    success: bool = True


# Доступ к документу

class ShareRequest(BaseModel):
    """Выдача или изменение доступа по никнейму"""
    viewer_nickname: Optional[str] = Field(
        None, validation_alias=AliasChoices("viewerNickname", "viewer_nickname")
    )
    can_edit: bool = Field(False, validation_alias=AliasChoices("canEdit", "can_edit"))


class ShareResponse(BaseModel):
    document_id: uuid.UUID
    viewer_id: uuid.UUID
    viewer_nickname: Optional[str] = None
    can_edit: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShareEnvelope(BaseModel):
    share: ShareResponse


class ShareListResponse(BaseModel):
    shares: List[ShareResponse]


# Операции над блоками

class BlockInsertRequest(BaseModel):
    type: Literal["text", "image"]
    index: Optional[int] = Field(None, ge=0)
    version: Optional[int] = Field(None, ge=1)


class BlockUpdateRequest(BaseModel):
    content: Optional[str] = None
    metadata: Optional[BlockMetadata] = None
    type: Optional[str] = None
    version: Optional[int] = Field(None, ge=1)

    def block_fields(self) -> Dict[str, Any]:
        fields = {}
        if self.content is not None:
            fields["content"] = self.content
        if self.metadata is not None:
            fields["metadata"] = self.metadata.model_dump(exclude_none=True)
        if self.type is not None:
            fields["type"] = self.type
        return fields


class BlockMoveRequest(BaseModel):
    from_index: int = Field(..., ge=0, validation_alias=AliasChoices("from_index", "fromIndex"))
    to_index: int = Field(..., ge=0, validation_alias=AliasChoices("to_index", "toIndex"))
    version: Optional[int] = Field(None, ge=1)


class BlockEnvelope(BaseModel):
    document: DocumentResponse
    block: Block


class ImageAssetResponse(BaseModel):
    id: str
    document_id: uuid.UUID
    storage_path: str
    url: str
    position: Dict[str, float]
    size: Dict[str, float]


class ImageUploadResponse(BaseModel):
    document: DocumentResponse
    image: ImageAssetResponse
