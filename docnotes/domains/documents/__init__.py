from docnotes.domains.documents.entities import Document, Share, ImageAsset
from docnotes.domains.documents.blocks import (
    Block, TextBlock, ImageBlock, BlockMetadata, DocumentContent
)
from docnotes.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentSummary, DocumentResponse, DocumentEnvelope,
    DocumentListResponse, DocumentSearchResponse, SuccessResponse,
    ShareRequest, ShareResponse, ShareEnvelope, ShareListResponse,
    BlockInsertRequest, BlockUpdateRequest, BlockMoveRequest, BlockEnvelope,
    ImageAssetResponse, ImageUploadResponse
)

__all__ = [
    "Document", "Share", "ImageAsset",
    "Block", "TextBlock", "ImageBlock", "BlockMetadata", "DocumentContent",
    "DocumentCreate", "DocumentUpdate", "DocumentSummary", "DocumentResponse", "DocumentEnvelope",
    "DocumentListResponse", "DocumentSearchResponse", "SuccessResponse",
    "ShareRequest", "ShareResponse", "ShareEnvelope", "ShareListResponse",
    "BlockInsertRequest", "BlockUpdateRequest", "BlockMoveRequest", "BlockEnvelope",
    "ImageAssetResponse", "ImageUploadResponse"
]
