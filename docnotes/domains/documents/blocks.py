"""
Блочная модель содержимого документа.

Содержимое документа - упорядоченный список блоков (текст или изображение).
Порядок в списке определяет порядок отображения. Все операции возвращают
новый список и не изменяют исходный.
"""

import uuid
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from docnotes.core.errors import NotFoundError, ValidationFailedError

DEFAULT_IMAGE_POSITION = {"x": 0, "y": 0}
DEFAULT_IMAGE_SIZE = {"width": 300, "height": 200}


class Position(BaseModel):
    x: float = 0
    y: float = 0


class Size(BaseModel):
    width: float = Field(DEFAULT_IMAGE_SIZE["width"], ge=0)
    height: float = Field(DEFAULT_IMAGE_SIZE["height"], ge=0)


class BlockMetadata(BaseModel):
    """Метаданные блока изображения"""
    position: Optional[Position] = None
    size: Optional[Size] = None
    alt: Optional[str] = None


class TextBlock(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, max_length=64)
    type: Literal["text"] = "text"
    content: str = ""


class ImageBlock(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, max_length=64)
    type: Literal["image"] = "image"
    content: str = ""
    metadata: BlockMetadata = Field(
        default_factory=lambda: BlockMetadata(
            position=Position(**DEFAULT_IMAGE_POSITION), size=Size(**DEFAULT_IMAGE_SIZE)
        )
    )

    @field_validator("content")
    @classmethod
    def validate_reference(cls, v):
        if v and not is_storage_reference(v):
            raise ValueError("Image content must be a storage reference")
        return v


Block = Annotated[Union[TextBlock, ImageBlock], Field(discriminator="type")]


class DocumentContent(BaseModel):
    """Содержимое документа: {"blocks": [...]}"""
    model_config = ConfigDict(extra="forbid")

    blocks: List[Block] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self):
        seen = set()
        for block in self.blocks:
            if block.id in seen:
                raise ValueError(f"Duplicate block id: {block.id}")
            seen.add(block.id)
        return self


_block_adapter = TypeAdapter(Block)


def is_storage_reference(value: str) -> bool:
    """Ссылка на объект хранилища: http(s)-URL или путь без '..'"""
    if any(ch.isspace() for ch in value) or "\\" in value:
        return False

    parsed = urlparse(value)
    if parsed.scheme:
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    return ".." not in parsed.path.split("/")


def generate_block_id() -> str:
    return f"block_{uuid.uuid4().hex}"


def parse_content(raw: Any) -> DocumentContent:
    """Десериализация и проверка содержимого; None - пустой документ"""
    if raw is None:
        return DocumentContent()
    if isinstance(raw, DocumentContent):
        return raw
    try:
        return DocumentContent.model_validate(raw)
    except ValueError as e:
        raise ValidationFailedError(f"Invalid document content: {e}") from e


def dump_content(content: DocumentContent) -> Dict[str, Any]:
    return content.model_dump(mode="json", exclude_none=True)


def text_projection(content: DocumentContent) -> str:
    """Текст всех текстовых блоков (для поиска)"""
    return "\n".join(block.content for block in content.blocks if block.type == "text" and block.content)


def find_block(blocks: List[Block], block_id: str) -> Tuple[int, Block]:
    for index, block in enumerate(blocks):
        if block.id == block_id:
            return index, block
    raise NotFoundError("Block not found")


def insert_block(
    blocks: List[Block],
    block_type: str,
    at_index: Optional[int] = None
) -> Tuple[List[Block], Block]:
    """Новый блок с уникальным id; без индекса - в конец списка"""
    if block_type == "text":
        new_block = TextBlock(id=generate_block_id())
    elif block_type == "image":
        new_block = ImageBlock(id=generate_block_id())
    else:
        raise ValidationFailedError(f"Unknown block type: {block_type}")

    if at_index is None:
        at_index = len(blocks)
    if not 0 <= at_index <= len(blocks):
        raise ValidationFailedError("Block index out of range")

    new_blocks = list(blocks)
    new_blocks.insert(at_index, new_block)
    return new_blocks, new_block


def update_block(blocks: List[Block], block_id: str, fields: Dict[str, Any]) -> List[Block]:
    """Слияние полей в блок; тип блока после создания не меняется"""
    index, block = find_block(blocks, block_id)

    if "type" in fields and fields["type"] != block.type:
        raise ValidationFailedError("Block type cannot be changed")
    if "id" in fields and fields["id"] != block.id:
        raise ValidationFailedError("Block id cannot be changed")

    merged = block.model_dump(exclude_none=True)
    for key, value in fields.items():
        if key == "metadata" and value is not None and isinstance(merged.get("metadata"), dict):
            merged["metadata"] = {**merged["metadata"], **value}
        elif value is not None:
            merged[key] = value

    try:
        updated = _block_adapter.validate_python(merged)
    except ValueError as e:
        raise ValidationFailedError(f"Invalid block: {e}") from e

    new_blocks = list(blocks)
    new_blocks[index] = updated
    return new_blocks


def delete_block(blocks: List[Block], block_id: str) -> List[Block]:
    index, _ = find_block(blocks, block_id)
    return blocks[:index] + blocks[index + 1:]


def move_block(blocks: List[Block], from_index: int, to_index: int) -> List[Block]:
    """Перенос одного блока; относительный порядок остальных сохраняется"""
    if not 0 <= from_index < len(blocks) or not 0 <= to_index < len(blocks):
        raise ValidationFailedError("Block index out of range")

    new_blocks = list(blocks)
    moved = new_blocks.pop(from_index)
    new_blocks.insert(to_index, moved)
    return new_blocks


def check_types_unchanged(old: DocumentContent, new: DocumentContent) -> None:
    """Блок с тем же id не может сменить тип при сохранении документа"""
    old_types = {block.id: block.type for block in old.blocks}
    for block in new.blocks:
        previous = old_types.get(block.id)
        if previous is not None and previous != block.type:
            raise ValidationFailedError(f"Block type cannot be changed: {block.id}")
