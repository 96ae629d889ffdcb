import uuid
from datetime import datetime
from typing import Optional, Any, Dict

from docnotes.domains.documents.blocks import DocumentContent, parse_content, text_projection

DEFAULT_TITLE = "Untitled"


class Document:
    """Сущность документа домена Documents"""

    def __init__(
        self,
        id: uuid.UUID,
        owner_id: uuid.UUID,
        title: str = DEFAULT_TITLE,
        content: Optional[DocumentContent] = None,
        is_public: bool = False,
        version: int = 1,
        owner_nickname: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.content = content if content is not None else DocumentContent()
        self.is_public = is_public
        self.version = version
        self.owner_nickname = owner_nickname
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    def get_search_text(self) -> str:
        return text_projection(self.content)

    @classmethod
    def create_document(
        cls,
        owner_id: uuid.UUID,
        title: Optional[str] = None,
        content: Any = None,
        is_public: bool = False
    ) -> "Document":
        """Создание нового документа: версия 1, пустой список блоков по умолчанию"""
        return cls(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=title or DEFAULT_TITLE,
            content=parse_content(content),
            is_public=is_public,
            version=1
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Document(id={self.id}, title={self.title}, version={self.version})"


class Share:
    """Доступ пользователя к чужому документу (чтение или редактирование)"""

    def __init__(
        self,
        document_id: uuid.UUID,
        viewer_id: uuid.UUID,
        can_edit: bool = False,
        viewer_nickname: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.document_id = document_id
        self.viewer_id = viewer_id
        self.can_edit = can_edit
        self.viewer_nickname = viewer_nickname
        self.created_at = created_at or datetime.utcnow()

    def __repr__(self) -> str:
        return f"Share(document_id={self.document_id}, viewer_id={self.viewer_id}, can_edit={self.can_edit})"


class ImageAsset:
    """Запись о загруженном изображении блока"""

    def __init__(
        self,
        id: str,
        document_id: uuid.UUID,
        storage_path: str,
        position: Dict[str, float],
        size: Dict[str, float],
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.document_id = document_id
        self.storage_path = storage_path
        self.position = position
        self.size = size
        self.created_at = created_at or datetime.utcnow()
