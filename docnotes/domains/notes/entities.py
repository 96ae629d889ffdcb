import uuid
from datetime import datetime
from typing import Optional


class Note:
    """Простая заметка: одна строка текста, без версий и совместного доступа"""

    def __init__(
        self,
        id: uuid.UUID,
        owner_id: uuid.UUID,
        title: str,
        content: str = "",
        image_path: Optional[str] = None,
        is_public: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.owner_id = owner_id
        self.title = title
        self.content = content
        self.image_path = image_path
        self.is_public = is_public
        self.created_at = created_at or datetime.utcnow()
        self.updated_at = updated_at or datetime.utcnow()

    @classmethod
    def create_note(
        cls,
        owner_id: uuid.UUID,
        title: str,
        content: str = "",
        image_path: Optional[str] = None,
        is_public: bool = False
    ) -> "Note":
        return cls(
            id=uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            image_path=image_path,
            is_public=is_public
        )

    def __repr__(self) -> str:
        return f"Note(id={self.id}, title={self.title}, is_public={self.is_public})"
