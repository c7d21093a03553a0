"""SQLAlchemy models for knowledge base documents."""

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Document(Base, TimestampMixin):
    """An uploaded file and its extracted text.

    Every document belongs to exactly one owner; ``owner_id`` is written on
    insert and never updated. ``created_at`` doubles as the upload time.
    Chunks reference the document with ``ON DELETE CASCADE``.
    """

    __tablename__ = "knowledge_documents"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default_factory=uuid4, init=False)
    owner_id: Mapped[str] = mapped_column(String(255), index=True)
    title: Mapped[str] = mapped_column(String(255))
    filename: Mapped[str] = mapped_column(String(255))
    file_kind: Mapped[str] = mapped_column(String(16))
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    file_size: Mapped[int] = mapped_column(Integer, default=0)
