"""Book database models."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.core.constants import MAX_BOOK_TITLE_LENGTH
from bookshelf.core.database.base import Base, IntIdMixin, TimestampMixin


class Book(Base, IntIdMixin, TimestampMixin):
    """A catalog entry.

    Attributes:
        title: Book title
        description: Free-form description
    """

    __tablename__ = "books"

    title: Mapped[str] = mapped_column(
        String(MAX_BOOK_TITLE_LENGTH),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title={self.title!r})>"
