"""Pydantic schemas for book operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookshelf.core.constants import MAX_BOOK_TITLE_LENGTH


# ============================================================
# Request Schemas
# ============================================================


class BookCreate(BaseModel):
    """Schema for creating a book."""

    title: str = Field(..., min_length=1, max_length=MAX_BOOK_TITLE_LENGTH)
    description: str = Field(..., min_length=1)


class BookUpdate(BaseModel):
    """Schema for a partial book update.

    Omitted fields keep their current value; fields that are sent must
    not be empty or null.
    """

    title: str | None = Field(None, min_length=1, max_length=MAX_BOOK_TITLE_LENGTH)
    description: str | None = Field(None, min_length=1)

    # Defaults are not validated, so this only sees values the client sent
    @field_validator("title", "description")
    @classmethod
    def reject_null(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("must not be null")
        return value


# ============================================================
# Response Schemas
# ============================================================


class BookResponse(BaseModel):
    """Public representation of a book."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    created_at: datetime
    updated_at: datetime


class BookEnvelope(BaseModel):
    """Single book wrapped in ``data`` with an optional message."""

    data: BookResponse
    message: str | None = None


class MessageResponse(BaseModel):
    """Response carrying only a message."""

    message: str


class PaginationLinks(BaseModel):
    """Navigation links for a paginated listing."""

    first: str
    last: str
    prev: str | None = None
    next: str | None = None


class PaginationMeta(BaseModel):
    """Position of the current page within the full listing.

    ``from`` and ``to`` are 1-based item positions, None on an empty page.
    """

    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    from_: int | None = Field(None, alias="from")
    last_page: int
    path: str
    per_page: int
    to: int | None = None
    total: int


class BookPage(BaseModel):
    """One page of books."""

    data: list[BookResponse]
    links: PaginationLinks
    meta: PaginationMeta
