"""Book repository for database operations."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy import func, select

from bookshelf.api.dependencies import DBSession
from bookshelf.modules.books.models import Book


class BookRepository:
    """Repository for Book database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, book: Book) -> Book:
        """Create a new book.

        Args:
            book: Book instance to create

        Returns:
            The created book with ID and timestamps populated
        """
        self.session.add(book)
        await self.session.flush()
        await self.session.refresh(book)
        return book

    async def get_by_id(self, book_id: int) -> Book | None:
        """Get a book by ID.

        Args:
            book_id: The book's id

        Returns:
            Book if found, None otherwise
        """
        result = await self.session.execute(select(Book).where(Book.id == book_id))
        return result.scalar_one_or_none()

    async def list_page(self, page: int = 1, per_page: int = 10) -> tuple[list[Book], int]:
        """List books with pagination, oldest first.

        Args:
            page: Page number (1-indexed)
            per_page: Number of items per page

        Returns:
            Tuple of (books list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(Book))
        total = count_result.scalar_one()

        offset = (page - 1) * per_page
        stmt = select(Book).order_by(Book.id).offset(offset).limit(per_page)
        result = await self.session.execute(stmt)
        books = list(result.scalars().all())

        return books, total

    async def update(self, book: Book) -> Book:
        """Flush pending changes to a book and reload it.

        Args:
            book: Book instance with updated fields

        Returns:
            The updated book
        """
        await self.session.flush()
        await self.session.refresh(book)
        return book

    async def delete(self, book: Book) -> None:
        """Delete a book.

        Args:
            book: Book instance to delete
        """
        await self.session.delete(book)
        await self.session.flush()


# Type alias for dependency injection
BookRepo = Annotated[BookRepository, Depends(BookRepository)]
