"""Book service for catalog business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from bookshelf.core.errors import NotFoundError
from bookshelf.modules.books.models import Book
from bookshelf.modules.books.repos import BookRepo
from bookshelf.modules.books.schemas import BookCreate, BookUpdate


logger = structlog.get_logger()


class BookService:
    """Service for book CRUD operations.

    Authorization happens before any method here is called.
    """

    def __init__(self, repo: BookRepo) -> None:
        self.repo = repo

    async def create_book(self, data: BookCreate) -> Book:
        """Create a book from validated input."""
        book = await self.repo.create(Book(title=data.title, description=data.description))
        logger.info("book_created", book_id=book.id)
        return book

    async def get_book(self, book_id: int) -> Book:
        """Get a book by ID.

        Raises:
            NotFoundError: If the book does not exist
        """
        book = await self.repo.get_by_id(book_id)
        if not book:
            raise NotFoundError("book", book_id)
        return book

    async def list_books(self, page: int, per_page: int) -> tuple[list[Book], int]:
        """Return one page of books and the total count."""
        return await self.repo.list_page(page, per_page)

    async def update_book(self, book_id: int, data: BookUpdate) -> Book:
        """Apply a partial update to a book.

        Raises:
            NotFoundError: If the book does not exist
        """
        book = await self.get_book(book_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(book, field, value)

        book = await self.repo.update(book)
        logger.info("book_updated", book_id=book.id)
        return book

    async def delete_book(self, book_id: int) -> None:
        """Delete a book.

        Raises:
            NotFoundError: If the book does not exist
        """
        book = await self.get_book(book_id)
        await self.repo.delete(book)
        logger.info("book_deleted", book_id=book_id)


BookSvc = Annotated[BookService, Depends(BookService)]
