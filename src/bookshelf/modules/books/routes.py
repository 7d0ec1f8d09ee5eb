"""Book API routes.

Every route declares its permission as a route dependency so the check
runs before the handler touches the catalog.
"""

from math import ceil

from fastapi import Depends, Query, Request, status

from bookshelf.config import settings
from bookshelf.core.permissions import require_permission
from bookshelf.modules.books import router
from bookshelf.modules.books.permissions import (
    BOOKS_CREATE,
    BOOKS_DELETE,
    BOOKS_EDIT,
    BOOKS_LIST,
    BOOKS_VIEW,
)
from bookshelf.modules.books.schemas import (
    BookCreate,
    BookEnvelope,
    BookPage,
    BookResponse,
    BookUpdate,
    MessageResponse,
    PaginationLinks,
    PaginationMeta,
)
from bookshelf.modules.books.services import BookSvc


def _page_url(request: Request, page: int) -> str:
    return str(request.url.include_query_params(page=page))


@router.get(
    "",
    response_model=BookPage,
    dependencies=[Depends(require_permission(BOOKS_LIST))],
    summary="List books",
    description="Paginated book listing. Requires the books.list permission.",
)
async def list_books(
    request: Request,
    service: BookSvc,
    page: int = Query(1, ge=1, description="Page number"),
) -> BookPage:
    """List books, one page at a time."""
    per_page = settings.books_per_page
    books, total = await service.list_books(page, per_page)

    last_page = max(1, ceil(total / per_page))
    first_item = (page - 1) * per_page + 1

    return BookPage(
        data=[BookResponse.model_validate(b) for b in books],
        links=PaginationLinks(
            first=_page_url(request, 1),
            last=_page_url(request, last_page),
            prev=_page_url(request, page - 1) if page > 1 else None,
            next=_page_url(request, page + 1) if page < last_page else None,
        ),
        meta=PaginationMeta(
            current_page=page,
            from_=first_item if books else None,
            last_page=last_page,
            path=str(request.url.remove_query_params("page")),
            per_page=per_page,
            to=first_item + len(books) - 1 if books else None,
            total=total,
        ),
    )


@router.post(
    "",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission(BOOKS_CREATE))],
    summary="Create book",
    description="Add a book to the catalog. Requires the books.create permission.",
)
async def create_book(data: BookCreate, service: BookSvc) -> BookEnvelope:
    """Create a book."""
    book = await service.create_book(data)
    return BookEnvelope(
        data=BookResponse.model_validate(book),
        message="Book created successfully",
    )


@router.get(
    "/{book_id}",
    response_model=BookEnvelope,
    response_model_exclude_none=True,
    dependencies=[Depends(require_permission(BOOKS_VIEW))],
    summary="Get book",
    description="Get a book by its ID. Requires the books.view permission.",
)
async def get_book(book_id: int, service: BookSvc) -> BookEnvelope:
    """Get a book by ID."""
    book = await service.get_book(book_id)
    return BookEnvelope(data=BookResponse.model_validate(book))


@router.put(
    "/{book_id}",
    response_model=BookEnvelope,
    dependencies=[Depends(require_permission(BOOKS_EDIT))],
    summary="Update book",
    description="Partially update a book. Requires the books.edit permission.",
)
async def update_book(book_id: int, data: BookUpdate, service: BookSvc) -> BookEnvelope:
    """Update a book."""
    book = await service.update_book(book_id, data)
    return BookEnvelope(
        data=BookResponse.model_validate(book),
        message="Book updated successfully",
    )


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_permission(BOOKS_DELETE))],
    summary="Delete book",
    description="Remove a book from the catalog. Requires the books.delete permission.",
)
async def delete_book(book_id: int, service: BookSvc) -> MessageResponse:
    """Delete a book."""
    await service.delete_book(book_id)
    return MessageResponse(message="Book deleted successfully")
