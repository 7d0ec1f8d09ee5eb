"""Permission names used by the books module."""

BOOKS_CREATE = "books.create"
BOOKS_EDIT = "books.edit"
BOOKS_DELETE = "books.delete"
BOOKS_LIST = "books.list"
BOOKS_VIEW = "books.view"

BOOK_PERMISSIONS: tuple[str, ...] = (
    BOOKS_CREATE,
    BOOKS_EDIT,
    BOOKS_DELETE,
    BOOKS_LIST,
    BOOKS_VIEW,
)
