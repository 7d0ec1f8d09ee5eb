"""Books module - the permission-protected catalog."""

from fastapi import APIRouter


router = APIRouter(prefix="/books", tags=["books"])

# Import routes to register them (must be after router is defined)
from bookshelf.modules.books import routes  # noqa: F401, E402


# Module metadata
__module__ = {
    "name": "books",
    "version": "1.0.0",
    "description": "Book catalog CRUD guarded by books.* permissions",
    "dependencies": ["users"],
}
