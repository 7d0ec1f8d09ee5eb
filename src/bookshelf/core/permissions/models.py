"""Permission system database models.

This module defines the RBAC (Role-Based Access Control) models:
- Permission: A named, atomic authorizable action (e.g. "books.create")
- Role: A named set of permissions
- role_permissions: Junction table linking roles to permissions
- UserRole: Junction table linking users to roles

An actor's effective permission set is the union of the permissions of
all of its roles. There are no deny permissions and no precedence.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.core.constants import MAX_PERMISSION_NAME_LENGTH, MAX_ROLE_NAME_LENGTH
from bookshelf.core.database.base import Base, IntIdMixin, TimestampMixin


# Junction table for Role <-> Permission many-to-many relationship
role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Permission(Base, IntIdMixin, TimestampMixin):
    """Permission model.

    The name is the permission's identity: renaming a permission that is
    already referenced by routes silently changes what it authorizes.

    Attributes:
        name: Unique dotted name (e.g., "books.create", "books.delete")
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Permission({self.name})>"


class Role(Base, IntIdMixin, TimestampMixin):
    """Role model representing a named bundle of permissions.

    Attributes:
        name: Unique role name (e.g., "librarian", "reader")
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"


class UserRole(Base):
    """Junction table linking users to roles."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role_id={self.role_id})>"
