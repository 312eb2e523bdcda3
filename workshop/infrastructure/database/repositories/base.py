"""
Shared pieces of the SQLModel repositories.
"""

from typing import Any

from sqlmodel import Session

from workshop.domain.shared.exceptions import DomainError, ErrorType


class DatabaseError(DomainError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, ErrorType.REPOSITORY, details)


class SqlRepository:
    """Base for repositories bound to one unit of work's session."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session
