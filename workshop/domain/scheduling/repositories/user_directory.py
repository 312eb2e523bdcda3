"""
User Directory Interface

Users are managed outside the engine. The directory resolves ids to names,
roles and configured break times.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from ..value_objects.user_profile import UserProfile


class UserDirectory(ABC):
    @abstractmethod
    def get(self, user_id: UUID) -> UserProfile | None:
        pass

    @abstractmethod
    def list_technicians(self) -> list[UserProfile]:
        """Active technicians, in a stable order."""
