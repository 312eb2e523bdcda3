"""Identity data consumed from the external user directory."""

from uuid import UUID

from workshop.domain.shared.base import ValueObject

from .enums import ActorRole
from .time_range import BreakTime


class UserProfile(ValueObject):
    """A workshop user as seen by the scheduling engine."""

    id: UUID
    name: str
    email: str | None = None
    role: ActorRole
    level: str | None = None
    break_times: tuple[BreakTime, ...] = ()
    is_active: bool = True

    @property
    def is_technician(self) -> bool:
        return self.role is ActorRole.TECHNICIAN


class Actor(ValueObject):
    """The authenticated caller of an engine operation."""

    id: UUID
    role: ActorRole

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "Actor":
        return cls(id=profile.id, role=profile.role)
