from typing import List

from pydantic import BaseModel, Field

MODERATOR_ROLES = frozenset({"admin", "moderator"})


class Actor(BaseModel):
    """The authenticated caller, as asserted by the access token."""

    user_id: str
    roles: List[str] = Field(default_factory=lambda: ["user"])

    @property
    def is_moderator(self) -> bool:
        return any(role in MODERATOR_ROLES for role in self.roles)
