from enum import Enum


class Role(str, Enum):
    """All roles carried in access tokens."""

    SUPER_ADMIN = "SUPER_ADMIN"
    MID_ADMIN = "MID_ADMIN"
    MANAGER = "MANAGER"
    AGENT = "AGENT"

    @property
    def is_platform_admin(self) -> bool:
        return self in {Role.SUPER_ADMIN, Role.MID_ADMIN}

    @classmethod
    def from_claim(cls, value):
        """Parse a role claim, returning None for anything unknown."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return None


ADMIN_ROLES = (Role.SUPER_ADMIN, Role.MID_ADMIN)
