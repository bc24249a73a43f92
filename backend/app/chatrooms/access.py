"""Admin/user role map gating maintenance operations."""
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

# caller identity -> is administrator
AdminCheck = Callable[[str], bool]


class Role(str, Enum):
    """Role of a caller.

    Attributes:
        ADMIN: May run maintenance operations such as presence cleanup.
        USER: Everyone else, including callers never seen before.
    """
    ADMIN = "admin"
    USER = "user"


class RoleMap:
    """In-memory identity -> role assignments."""

    def __init__(self, admins: Optional[Iterable[str]] = None) -> None:
        self._roles: Dict[str, Role] = {}
        for identity in admins or ():
            self._roles[identity] = Role.ADMIN

    def role_of(self, identity: str) -> Role:
        return self._roles.get(identity, Role.USER)

    def is_admin(self, identity: str) -> bool:
        return self.role_of(identity) == Role.ADMIN
