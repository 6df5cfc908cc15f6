"""Authorization guard: a pure predicate over the caller's session state."""
import enum
from typing import Optional

from hydromon.access.principal import Principal
from hydromon.errors import AccessError, ErrorKind


class Capability(str, enum.Enum):
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


def require(principal: Optional[Principal], capability: Capability = Capability.AUTHENTICATED) -> Principal:
    """Return ``principal`` if it holds ``capability``.

    Raises UNAUTHENTICATED when there is no session and FORBIDDEN when the
    session exists but its role is insufficient.
    """
    if principal is None:
        raise AccessError(ErrorKind.UNAUTHENTICATED)
    if capability == Capability.ADMIN and not principal.is_admin:
        raise AccessError(ErrorKind.FORBIDDEN, "Admin access required")
    return principal
