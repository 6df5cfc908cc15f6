"""Closed error taxonomy for every access operation.

Each :class:`ErrorKind` has exactly one display message and one HTTP status.
Both tables are checked for completeness at import time, so adding a kind
without wiring it up fails loudly instead of surfacing an unmapped error.

::

    AccessError
    ├── UNAUTHENTICATED      (401 - no valid session)
    ├── FORBIDDEN            (403 - insufficient role or not the owner)
    ├── NOT_FOUND            (404 - resource absent)
    ├── CONFLICT             (409 - uniqueness violation)
    ├── VALIDATION_FAILED    (422 - input violates a constraint)
    ├── INVALID_CREDENTIALS  (401 - generic sign-in failure)
    └── INTERNAL             (500 - storage or hashing failure)
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INTERNAL = "INTERNAL"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNAUTHENTICATED: "Authentication required",
    ErrorKind.FORBIDDEN: "You don't have permission to access this resource",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.CONFLICT: "Resource already exists",
    ErrorKind.VALIDATION_FAILED: "Invalid input",
    ErrorKind.INVALID_CREDENTIALS: "Invalid email or password",
    ErrorKind.INTERNAL: "Something went wrong, please try again later",
}

HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.INTERNAL: 500,
}

for _table in (ERROR_MESSAGES, HTTP_STATUS):
    _missing = set(ErrorKind) - set(_table)
    if _missing:
        raise RuntimeError(f"Unmapped error kinds: {sorted(k.value for k in _missing)}")


class AccessError(Exception):
    """Failure of an access operation, tagged with a stable :class:`ErrorKind`.

    ``message`` is safe to show to end users. ``detail`` carries optional
    machine-readable context (e.g. field errors) and never contains storage
    internals.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        *,
        detail: Any = None,
    ) -> None:
        self.kind = kind
        self.message = message or ERROR_MESSAGES[kind]
        self.detail = detail
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessError):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.kind, self.message))

    def __repr__(self) -> str:
        return f"AccessError({self.kind.value}, {self.message!r})"
