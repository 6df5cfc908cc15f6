"""Decorators that turn a plain function into an access operation.

An operation is ``guard -> body -> error normalization``. Ownership checks
happen inside the body through :mod:`hydromon.access.ownership`. Anything
other than an :class:`AccessError` escaping the body is logged, the session
is rolled back and the caller sees a bare INTERNAL error.
"""
import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from hydromon.access.guard import Capability, require
from hydromon.errors import AccessError, ErrorKind

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
M = TypeVar("M", bound=BaseModel)


@contextmanager
def persistence_boundary(db: Session, operation: str):
    try:
        yield
    except AccessError:
        raise
    except Exception as exc:
        logger.exception("Operation %s failed", operation)
        db.rollback()
        raise AccessError(ErrorKind.INTERNAL) from exc


def _operation_name(fn: Callable[..., Any]) -> str:
    return f"{fn.__module__.rsplit('.', 1)[-1]}.{fn.__name__}"


def guarded(capability: Capability = Capability.AUTHENTICATED) -> Callable[[F], F]:
    """Operation taking ``(db, principal, ...)``; the guard runs before the body."""

    def decorator(fn: F) -> F:
        name = _operation_name(fn)

        @wraps(fn)
        def wrapper(db: Session, principal, *args, **kwargs):
            principal = require(principal, capability)
            with persistence_boundary(db, name):
                return fn(db, principal, *args, **kwargs)

        wrapper.capability = capability
        return wrapper  # type: ignore[return-value]

    return decorator


def public(fn: F) -> F:
    """Operation reachable without a session, e.g. registration and sign-in."""
    name = _operation_name(fn)

    @wraps(fn)
    def wrapper(db: Session, *args, **kwargs):
        with persistence_boundary(db, name):
            return fn(db, *args, **kwargs)

    wrapper.capability = None
    return wrapper  # type: ignore[return-value]


def describe_errors(errors: list) -> str:
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "__root__")
    message = first.get("msg", "Invalid input").removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


def validate_input(schema: Type[M], data: M | Mapping[str, Any]) -> M:
    """Coerce RPC input into ``schema``; violations become VALIDATION_FAILED."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise AccessError(ErrorKind.VALIDATION_FAILED, describe_errors(errors), detail=errors) from exc
