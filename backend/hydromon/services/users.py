"""Profile operations and the admin user directory."""
import math
from typing import Any, Mapping, Optional, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hydromon.access import Capability, Principal, guarded, validate_input
from hydromon.errors import AccessError, ErrorKind
from hydromon.models import User
from hydromon.schemas.users import Pagination, UpdateProfileRequest, UserPage, UserResponse
from hydromon.services.credentials import find_user_by_email, normalize_email
from hydromon.services.limits import check_limit

DEFAULT_PAGE_SIZE = 10


def escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@guarded()
def get_profile(db: Session, principal: Principal) -> UserResponse:
    user = db.get(User, principal.id)
    if user is None:
        raise AccessError(ErrorKind.NOT_FOUND, "User not found")
    return UserResponse.model_validate(user)


@guarded()
def update_profile(
    db: Session,
    principal: Principal,
    data: Union[UpdateProfileRequest, Mapping[str, Any]],
) -> UserResponse:
    data = validate_input(UpdateProfileRequest, data)
    user = db.get(User, principal.id)
    if user is None:
        raise AccessError(ErrorKind.NOT_FOUND, "User not found")

    if data.email:
        email = normalize_email(data.email)
        existing = find_user_by_email(db, email)
        if existing is not None and existing.id != user.id:
            raise AccessError(ErrorKind.CONFLICT, "Email is already registered")
        user.email = email
    if data.name:
        user.name = data.name

    try:
        db.commit()
    except IntegrityError as exc:
        # another account claimed the email between the check and the commit
        db.rollback()
        raise AccessError(ErrorKind.CONFLICT, "Email is already registered") from exc
    db.refresh(user)
    return UserResponse.model_validate(user)


@guarded(Capability.ADMIN)
def list_users(
    db: Session,
    principal: Principal,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    search: Optional[str] = None,
) -> UserPage:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise AccessError(ErrorKind.VALIDATION_FAILED, "page must be a positive integer")
    check_limit(limit)

    query = db.query(User)
    if search:
        pattern = f"%{escape_like(search.strip())}%"
        query = query.filter(
            or_(User.email.ilike(pattern, escape="\\"), User.name.ilike(pattern, escape="\\"))
        )

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.email)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return UserPage(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )
