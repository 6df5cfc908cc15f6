"""Credential lifecycle: registration, sign-in, password change, deletion.

Sign-in failures are deliberately uniform: an unknown email, an account
without a password and a wrong password all raise the same
INVALID_CREDENTIALS error. The identity-provider callback
(:func:`authorize_credentials`) goes through the same :func:`verify_login`
policy as the login endpoint.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hydromon.access import Principal, guarded, public, validate_input
from hydromon.audit import log_action
from hydromon.auth import hash_password, verify_password
from hydromon.errors import AccessError, ErrorKind
from hydromon.models import Account, Role, User
from hydromon.schemas.users import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    FederatedSignIn,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionResponse,
    SessionUser,
    UserResponse,
)

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _load_self(db: Session, principal: Principal) -> User:
    user = db.get(User, principal.id)
    if user is None:
        raise AccessError(ErrorKind.NOT_FOUND, "User not found")
    return user


@public
def register(db: Session, data: Union[RegisterRequest, Payload]) -> UserResponse:
    data = validate_input(RegisterRequest, data)
    email = normalize_email(data.email)
    if find_user_by_email(db, email) is not None:
        raise AccessError(ErrorKind.CONFLICT, "Email is already registered")

    user = User(
        email=email,
        hashed_password=hash_password(data.password),
        name=data.name or email.split("@")[0],
        role=Role.USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise AccessError(ErrorKind.CONFLICT, "Email is already registered") from exc
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return UserResponse.model_validate(user)


@public
def verify_login(db: Session, data: Union[LoginRequest, Payload]) -> UserResponse:
    data = validate_input(LoginRequest, data)
    user = find_user_by_email(db, data.email)
    if not verify_password(data.password, user.hashed_password if user else None):
        raise AccessError(ErrorKind.INVALID_CREDENTIALS)

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("User %s signed in", user.id)
    return UserResponse.model_validate(user)


def authorize_credentials(db: Session, email: Any, password: Any) -> Optional[dict]:
    """Identity-provider callback: ``{id, name, email, image}`` or ``None``."""
    if not isinstance(email, str) or not isinstance(password, str):
        return None
    try:
        user = verify_login(db, {"email": email, "password": password})
    except AccessError as exc:
        if exc.kind == ErrorKind.INTERNAL:
            raise
        logger.info("Credential authorization rejected: %s", exc.kind.value)
        return None
    return SessionUser.model_validate(user.model_dump()).model_dump()


@public
def federated_sign_in(db: Session, data: Union[FederatedSignIn, Payload]) -> UserResponse:
    """Sign in through an external provider, creating a passwordless user once.

    An existing email that was registered another way is not linked
    automatically.
    """
    data = validate_input(FederatedSignIn, data)
    account = (
        db.query(Account)
        .filter(
            Account.provider == data.provider,
            Account.provider_account_id == data.provider_account_id,
        )
        .first()
    )
    if account is not None:
        user = account.user
    else:
        email = normalize_email(data.email)
        if find_user_by_email(db, email) is not None:
            raise AccessError(
                ErrorKind.CONFLICT,
                "Email is already registered with a different sign-in method",
            )
        user = User(
            email=email,
            name=data.name or email.split("@")[0],
            image=data.image,
            role=Role.USER,
            email_verified=datetime.now(timezone.utc),
        )
        user.accounts.append(
            Account(provider=data.provider, provider_account_id=data.provider_account_id)
        )
        db.add(user)

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("User %s signed in via %s", user.id, data.provider)
    return UserResponse.model_validate(user)


@guarded()
def get_session(db: Session, principal: Principal) -> SessionResponse:
    return SessionResponse(user=SessionUser.model_validate(_load_self(db, principal)))


@guarded()
def change_password(
    db: Session,
    principal: Principal,
    data: Union[ChangePasswordRequest, Payload],
) -> MessageResponse:
    # confirmation and policy are checked here, before any hashing
    data = validate_input(ChangePasswordRequest, data)
    user = _load_self(db, principal)
    if not verify_password(data.current_password, user.hashed_password):
        raise AccessError(ErrorKind.INVALID_CREDENTIALS, "Current password is incorrect")

    user.hashed_password = hash_password(data.new_password)
    log_action(db, principal, "user.password_change", "user", user.id)
    db.commit()
    logger.info("User %s changed password", user.id)
    return MessageResponse(message="Password changed")


@guarded()
def delete_account(
    db: Session,
    principal: Principal,
    data: Union[DeleteAccountRequest, Payload],
) -> MessageResponse:
    """Irreversible; owned devices, readings and rules go with the user."""
    data = validate_input(DeleteAccountRequest, data)
    user = _load_self(db, principal)
    if not verify_password(data.password, user.hashed_password):
        raise AccessError(ErrorKind.INVALID_CREDENTIALS, "Password is incorrect")

    log_action(db, principal, "user.delete", "user", user.id, {"email": user.email})
    db.flush()
    db.delete(user)
    db.commit()
    logger.info("User %s deleted their account", principal.id)
    return MessageResponse(message="Account deleted")
