"""Authentication API endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from hydromon.access import Principal
from hydromon.auth import create_access_token, get_principal
from hydromon.config import get_settings
from hydromon.database import get_db
from hydromon.schemas.users import (
    ChangePasswordRequest,
    DeleteAccountRequest,
    FederatedSignIn,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionResponse,
    SessionUser,
    TokenResponse,
    UserResponse,
)
from hydromon.services import credentials

router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address)
settings = get_settings()


@router.post("/register", response_model=UserResponse, status_code=201)
@limiter.limit(settings.login_rate_limit)
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """Create a new user account."""
    return credentials.register(db, data)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and issue an access token."""
    user = credentials.verify_login(db, data)
    return TokenResponse(access_token=create_access_token(user), user=user)


@router.post("/authorize", response_model=Optional[SessionUser])
@limiter.limit(settings.login_rate_limit)
def authorize(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    """Credentials callback for the identity provider: session user or null."""
    return credentials.authorize_credentials(db, data.email, data.password)


@router.post("/federated", response_model=TokenResponse)
def federated(data: FederatedSignIn, db: Session = Depends(get_db)):
    """Sign in with an account already verified by an external provider."""
    user = credentials.federated_sign_in(db, data)
    return TokenResponse(access_token=create_access_token(user), user=user)


@router.get("/session", response_model=SessionResponse)
def session(db: Session = Depends(get_db), principal: Optional[Principal] = Depends(get_principal)):
    return credentials.get_session(db, principal)


@router.post("/password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return credentials.change_password(db, principal, data)


@router.post("/account/delete", response_model=MessageResponse)
def delete_account(
    data: DeleteAccountRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return credentials.delete_account(db, principal, data)
