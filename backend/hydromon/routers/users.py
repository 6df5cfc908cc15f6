"""Profile and admin user-directory endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hydromon.access import Principal
from hydromon.auth import get_principal
from hydromon.database import get_db
from hydromon.schemas.users import UpdateProfileRequest, UserPage, UserResponse
from hydromon.services import users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserPage)
def list_users(
    page: int = Query(1),
    limit: int = Query(users.DEFAULT_PAGE_SIZE),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    """List users (admin only)."""
    return users.list_users(db, principal, page=page, limit=limit, search=search)


@router.get("/me", response_model=UserResponse)
def get_me(db: Session = Depends(get_db), principal: Optional[Principal] = Depends(get_principal)):
    return users.get_profile(db, principal)


@router.patch("/me", response_model=UserResponse)
def update_me(
    data: UpdateProfileRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return users.update_profile(db, principal, data)
