"""
Auth endpoints — register, login, logout and self-service account management.
"""

import logging

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.api.v1.deps import get_current_user, get_db, get_identity, get_token_payload
from pizza_service.core.config import settings
from pizza_service.core.permissions import Action, Target, authorize
from pizza_service.core.security import create_access_token
from pizza_service.crud import tokens as token_crud
from pizza_service.crud import users as user_crud
from pizza_service.models.user import User
from pizza_service.schemas.base import MessageResponse
from pizza_service.schemas.token import Identity, TokenPayload
from pizza_service.schemas.user import (
    AuthResponse,
    LoginRequest,
    RoleRead,
    UserCreate,
    UserRead,
    UserUpdate,
)

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> str:
    roles = [
        RoleRead.model_validate(r).model_dump(mode="json", by_alias=True) for r in user.roles
    ]
    return create_access_token(user.id, roles)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(user=UserRead.model_validate(user), token=_issue_token(user))


@router.post("", response_model=AuthResponse)
async def register(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Create a diner account and log it in."""
    user = await user_crud.create(db, body.name, body.email, body.password)
    return _auth_response(user)


@router.put("", response_model=AuthResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Exchange email + password for a session token."""
    user = await user_crud.authenticate(db, body.email, body.password)
    logger.info("User %s logged in", user.id)
    return _auth_response(user)


@router.delete("", response_model=MessageResponse)
async def logout(
    payload: TokenPayload = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Revoke the presented token; other sessions of the user stay valid."""
    await token_crud.revoke_token(db, payload)
    logger.info("User %s logged out", payload.sub)
    return MessageResponse(message="logout successful")


@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    body: UserUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> User:
    authorize(identity, Action.UPDATE_USER, Target(user_id=user_id))
    return await user_crud.update_user(
        db, user_id, name=body.name, email=body.email, password=body.password
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    authorize(identity, Action.DELETE_USER, Target(user_id=user_id))
    await user_crud.delete_user(db, user_id)
    return MessageResponse(message="user deleted")
