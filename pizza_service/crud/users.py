"""
Credential store — user lookup, registration, profile changes and removal.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_service.core.exceptions import Conflict, NotFound, Unauthenticated
from pizza_service.core.security import get_password_hash, verify_password
from pizza_service.models.order import Order
from pizza_service.models.user import Role, User, UserRole

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "email already registered"


async def get_by_id(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("unknown user")
    return user


async def get_by_email(db: AsyncSession, email: str) -> User:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFound("unknown user")
    return user


async def _email_taken(db: AsyncSession, email: str, exclude_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return (await db.execute(stmt)).first() is not None


async def create(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    roles: list[UserRole] | None = None,
) -> User:
    """Register a new user; every user gets the diner role unless told otherwise.

    The pre-check gives a friendly error in the common case; the unique
    constraint on ``users.email`` settles concurrent registrations.
    """
    email = email.strip().lower()
    if await _email_taken(db, email):
        raise Conflict(_DUPLICATE_EMAIL)

    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        roles=roles if roles is not None else [UserRole(role=Role.DINER.value)],
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(_DUPLICATE_EMAIL) from None
    await db.refresh(user, attribute_names=["roles"])
    logger.info("Registered user %s (%s)", user.id, user.email)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for a valid email/password pair.

    Unknown email and wrong password fail identically.
    """
    try:
        user = await get_by_email(db, email)
    except NotFound:
        raise Unauthenticated("invalid credentials") from None
    try:
        valid = verify_password(password, user.hashed_password)
    except ValueError:
        # bcrypt rejects some inputs (NUL bytes) outright
        valid = False
    if not valid:
        raise Unauthenticated("invalid credentials")
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> User:
    user = await get_by_id(db, user_id)

    if email is not None:
        email = email.strip().lower()
        if email != user.email and await _email_taken(db, email, exclude_id=user_id):
            raise Conflict(_DUPLICATE_EMAIL)
        user.email = email
    if name is not None:
        user.name = name
    if password is not None:
        user.hashed_password = get_password_hash(password)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict(_DUPLICATE_EMAIL) from None
    await db.refresh(user, attribute_names=["roles"])
    logger.info("Updated user %s", user_id)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Remove a user, their role rows (franchise admin links included),
    and detach their order history."""
    await get_by_id(db, user_id)
    try:
        await db.execute(update(Order).where(Order.diner_id == user_id).values(diner_id=None))
        await db.execute(delete(UserRole).where(UserRole.user_id == user_id))
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Deleted user %s", user_id)
