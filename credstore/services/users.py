# credstore/services/users.py
"""
User data access on top of an AsyncSession.

Uniqueness of username/email is left to the database; the resulting
IntegrityError is re-raised unchanged after rolling back.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from credstore.models.user import User, UserStatus
from credstore.schemas.user import UserCreate

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
    """
    Create and commit a new user with the given password.

    Raises:
        sqlalchemy.exc.IntegrityError: username or email already taken
    """
    user = User(
        username=user_in.username,
        email=user_in.email,
        name=user_in.name,
    )
    user.set_password(user_in.password)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Rejected duplicate user %r", user_in.username)
        raise
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """
    Return the active user matching username and password, or None.

    A successful check updates last_login.
    """
    user = await get_user_by_username(db, username)
    if user is None or user.status != UserStatus.ACTIVE:
        return None
    if not user.validate_password(password):
        return None

    user.touch_login()
    await db.commit()
    return user


async def delete_user(db: AsyncSession, user: User) -> User:
    """Logical delete: the row stays, status becomes deleted."""
    user.mark_deleted()
    await db.commit()
    return user
