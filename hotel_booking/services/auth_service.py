"""
Authentication service handling user registration and login.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from hotel_booking.models.user import User
from hotel_booking.schemas.user import Token, UserCreate, UserLogin
from hotel_booking.core.config import get_settings
from hotel_booking.core.security import hash_password, verify_password, create_access_token
from hotel_booking.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Raises 409 if email or username already exists.
    """
    result = await db.execute(
        select(User).where(
            or_(User.email == user_data.email, User.username == user_data.username)
        )
    )
    clash = result.scalars().first()
    if clash:
        reason = "email_exists" if clash.email == user_data.email else "username_exists"
        logger.warning("registration_failed", reason=reason)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered" if reason == "email_exists" else "Username already taken",
        )

    user = User(
        email=user_data.email,
        username=user_data.username,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> Token:
    """
    Authenticate user and return a bearer token.
    Raises 401 if credentials are invalid, 403 if the account is deactivated.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    token = create_access_token(data={"sub": str(user.id)})
    logger.info("user_logged_in", user_id=user.id)
    return Token(access_token=token, expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)
