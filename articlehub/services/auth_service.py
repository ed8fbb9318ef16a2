"""
Auth service: registration, login and identity lookup for User.

Users are never cached; the identity lookup runs once per authenticated
request.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.exceptions import ConflictError, UnauthorizedError
from articlehub.models import User
from articlehub.schemas import LoginRequest, RegisterRequest
from articlehub.security import create_access_token, hash_password, verify_password
from articlehub.serializers import user_to_summary

logger = logging.getLogger(__name__)


def _auth_response(user: User) -> dict:
    return {
        "accessToken": create_access_token(user.id, user.email),
        "user": user_to_summary(user),
    }


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def register(db: AsyncSession, data: RegisterRequest) -> dict:
    """
    Create a user and return an access token for it.

    Raises ``ConflictError`` when the email is already registered.
    """
    if await get_user_by_email(db, data.email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    await db.flush()
    logger.info("User %s registered", user.id)
    return _auth_response(user)


async def login(db: AsyncSession, data: LoginRequest) -> dict:
    user = await get_user_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise UnauthorizedError("Invalid credentials")
    return _auth_response(user)
