"""
User service: registration and credential checks for the User aggregate.

Email uniqueness is enforced at the database level (unique constraint in
the schema); the router is responsible for translating integrity errors
into 409 responses.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.schemas import SignUpRequest
from app.security import password_hasher

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict:
    """Serialise a User ORM instance to a plain dict."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
    }


async def create_user(db: AsyncSession, data: SignUpRequest) -> User:
    """Create a new user with a bcrypt-hashed password."""
    user = User(
        name=data.name,
        email=data.email,
        hashed_password=password_hasher.hash(data.password),
    )
    db.add(user)
    await db.flush()
    logger.info("User %s signed up", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """
    Return the user matching *email* and *password*, or None.

    Unknown email and wrong password are not distinguished.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None or not password_hasher.verify(password, user.hashed_password):
        return None
    return user
