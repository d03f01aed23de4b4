"""
Authentication dependencies.

``get_current_user`` guards routes that require a signed-in user;
``get_optional_user`` is for routes that are public but behave
differently for the owner (e.g. reading one's own draft).
"""
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models import User
from app.security import token_service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def _resolve_user(db: AsyncSession, authorization: str) -> User:
    token = _extract_bearer(authorization)
    if token is None:
        raise _unauthorized("Not authenticated")

    payload = token_service.verify_access_token(token)
    if payload is None or not payload.sub.isdigit():
        raise _unauthorized("Invalid or expired token")

    result = await db.execute(select(User).where(User.id == int(payload.sub)))
    user = result.scalar_one_or_none()
    if user is None:
        raise _unauthorized("User not found")
    return user


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the requester from the bearer token or fail with 401."""
    if authorization is None:
        raise _unauthorized("Not authenticated")
    return await _resolve_user(db, authorization)


async def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Resolve the requester if an Authorization header is present.

    Anonymous requests yield None; a header carrying a bad token is still
    rejected so that clients notice expired credentials.
    """
    if authorization is None:
        return None
    return await _resolve_user(db, authorization)


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
