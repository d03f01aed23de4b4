"""
Authentication primitives: bcrypt password hashing and JWT access tokens.

Both services are instantiated once at import time from ``settings`` and
shared by the auth router and the ``get_current_user`` dependency.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings


@dataclass
class TokenPayload:
    """Decoded access token claims."""

    sub: str  # user id
    exp: datetime
    iat: datetime
    type: str


class PasswordHasher:
    """Password hashing and verification using bcrypt."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self._context.verify(plain_password, hashed_password)


class TokenService:
    """Issues and verifies signed JWT access tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._access_token_expire_minutes = access_token_expire_minutes

    def create_access_token(self, user_id: int | str) -> str:
        """
        Return an encoded access token for *user_id*.

        ``sub`` is always serialised as a string; python-jose rejects
        non-string subjects on decode.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self._access_token_expire_minutes),
            "type": "access",
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> TokenPayload | None:
        """
        Decode *token* and return its payload, or None when the signature,
        expiry, or token type is invalid.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            return None

        for field in ("sub", "exp", "type"):
            if field not in payload:
                return None
        if payload["type"] != "access":
            return None

        return TokenPayload(
            sub=payload["sub"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
            type=payload["type"],
        )


password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
token_service = TokenService(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.JWT_ALGORITHM,
    access_token_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
)
