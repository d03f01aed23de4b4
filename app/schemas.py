from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models import ArticleStatus


def _unwrap_article(data):
    # Accept both {"title": ...} and the wrapped {"article": {"title": ...}} form.
    if isinstance(data, dict) and isinstance(data.get("article"), dict):
        return data["article"]
    return data


def _require_text(value: str) -> str:
    # Presence is checked on the trimmed text; the stored value is left as sent.
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# --- User ---

class UserSummary(BaseModel):
    """Embedded author in the article list view."""

    id: int
    name: str
    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Embedded author in the article detail view and auth responses."""

    email: str


# --- Auth ---

class SignUpRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=72)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class SignInRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(max_length=300)
    body: str
    # Absent status falls back to draft; an unknown value is rejected.
    status: ArticleStatus = ArticleStatus.DRAFT

    @model_validator(mode="before")
    @classmethod
    def unwrap_article(cls, data):
        return _unwrap_article(data)

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class ArticleUpdate(BaseModel):
    title: str | None = Field(None, max_length=300)
    body: str | None = None
    status: ArticleStatus | None = None

    @model_validator(mode="before")
    @classmethod
    def unwrap_article(cls, data):
        return _unwrap_article(data)

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("must not be null")
        return _require_text(v)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: ArticleStatus | None) -> ArticleStatus:
        if v is None:
            raise ValueError("must not be null")
        return v


class ArticleListItem(BaseModel):
    id: int
    title: str
    updated_at: datetime
    user: UserSummary


class ArticleDetail(BaseModel):
    id: int
    title: str
    body: str
    status: ArticleStatus
    updated_at: datetime
    user: UserResponse


# --- Likes ---

class LikeState(BaseModel):
    article_id: int
    liked: bool
    likes_count: int
