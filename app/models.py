from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.database import Base
from app.exceptions import InvalidArgumentError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleStatus(str, enum.Enum):
    """Closed set of article visibility states."""

    DRAFT = "draft"
    PUBLISHED = "published"


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships: lazy="noload" enforces explicit eager loading in services
    articles: Mapped[List["Article"]] = relationship(
        "Article",
        back_populates="user",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    article_likes: Mapped[List["ArticleLike"]] = relationship(
        "ArticleLike",
        back_populates="user",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    __tablename__ = "articles"

    __table_args__ = (
        # Published feed ordered by freshness (GET /articles)
        Index("ix_articles_status_updated_at", "status", "updated_at"),
        # Owner's published feed (GET /current/articles)
        Index("ix_articles_user_id_status_updated_at", "user_id", "status", "updated_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ArticleStatus] = mapped_column(
        Enum(
            ArticleStatus,
            name="article_status",
            values_callable=lambda e: [m.value for m in e],
            validate_strings=True,
        ),
        default=ArticleStatus.DRAFT,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Foreign key: the owner never changes after creation
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="articles", lazy="noload")
    likes: Mapped[List["ArticleLike"]] = relationship(
        "ArticleLike",
        back_populates="article",
        lazy="noload",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("title", "body")
    def _validate_text(self, key, value):
        if value is None or not str(value).strip():
            raise InvalidArgumentError(f"{key} must not be blank")
        return value

    @validates("status")
    def _validate_status(self, key, value):
        try:
            return ArticleStatus(value)
        except ValueError:
            raise InvalidArgumentError(f"'{value}' is not a valid status") from None

    @validates("user_id")
    def _validate_owner(self, key, value):
        if self.user_id is not None and value != self.user_id:
            raise InvalidArgumentError("article owner cannot be changed")
        return value


# ---------------------------------------------------------------------------
# ArticleLike
# ---------------------------------------------------------------------------
class ArticleLike(Base):
    __tablename__ = "article_likes"

    __table_args__ = (
        # At most one like per (user, article), enforced by the database
        UniqueConstraint("user_id", "article_id", name="uq_article_likes_user_id_article_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    article_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="article_likes", lazy="noload")
    article: Mapped["Article"] = relationship("Article", back_populates="likes", lazy="noload")
