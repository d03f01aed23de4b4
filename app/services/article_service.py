"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Visibility and ownership are expressed as WHERE clauses on a single
  lookup (``_find_article``).  A row that does not exist and a row the
  requester may not touch are therefore indistinguishable: both yield
  None, which the router turns into one 404.
- The owner is always eager-loaded with ``joinedload`` because every
  projection embeds it.
- ``updated_at`` is assigned explicitly on each effective write so ordering by
  freshness does not depend on the ORM's ``onupdate`` hook firing.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload
from sqlalchemy.orm.attributes import set_committed_value

from app.models import Article, ArticleStatus, User, utcnow
from app.schemas import ArticleCreate, ArticleUpdate

logger = logging.getLogger(__name__)

# Newest-updated first; equal timestamps keep insertion order.
_FEED_ORDER = (Article.updated_at.desc(), Article.id.asc())


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _article_to_dict(article: Article) -> dict:
    """Serialise an Article ORM instance to a plain dict (list view)."""
    return {
        "id": article.id,
        "title": article.title,
        "updated_at": article.updated_at,
        "user": {
            "id": article.user.id,
            "name": article.user.name,
        },
    }


def _article_detail_to_dict(article: Article) -> dict:
    """Serialise an Article ORM instance to a plain dict (detail view)."""
    return {
        "id": article.id,
        "title": article.title,
        "body": article.body,
        "status": article.status.value,
        "updated_at": article.updated_at,
        "user": {
            "id": article.user.id,
            "name": article.user.name,
            "email": article.user.email,
        },
    }


# ---------------------------------------------------------------------------
# Authorization-scoped lookup
# ---------------------------------------------------------------------------

async def _find_article(
    db: AsyncSession,
    article_id: int,
    requester: User | None,
    owner_only: bool,
) -> Article | None:
    """
    Return the article *article_id* if *requester* may access it.

    ``owner_only=True`` (update/delete) matches only the requester's own
    rows.  Otherwise published rows match for anyone and drafts match
    for their owner.
    """
    q = select(Article).where(Article.id == article_id).options(joinedload(Article.user))

    if owner_only:
        if requester is None:
            return None
        q = q.where(Article.user_id == requester.id)
    elif requester is None:
        q = q.where(Article.status == ArticleStatus.PUBLISHED)
    else:
        q = q.where(
            or_(Article.status == ArticleStatus.PUBLISHED, Article.user_id == requester.id)
        )

    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def find_readable_article(
    db: AsyncSession, article_id: int, requester: User | None
) -> Article | None:
    """Public entry point for other services that act on readable articles."""
    return await _find_article(db, article_id, requester, owner_only=False)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def get_published_articles(db: AsyncSession) -> list[dict]:
    """Return every published article, newest-updated first."""
    q = (
        select(Article)
        .where(Article.status == ArticleStatus.PUBLISHED)
        .options(joinedload(Article.user))
        .order_by(*_FEED_ORDER)
    )
    result = await db.execute(q)
    return [_article_to_dict(a) for a in result.unique().scalars().all()]


async def get_user_published_articles(db: AsyncSession, user: User) -> list[dict]:
    """
    Return *user*'s own published articles, newest-updated first.

    Their drafts are deliberately excluded.
    """
    q = (
        select(Article)
        .where(Article.user_id == user.id, Article.status == ArticleStatus.PUBLISHED)
        .options(joinedload(Article.user))
        .order_by(*_FEED_ORDER)
    )
    result = await db.execute(q)
    return [_article_to_dict(a) for a in result.unique().scalars().all()]


async def get_article(
    db: AsyncSession, article_id: int, requester: User | None = None
) -> dict | None:
    """
    Return the detail dict for *article_id*.

    Returns None when the article does not exist, or is a draft the
    requester does not own.
    """
    article = await find_readable_article(db, article_id, requester)
    if article is None:
        return None
    return _article_detail_to_dict(article)


async def create_article(db: AsyncSession, user: User, data: ArticleCreate) -> dict:
    """Create a new article owned by *user* and return its detail dict."""
    now = utcnow()
    article = Article(
        title=data.title,
        body=data.body,
        status=data.status,
        user_id=user.id,
        created_at=now,
        updated_at=now,
    )
    db.add(article)
    await db.flush()

    set_committed_value(article, "user", user)
    logger.info("Article %s created by user %s (%s)", article.id, user.id, article.status.value)
    return _article_detail_to_dict(article)


async def update_article(
    db: AsyncSession, user: User, article_id: int, data: ArticleUpdate
) -> dict | None:
    """
    Partially update one of *user*'s articles and return its detail dict.

    Returns None when the article does not exist or belongs to someone
    else.  Only fields explicitly set in the request payload are modified
    (``model_dump(exclude_unset=True)``), and ``updated_at`` moves only when
    one of them differs from the stored value.
    """
    article = await _find_article(db, article_id, user, owner_only=True)
    if article is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    changed = sorted(
        field for field, value in update_data.items() if getattr(article, field) != value
    )
    if not changed:
        return _article_detail_to_dict(article)

    for field in changed:
        setattr(article, field, update_data[field])
    article.updated_at = utcnow()

    await db.flush()
    logger.info("Article %s updated by user %s (fields=%s)", article.id, user.id, changed)
    return _article_detail_to_dict(article)


async def delete_article(db: AsyncSession, user: User, article_id: int) -> dict | None:
    """
    Delete one of *user*'s articles and return its last detail dict.

    Returns None when the article does not exist or belongs to someone
    else.  Likes on the article are removed by the FK cascade.
    """
    article = await _find_article(db, article_id, user, owner_only=True)
    if article is None:
        return None

    data = _article_detail_to_dict(article)
    await db.delete(article)
    await db.flush()
    logger.info("Article %s deleted by user %s", article_id, user.id)
    return data
