"""
Like service: idempotent like/unlike toggles for the Article aggregate.

Liking an already-liked article and unliking an article that was never
liked are both no-ops that return the current state.  The unique
constraint on ``article_likes(user_id, article_id)`` remains the final
guard when two requests race; the router maps the resulting
``IntegrityError`` to 409.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import ArticleLike, User
from app.services.article_service import find_readable_article

logger = logging.getLogger(__name__)


async def _like_state(db: AsyncSession, article_id: int, liked: bool) -> dict:
    count_q = (
        select(func.count())
        .select_from(ArticleLike)
        .where(ArticleLike.article_id == article_id)
    )
    likes_count: int = (await db.execute(count_q)).scalar_one()
    return {"article_id": article_id, "liked": liked, "likes_count": likes_count}


async def _find_like(db: AsyncSession, user: User, article_id: int) -> ArticleLike | None:
    q = select(ArticleLike).where(
        ArticleLike.user_id == user.id, ArticleLike.article_id == article_id
    )
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def like_article(db: AsyncSession, user: User, article_id: int) -> dict | None:
    """
    Record that *user* likes *article_id*.

    Returns None when the article is not visible to *user*.
    """
    article = await find_readable_article(db, article_id, user)
    if article is None:
        return None

    if await _find_like(db, user, article_id) is None:
        db.add(ArticleLike(user_id=user.id, article_id=article_id))
        await db.flush()
        logger.info("User %s liked article %s", user.id, article_id)

    return await _like_state(db, article_id, liked=True)


async def unlike_article(db: AsyncSession, user: User, article_id: int) -> dict | None:
    """
    Remove *user*'s like from *article_id* if there is one.

    Returns None when the article is not visible to *user*.
    """
    article = await find_readable_article(db, article_id, user)
    if article is None:
        return None

    like = await _find_like(db, user, article_id)
    if like is not None:
        await db.delete(like)
        await db.flush()
        logger.info("User %s unliked article %s", user.id, article_id)

    return await _like_state(db, article_id, liked=False)
