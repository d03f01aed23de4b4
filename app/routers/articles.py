from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import CurrentUser, OptionalUser
from app.schemas import ArticleCreate, ArticleUpdate, ArticleDetail, ArticleListItem, LikeState
from app.services import article_service, like_service

router = APIRouter(prefix="/api/v1/articles", tags=["articles"])

ARTICLE_NOT_FOUND = "Article not found"


@router.get("", response_model=list[ArticleListItem])
async def list_articles(db: AsyncSession = Depends(get_db)):
    return await article_service.get_published_articles(db)

@router.get("/{article_id}", response_model=ArticleDetail)
async def get_article(article_id: int, requester: OptionalUser, db: AsyncSession = Depends(get_db)):
    article = await article_service.get_article(db, article_id, requester)
    if not article:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article

@router.post("", response_model=ArticleDetail)
async def create_article(data: ArticleCreate, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, user, data)

@router.patch("/{article_id}", response_model=ArticleDetail)
async def update_article(
    article_id: int, data: ArticleUpdate, user: CurrentUser, db: AsyncSession = Depends(get_db)
):
    article = await article_service.update_article(db, user, article_id, data)
    if not article:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article

@router.delete("/{article_id}", response_model=ArticleDetail)
async def delete_article(article_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    article = await article_service.delete_article(db, user, article_id)
    if not article:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return article

@router.post("/{article_id}/like", response_model=LikeState)
async def like_article(article_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    try:
        state = await like_service.like_article(db, user, article_id)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Article already liked")
    if not state:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return state

@router.delete("/{article_id}/like", response_model=LikeState)
async def unlike_article(article_id: int, user: CurrentUser, db: AsyncSession = Depends(get_db)):
    state = await like_service.unlike_article(db, user, article_id)
    if not state:
        raise HTTPException(status_code=404, detail=ARTICLE_NOT_FOUND)
    return state
