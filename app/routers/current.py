from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import CurrentUser
from app.schemas import ArticleListItem
from app.services import article_service

router = APIRouter(prefix="/api/v1/current", tags=["current"])

@router.get("/articles", response_model=list[ArticleListItem])
async def list_my_articles(user: CurrentUser, db: AsyncSession = Depends(get_db)):
    return await article_service.get_user_published_articles(db, user)
