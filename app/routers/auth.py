from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.dependencies import CurrentUser
from app.schemas import SignInRequest, SignUpRequest, TokenResponse, UserResponse
from app.security import token_service
from app.services import user_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _token_response(user) -> dict:
    return {
        "access_token": token_service.create_access_token(user.id),
        "token_type": "bearer",
        "user": user_service.user_to_dict(user),
    }


@router.post("/sign_up", status_code=201, response_model=TokenResponse)
async def sign_up(data: SignUpRequest, db: AsyncSession = Depends(get_db)):
    try:
        user = await user_service.create_user(db, data)
    except IntegrityError:
        raise HTTPException(
            status_code=409,
            detail="A user with this email already exists",
        )
    return _token_response(user)

@router.post("/sign_in", response_model=TokenResponse)
async def sign_in(data: SignInRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user)

@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser):
    return user_service.user_to_dict(user)
