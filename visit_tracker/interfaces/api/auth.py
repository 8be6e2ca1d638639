"""Auth API routes — register, login, me."""

from fastapi import APIRouter, Depends, status

from visit_tracker.application.services import auth_service
from visit_tracker.domain.models.user import User
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.domain.schemas.auth import LoginRequest, TokenResponse, UserCreate, UserRead
from visit_tracker.interfaces.api.deps import get_current_user
from visit_tracker.interfaces.deps import get_user_repository

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, repo: UserRepository = Depends(get_user_repository)):
    return auth_service.register(
        repo,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    return auth_service.login(repo, body.email, body.password)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
