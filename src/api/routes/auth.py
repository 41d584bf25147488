"""Authentication routes (register, login, me)."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_app_settings, get_token_service, get_user_repo
from api.models import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.security import get_current_user_required
from domain.model.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenService
from utils.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
# WhoAmI is also served at the root path used by existing clients
me_router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings: Settings = Depends(get_app_settings),
):
    """Register a new user.

    Raises:
        HTTPException: 409 Conflict if email already exists, 400 Bad Request if validation fails
    """
    try:
        user = auth_service.register(
            repo, request.email, request.password, rounds=settings.bcrypt_rounds
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    token_service: TokenService = Depends(get_token_service),
):
    """Login user and return a signed bearer token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    try:
        user = auth_service.verify_credentials(repo, request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    token, expires_at = token_service.issue_with_expiry(user.id, user.email)

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})

    return LoginResponse(
        token=token,
        expires_at=expires_at,
        user=CurrentUser(id=user.id, email=user.email),
    )


@router.get("/me", response_model=MeResponse)
@me_router.get("/me", response_model=MeResponse)
def get_me(current_user: CurrentUser = Depends(get_current_user_required)):
    """Get the identity carried by the caller's token."""
    return MeResponse(user=current_user)
