"""User lookup routes.

- GET /users/lookup?email=<email>: Find a user to start a chat with
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_user_repo
from api.models import CurrentUser, PublicUser
from api.security import get_current_user_required
from port.user_repository import UserRepository
from services import auth_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/lookup", response_model=PublicUser)
def lookup_user(
    email: str = Query(..., min_length=1, description="Exact email address"),
    current_user: CurrentUser = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Find a user by exact email."""
    user = auth_service.find_by_email(repo, email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return PublicUser.from_domain(user)
