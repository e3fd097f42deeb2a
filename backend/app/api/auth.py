"""
User API endpoints - registration, login and the current user.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.errors import InternalError
from ..models import Token, User, UserCreate, UserLogin
from ..storage import UserStorage, UsernameTaken, StorageError
from ..utils.auth import create_access_token, get_current_user_id, get_password_hash, verify_password
from .deps import get_user_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _public(user) -> User:
    return User.model_validate(user.model_dump(exclude={"hashed_password"}))


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, users: UserStorage = Depends(get_user_storage)):
    """
    Register a new user.

    Raises:
        HTTPException: If username already exists
    """
    try:
        user = await users.create_user(
            username=user_data.username,
            hashed_password=get_password_hash(user_data.password),
            email=user_data.email,
            name=user_data.name,
        )
    except UsernameTaken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )
    except StorageError as e:
        logger.error(f"Error registering {user_data.username}: {e}")
        raise InternalError("Internal Server Error") from e
    return _public(user)


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, users: UserStorage = Depends(get_user_storage)):
    """Exchange username and password for a bearer token."""
    try:
        user = await users.get_user_by_username(credentials.username)
    except StorageError as e:
        logger.error(f"Error loading user {credentials.username}: {e}")
        raise InternalError("Internal Server Error") from e

    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.user_id, "username": user.username})
    return Token(access_token=access_token)


@router.get("/me", response_model=User)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserStorage = Depends(get_user_storage)
):
    """Get current user information."""
    try:
        user = await users.get_user(user_id)
    except StorageError as e:
        logger.error(f"Error loading user {user_id}: {e}")
        raise InternalError("Internal Server Error") from e

    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _public(user)


@router.post("/logout")
async def logout(user_id: str = Depends(get_current_user_id)):
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out"}
