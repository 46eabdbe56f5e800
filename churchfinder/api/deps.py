from collections.abc import Generator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from churchfinder.core.config import settings
from churchfinder.core.database import db
from churchfinder.core.security import decode_access_token
from churchfinder.models.user import User as UserModel, UserStatus


class TokenPayload(BaseModel):
    sub: str | None = None

# OAuth2 scheme setup
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login"
)

def get_db() -> Generator[Session, None, None]:
    with db.session() as session:
        yield session

# Type dependencies
SessionDep = Annotated[Session, Depends(get_db)]
TokenDep = Annotated[str, Depends(reusable_oauth2)]


def check_user_status(user: UserModel) -> None:
    """
    Centralized user status check so every entry point fails the same way.
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if user.status == UserStatus.DISABLED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been disabled. Please contact support for assistance."
        )


def get_current_user(
    session: SessionDep,
    token: TokenDep,
) -> UserModel:
    """
    Validate the access token and return the current active user.
    """
    payload = decode_access_token(token)
    try:
        token_data = TokenPayload(**payload)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    if token_data.sub is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token payload"
        )

    try:
        user_id = UUID(token_data.sub)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="Invalid user ID format")

    user = session.query(UserModel).filter(UserModel.id == user_id).first()

    check_user_status(user)

    return user

# Current user dependency
CurrentUser = Annotated[UserModel, Depends(get_current_user)]

def get_current_admin(
    current_user: CurrentUser,
) -> UserModel:
    """
    Verify the current user can manage church listings
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user

AdminUser = Annotated[UserModel, Depends(get_current_admin)]
