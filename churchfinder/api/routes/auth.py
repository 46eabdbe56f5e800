import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from churchfinder.core.security import create_access_token, get_password_hash, verify_password
from churchfinder.api.deps import SessionDep, CurrentUser, check_user_status

from churchfinder.schemas.user import LoginResponse, User, UserCreate
from churchfinder.models.user import User as UserModel, UserRole, UserStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    session: SessionDep,
    user_in: UserCreate,
) -> Any:
    """
    Create an account and return an access token for it.
    """
    email = user_in.email.lower()
    existing = session.query(UserModel).filter(func.lower(UserModel.email) == email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists"
        )

    user = UserModel(
        email=email,
        display_name=user_in.display_name,
        hashed_password=get_password_hash(user_in.password),
        role=UserRole.USER,
        status=UserStatus.ACTIVE,
        home_latitude=user_in.home_latitude,
        home_longitude=user_in.home_longitude,
        home_city=user_in.home_city,
        home_state=user_in.home_state,
    )

    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists"
        )

    logger.info(f"New account created: {user.email}")
    return LoginResponse(
        access_token=create_access_token(user.id),
        token_type="bearer",
        user=User.model_validate(user)
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    session: SessionDep,
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = session.query(UserModel).filter(
        func.lower(UserModel.email) == form_data.username.strip().lower()
    ).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    check_user_status(user)

    return LoginResponse(
        access_token=create_access_token(user.id),
        token_type="bearer",
        user=User.model_validate(user)
    )


@router.get("/me", response_model=User)
async def read_users_me(
    current_user: CurrentUser,
) -> Any:
    """
    Get current user.
    """
    return User.model_validate(current_user)
