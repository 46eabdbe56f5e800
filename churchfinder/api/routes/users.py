import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from churchfinder.api.deps import CurrentUser, SessionDep
from churchfinder.models.check_in import CheckIn
from churchfinder.models.church import Church
from churchfinder.models.favorite import Favorite
from churchfinder.schemas.common import APIResponse
from churchfinder.schemas.favorite import CheckInCreate, CheckInRead, FavoriteCreate, FavoriteRead
from churchfinder.schemas.user import User, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

_church_details = (
    selectinload(Church.service_time_rows),
    selectinload(Church.languages_rel),
)


def ensure_church_exists(session, church_id: int) -> None:
    if not session.query(Church.id).filter(Church.id == church_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Church with ID {church_id} not found"
        )


@router.put("/me", response_model=APIResponse)
async def update_me(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    user_in: UserUpdate,
) -> Any:
    """
    Update your display name or home location.
    """
    update_data = user_in.model_dump(exclude_unset=True)
    if update_data.get("display_name") is None:
        update_data.pop("display_name", None)

    for field, value in update_data.items():
        setattr(current_user, field, value)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return APIResponse(
        message="Profile updated successfully",
        data=User.model_validate(current_user)
    )


@router.get("/favorites", response_model=APIResponse)
async def list_favorites(
    *,
    session: SessionDep,
    current_user: CurrentUser,
) -> Any:
    """
    Churches you have saved, most recent first.
    """
    favorites = (
        session.query(Favorite)
        .options(joinedload(Favorite.church).options(*_church_details))
        .filter(Favorite.user_id == current_user.id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )
    return APIResponse(
        message=f"Retrieved {len(favorites)} favorites",
        data=[FavoriteRead.model_validate(favorite) for favorite in favorites]
    )


@router.post("/favorites", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    favorite_in: FavoriteCreate,
) -> Any:
    """
    Save a church. Saving the same church twice is a conflict.
    """
    ensure_church_exists(session, favorite_in.church_id)

    favorite = Favorite(user_id=current_user.id, church_id=favorite_in.church_id)
    try:
        session.add(favorite)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Church is already in your favorites"
        )

    favorite = (
        session.query(Favorite)
        .options(joinedload(Favorite.church).options(*_church_details))
        .filter(Favorite.id == favorite.id)
        .one()
    )
    return APIResponse(
        message="Church added to favorites",
        data=FavoriteRead.model_validate(favorite)
    )


@router.delete("/favorites/{church_id}", response_model=APIResponse)
async def remove_favorite(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    church_id: int,
) -> Any:
    """
    Remove a church from your favorites.
    """
    favorite = session.query(Favorite).filter(
        Favorite.user_id == current_user.id,
        Favorite.church_id == church_id,
    ).first()
    if not favorite:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Church is not in your favorites"
        )

    session.delete(favorite)
    session.commit()

    return APIResponse(
        message="Church removed from favorites",
        data=None
    )


@router.get("/check-ins", response_model=APIResponse)
async def list_check_ins(
    *,
    session: SessionDep,
    current_user: CurrentUser,
) -> Any:
    """
    Your visits, most recent date first.
    """
    check_ins = (
        session.query(CheckIn)
        .options(joinedload(CheckIn.church).options(*_church_details))
        .filter(CheckIn.user_id == current_user.id)
        .order_by(CheckIn.visit_date.desc(), CheckIn.id.desc())
        .all()
    )
    return APIResponse(
        message=f"Retrieved {len(check_ins)} check-ins",
        data=[CheckInRead.model_validate(check_in) for check_in in check_ins]
    )


@router.post("/check-ins", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def add_check_in(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    check_in_in: CheckInCreate,
) -> Any:
    """
    Record that you attended a church. One check-in per church per day.
    """
    ensure_church_exists(session, check_in_in.church_id)

    check_in = CheckIn(
        user_id=current_user.id,
        church_id=check_in_in.church_id,
        visit_date=check_in_in.visit_date or date.today(),
    )
    try:
        session.add(check_in)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already checked in to this church on that date"
        )

    check_in = (
        session.query(CheckIn)
        .options(joinedload(CheckIn.church).options(*_church_details))
        .filter(CheckIn.id == check_in.id)
        .one()
    )
    logger.info(f"User {current_user.email} checked in to church {check_in.church_id}")
    return APIResponse(
        message="Check-in recorded",
        data=CheckInRead.model_validate(check_in)
    )
