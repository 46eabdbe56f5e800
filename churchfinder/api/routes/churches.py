import logging
from io import StringIO
from typing import Any, Optional

import pandas as pd
from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import IntegrityError

from churchfinder.api.deps import AdminUser, CurrentUser, SessionDep
from churchfinder.core.config import settings
from churchfinder.models.church import Church
from churchfinder.models.claim import ChurchClaim
from churchfinder.models.common import ClaimStatus, Weekday
from churchfinder.schemas.church import ChurchClaimCreate, ChurchClaimRead, ChurchCreate, ChurchRead, ChurchUpdate
from churchfinder.schemas.common import APIResponse
from churchfinder.services import church_search
from churchfinder.services.church_file_import import REQUIRED_COLUMNS, ChurchImportService, read_church_csv
from churchfinder.services.church_service import create_church, update_church

logger = logging.getLogger(__name__)

router = APIRouter()


def get_church_or_404(session, church_id: int) -> Church:
    church = church_search.with_relations(session.query(Church)).filter(Church.id == church_id).first()
    if not church:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Church with ID {church_id} not found"
        )
    return church


@router.get("", response_model=APIResponse)
async def list_churches(
    *,
    session: SessionDep,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(settings.DEFAULT_RADIUS_MILES, gt=0, le=settings.MAX_RADIUS_MILES),
    state: Optional[str] = None,
    city: Optional[str] = None,
    denomination: Optional[str] = None,
    language: Optional[str] = None,
    day: Optional[Weekday] = None,
    verified: Optional[bool] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Any:
    """
    Paginated church directory.

    With ``lat``/``lng`` the results are limited to ``radius`` miles and
    ordered nearest first. Otherwise they are ordered by name.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="lat and lng must be provided together"
        )

    try:
        query = church_search.apply_filters(
            session.query(Church),
            state=state,
            city=city,
            denomination=denomination,
            language=language,
            day=day,
            verified=verified,
        )

        if lat is not None:
            data = church_search.paginate_by_distance(session, query, lat, lng, radius, page, page_size)
        else:
            data = church_search.paginate(query, page, page_size)

        return APIResponse(
            message=f"Retrieved {len(data['churches'])} of {data['total']} churches",
            data=data
        )
    except Exception as e:
        logger.error(f"Error listing churches: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing churches: {str(e)}"
        )


@router.get("/nearby", response_model=APIResponse)
async def nearby_churches(
    *,
    session: SessionDep,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(settings.NEARBY_RADIUS_MILES, gt=0, le=settings.MAX_RADIUS_MILES),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Any:
    """
    Churches within ``radius`` miles of a point, nearest first.
    """
    try:
        data = church_search.paginate_by_distance(session, session.query(Church), lat, lng, radius, page, page_size)
        return APIResponse(
            message=f"Found {data['total']} churches within {radius:g} miles",
            data=data
        )
    except Exception as e:
        logger.error(f"Error finding nearby churches: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error finding nearby churches: {str(e)}"
        )


@router.get("/search", response_model=APIResponse)
async def search_churches(
    *,
    session: SessionDep,
    q: str = Query(..., min_length=1, max_length=200),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Any:
    """
    Case-insensitive text search over name, denomination, city, state and
    description. Every word in ``q`` has to match somewhere.
    """
    if not q.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Search query cannot be blank"
        )

    try:
        query = church_search.apply_text_search(session.query(Church), q)
        data = church_search.paginate(query, page, page_size)
        return APIResponse(
            message=f"Found {data['total']} churches matching '{q.strip()}'",
            data=data
        )
    except Exception as e:
        logger.error(f"Error searching churches: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error searching churches: {str(e)}"
        )


@router.post("/import", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def import_churches(
    *,
    session: SessionDep,
    current_user: AdminUser,
    file: UploadFile = File(...),
) -> Any:
    """
    Bulk-load churches from a CSV upload. Rows are committed one at a time,
    so a bad row does not undo the good ones.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are supported"
        )

    try:
        content = (await file.read()).decode("utf-8-sig")
        df = read_church_csv(StringIO(content))
    except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not read CSV file: {str(e)}"
        )

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required columns: {', '.join(missing)}"
        )

    logger.info(f"User {current_user.email} importing {len(df)} rows from {file.filename}")
    result = ChurchImportService(session).import_dataframe(df)

    return APIResponse(
        message=f"Imported {result['success']} of {result['total']} churches",
        data=result
    )


@router.get("/{church_id}", response_model=APIResponse)
async def get_church_by_id(
    *,
    session: SessionDep,
    church_id: int
) -> Any:
    """
    Get a specific church by ID.
    """
    church = get_church_or_404(session, church_id)
    return APIResponse(
        message=f"Retrieved church: {church.name}",
        data=ChurchRead.model_validate(church)
    )


@router.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def create_new_church(
    *,
    session: SessionDep,
    current_user: AdminUser,
    church_in: ChurchCreate
) -> Any:
    """
    Create a church listing. Admins only.
    """
    try:
        church = create_church(session, church_in)
        session.commit()
        church = get_church_or_404(session, church.id)

        logger.info(f"User {current_user.email} created church {church.id} '{church.name}'")
        return APIResponse(
            message=f"Church '{church.name}' created successfully",
            data=ChurchRead.model_validate(church)
        )
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Integrity error creating church: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Church conflicts with an existing record"
        )


@router.put("/{church_id}", response_model=APIResponse)
async def update_existing_church(
    *,
    session: SessionDep,
    current_user: AdminUser,
    church_id: int,
    church_in: ChurchUpdate
) -> Any:
    """
    Update a church by ID. Only the fields that are sent change.
    """
    church = get_church_or_404(session, church_id)

    if not church_in.model_fields_set:
        return APIResponse(
            message="No fields to update",
            data=ChurchRead.model_validate(church)
        )

    try:
        changed = update_church(session, church, church_in)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.error(f"Integrity error updating church {church_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Update conflicts with an existing record"
        )

    church = get_church_or_404(session, church_id)
    logger.info(f"User {current_user.email} updated church {church_id}: {', '.join(changed)}")
    return APIResponse(
        message=f"Church '{church.name}' updated successfully",
        data=ChurchRead.model_validate(church)
    )


@router.post("/{church_id}/claim", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def claim_church(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    church_id: int,
    claim_in: Optional[ChurchClaimCreate] = None
) -> Any:
    """
    Ask to manage a church listing. The request is recorded as pending.
    """
    church = get_church_or_404(session, church_id)

    existing = session.query(ChurchClaim).filter(
        ChurchClaim.church_id == church_id,
        ChurchClaim.user_id == current_user.id,
        ChurchClaim.status == ClaimStatus.PENDING,
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have a pending claim for this church"
        )

    claim = ChurchClaim(
        church_id=church.id,
        user_id=current_user.id,
        message=claim_in.message if claim_in else None,
        status=ClaimStatus.PENDING,
    )
    session.add(claim)
    session.commit()
    session.refresh(claim)

    logger.info(f"User {current_user.email} claimed church {church_id}")
    return APIResponse(
        message=f"Claim for '{church.name}' submitted for review",
        data=ChurchClaimRead.model_validate(claim)
    )
