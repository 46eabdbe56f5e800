"""
Query helpers behind the church listing, nearby and text search endpoints.

Every helper takes and returns a SQLAlchemy ``Query`` so the route handlers
can stack filters before paginating. Distance filtering runs in two steps.
A bounding box on the (latitude, longitude) index narrows the candidates.
An exact haversine check then decides membership and ordering.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Query, Session, selectinload

from churchfinder.core.geo import bounding_box, haversine_miles
from churchfinder.models.church import Church, ServiceTime
from churchfinder.models.common import Weekday
from churchfinder.models.language import Language
from churchfinder.schemas.church import ChurchSummary

logger = logging.getLogger(__name__)

SEARCH_FIELDS = (Church.name, Church.denomination, Church.city, Church.state, Church.description)


def with_relations(query: Query) -> Query:
    return query.options(
        selectinload(Church.service_time_rows),
        selectinload(Church.languages_rel),
    )


def apply_filters(
    query: Query,
    *,
    state: Optional[str] = None,
    city: Optional[str] = None,
    denomination: Optional[str] = None,
    language: Optional[str] = None,
    day: Optional[str] = None,
    verified: Optional[bool] = None,
) -> Query:
    """Equality filters, all case-insensitive."""
    if state:
        query = query.filter(func.lower(Church.state) == state.strip().lower())
    if city:
        query = query.filter(func.lower(Church.city) == city.strip().lower())
    if denomination:
        query = query.filter(func.lower(Church.denomination) == denomination.strip().lower())
    if language:
        query = query.filter(
            Church.languages_rel.any(func.lower(Language.name) == language.strip().lower())
        )
    if day:
        query = query.filter(Church.service_time_rows.any(ServiceTime.day == Weekday.parse(day)))
    if verified is not None:
        query = query.filter(Church.verified == verified)
    return query


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def apply_text_search(query: Query, text: str) -> Query:
    """Every whitespace-separated term must appear in at least one searchable field."""
    for term in text.split():
        pattern = _like_pattern(term)
        query = query.filter(or_(*(field.ilike(pattern, escape="\\") for field in SEARCH_FIELDS)))
    return query


def _page_envelope(total: int, page: int, page_size: int, churches: List[Any]) -> Dict[str, Any]:
    return {
        "total": total,
        "page": page,
        "page_size": page_size,
        "pages": math.ceil(total / page_size) if total else 0,
        "churches": churches,
    }


def paginate(query: Query, page: int, page_size: int) -> Dict[str, Any]:
    """Page through ``query`` ordered by name, with id as the tie-break."""
    total = query.order_by(None).count()
    churches = (
        with_relations(query)
        .order_by(Church.name, Church.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return _page_envelope(
        total, page, page_size,
        [ChurchSummary.model_validate(church) for church in churches],
    )


def within_radius(query: Query, lat: float, lng: float, radius_miles: float) -> List[Tuple[int, float]]:
    """
    (church id, distance) for every church in ``query`` within the radius,
    nearest first and then by id.
    """
    box = bounding_box(lat, lng, radius_miles)
    lng_clauses = [Church.longitude.between(west, east) for west, east in box.lng_ranges]
    candidates = (
        query.with_entities(Church.id, Church.latitude, Church.longitude)
        .filter(and_(Church.latitude.between(box.min_lat, box.max_lat), or_(*lng_clauses)))
        .all()
    )

    hits = []
    for church_id, church_lat, church_lng in candidates:
        distance = haversine_miles(lat, lng, church_lat, church_lng)
        if distance <= radius_miles:
            hits.append((church_id, distance))
    hits.sort(key=lambda hit: (hit[1], hit[0]))

    logger.debug(f"Radius search ({lat}, {lng}, {radius_miles}mi): {len(candidates)} candidates, {len(hits)} hits")
    return hits


def paginate_by_distance(
    session: Session,
    query: Query,
    lat: float,
    lng: float,
    radius_miles: float,
    page: int,
    page_size: int,
) -> Dict[str, Any]:
    hits = within_radius(query, lat, lng, radius_miles)
    page_hits = hits[(page - 1) * page_size: page * page_size]

    by_id = {}
    if page_hits:
        ids = [church_id for church_id, _ in page_hits]
        by_id = {church.id: church for church in with_relations(session.query(Church)).filter(Church.id.in_(ids)).all()}

    churches = []
    for church_id, distance in page_hits:
        summary = ChurchSummary.model_validate(by_id[church_id])
        summary.distance_miles = round(distance, 2)
        churches.append(summary)

    return _page_envelope(len(hits), page, page_size, churches)
