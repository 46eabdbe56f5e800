import logging
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from churchfinder.models.church import Church, ServiceTime
from churchfinder.models.common import Weekday, utcnow
from churchfinder.models.language import Language
from churchfinder.schemas.church import ChurchCreate, ChurchUpdate

logger = logging.getLogger(__name__)


def resolve_languages(session: Session, names: List[str]) -> List[Language]:
    """Look up languages by case-insensitive name, creating unknown ones."""
    languages = []
    for name in names:
        language = session.query(Language).filter(
            func.lower(Language.name) == name.lower()
        ).first()
        if not language:
            language = Language(name=name)
            session.add(language)
            session.flush()
            logger.info(f"Created language: {name}")
        languages.append(language)
    return languages


def build_service_times(schedule: Dict[str, List[str]]) -> List[ServiceTime]:
    return [
        ServiceTime(day=Weekday.parse(day), time_label=label)
        for day, labels in schedule.items()
        for label in labels
    ]


def create_church(session: Session, church_in: ChurchCreate) -> Church:
    """Add a church with its schedule and languages. Flushes, does not commit."""
    church_data = church_in.model_dump(exclude={"service_times", "languages"})
    church = Church(**church_data)
    church.service_time_rows = build_service_times(church_in.service_times)
    church.languages_rel = resolve_languages(session, church_in.languages)

    session.add(church)
    session.flush()
    return church


def update_church(session: Session, church: Church, church_in: ChurchUpdate) -> List[str]:
    """
    Apply the fields that were sent, including explicit nulls. A supplied
    schedule or language list replaces the existing one, and null clears it.
    Returns the names of the updated fields.
    """
    update_data = church_in.model_dump(exclude_unset=True)
    changed = sorted(update_data)
    schedule = language_names = None
    if "service_times" in update_data:
        schedule = update_data.pop("service_times") or {}
    if "languages" in update_data:
        language_names = update_data.pop("languages") or []

    for field, value in update_data.items():
        setattr(church, field, value)

    if schedule is not None:
        church.service_time_rows.clear()
        # Deletes must hit the database before re-adding the same (day, label) pairs
        session.flush()
        church.service_time_rows.extend(build_service_times(schedule))
    if language_names is not None:
        church.languages_rel = resolve_languages(session, language_names)

    if schedule is not None or language_names is not None:
        # Relationship-only edits don't trip the column onupdate hook
        church.updated_at = utcnow()

    session.flush()
    return changed


def find_duplicate(session: Session, name: str, city: str | None, state: str | None) -> Church | None:
    """Same name, city and state, compared case-insensitively."""
    query = session.query(Church).filter(func.lower(Church.name) == name.strip().lower())
    if city:
        query = query.filter(func.lower(Church.city) == city.strip().lower())
    else:
        query = query.filter(Church.city.is_(None))
    if state:
        query = query.filter(func.lower(Church.state) == state.strip().lower())
    else:
        query = query.filter(Church.state.is_(None))
    return query.first()
