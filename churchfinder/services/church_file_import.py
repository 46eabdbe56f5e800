import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from churchfinder.core.geo import is_valid_coordinate
from churchfinder.models.common import Weekday
from churchfinder.schemas.church import ChurchCreate
from churchfinder.services.church_service import create_church, find_duplicate

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["name", "denomination", "latitude", "longitude"]

TEXT_COLUMNS = [
    "address", "city", "state", "zip_code", "country", "phone",
    "email", "website", "description", "image_url",
]

INT_COLUMNS = ["founded_year", "average_attendance"]


class ChurchImportService:
    def __init__(self, db: Session):
        self.db = db

    def clean_text(self, value) -> Optional[str]:
        """Strip a cell, mapping blanks and NaN to None"""
        if value is None or pd.isna(value):
            return None
        value = str(value).strip()
        return value or None

    def clean_int(self, value, column: str) -> Optional[int]:
        text = self.clean_text(value)
        if text is None:
            return None
        try:
            # Spreadsheets often hand back "1998.0"
            return int(float(text.replace(",", "")))
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid {column}: '{text}'")

    def normalize_multiitem_list(self, input_str: str) -> str:
        """
        Replace the separators people type between items
        (', and ', ' and ', ',') with a semicolon.
        """
        if not input_str:
            return ""
        input_str = str(input_str)
        input_str = input_str.replace(', and ', ';')
        input_str = input_str.replace(' and ', ';')
        input_str = input_str.replace(',', ';')
        return input_str

    def parse_languages(self, languages_str) -> List[str]:
        text = self.clean_text(languages_str)
        if not text:
            return []
        return [name.strip() for name in self.normalize_multiitem_list(text).split(';') if name.strip()]

    def parse_service_times(self, schedule_str) -> Dict[str, List[str]]:
        """
        Parse "Sunday 9:00 AM, 11:00 AM; Wednesday 7:00 PM" into
        {"sunday": ["9:00 AM", "11:00 AM"], "wednesday": ["7:00 PM"]}.
        Raises ValueError on an unknown day.
        """
        text = self.clean_text(schedule_str)
        if not text:
            return {}

        schedule: Dict[str, List[str]] = {}
        for segment in text.split(';'):
            segment = segment.strip()
            if not segment:
                continue
            day_token, _, times = segment.partition(' ')
            day = Weekday.parse(day_token.rstrip(':')).value
            labels = [label.strip() for label in times.split(',') if label.strip()]
            schedule.setdefault(day, []).extend(labels)
        return schedule

    def build_church(self, row: pd.Series) -> ChurchCreate:
        data: Dict[str, Any] = {
            "name": self.clean_text(row.get("name")),
            "denomination": self.clean_text(row.get("denomination")),
            "latitude": self.clean_text(row.get("latitude")),
            "longitude": self.clean_text(row.get("longitude")),
        }
        for column in TEXT_COLUMNS:
            value = self.clean_text(row.get(column))
            if value is not None:
                data[column] = value
        for column in INT_COLUMNS:
            value = self.clean_int(row.get(column), column)
            if value is not None:
                data[column] = value

        data["languages"] = self.parse_languages(row.get("languages"))
        data["service_times"] = self.parse_service_times(row.get("service_times"))
        return ChurchCreate(**data)

    def process_row(self, row: pd.Series, row_number: int) -> Dict[str, Any]:
        for field in REQUIRED_COLUMNS:
            if self.clean_text(row.get(field)) is None:
                return {"success": False, "error": f"Missing required field: {field}"}

        latitude = self.clean_text(row.get("latitude"))
        longitude = self.clean_text(row.get("longitude"))
        if not is_valid_coordinate(latitude, longitude):
            return {"success": False, "error": f"Invalid coordinates: ({latitude}, {longitude})"}

        try:
            church_in = self.build_church(row)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            return {"success": False, "error": f"Invalid data: {problems}"}
        except ValueError as e:
            return {"success": False, "error": str(e)}

        existing = find_duplicate(self.db, church_in.name, church_in.city, church_in.state)
        if existing:
            return {
                "success": False,
                "duplicate": True,
                "error": f"Church '{church_in.name}' already exists (ID {existing.id})",
            }

        try:
            church = create_church(self.db, church_in)
            self.db.commit()
            return {"success": True, "church_id": church.id}
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Database error on row {row_number}: {str(e)}")
            return {"success": False, "error": f"Database error: {str(e.orig)}"}

    def import_dataframe(self, df: pd.DataFrame) -> Dict[str, Any]:
        """Import church rows from a DataFrame, committing each row on its own"""
        result = {
            "total": len(df),
            "success": 0,
            "failed": 0,
            "duplicates": 0,
            "errors": [],
        }

        logger.info(f"Starting import of {len(df)} church records")

        for index, row in df.iterrows():
            # Skip completely empty rows
            if all(self.clean_text(value) is None for value in row.values):
                result["total"] -= 1
                continue

            row_number = index + 2  # header is row 1

            row_result = self.process_row(row, row_number)
            if row_result["success"]:
                result["success"] += 1
                if result["success"] % 100 == 0:
                    logger.info(f"Imported {result['success']} churches...")
                continue

            result["failed"] += 1
            if row_result.get("duplicate", False):
                result["duplicates"] += 1
            result["errors"].append(f"Row {row_number}: {row_result['error']}")

        logger.info(
            f"Import completed: {result['success']} successful, "
            f"{result['failed']} failed, {result['duplicates']} duplicates"
        )
        return result


def read_church_csv(source) -> pd.DataFrame:
    """Read a church CSV (path or file-like) with every cell as a string"""
    df = pd.read_csv(source, dtype=str, keep_default_na=False)
    df.columns = [str(column).strip().lower() for column in df.columns]
    return df
