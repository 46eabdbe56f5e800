"""
Load church listings from a CSV export.

    python -m churchfinder.scripts.import_churches churches.csv
"""
import argparse
import logging
import sys

from churchfinder.core.database import db
from churchfinder.core.logging_config import setup_logging
from churchfinder.services.church_file_import import REQUIRED_COLUMNS, ChurchImportService, read_church_csv

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import churches from a CSV file")
    parser.add_argument("path", help="CSV file with one church per row")
    parser.add_argument("--create-tables", action="store_true", help="create missing tables first")
    args = parser.parse_args(argv)

    setup_logging()

    df = read_church_csv(args.path)
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        logger.error(f"Missing required columns: {', '.join(missing)}")
        return 1

    if args.create_tables:
        db.init_db()

    session = db.session_factory()
    try:
        result = ChurchImportService(session).import_dataframe(df)
    finally:
        session.close()

    for error in result["errors"]:
        logger.warning(error)
    return 0 if result["failed"] == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
