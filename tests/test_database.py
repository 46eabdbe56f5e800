import logging
from datetime import timezone

import pytest
from fastapi import HTTPException
from sqlalchemy import text

from churchfinder.models.church import Church
from churchfinder.models.common import utcnow


pytestmark = pytest.mark.unit

DB_LOGGER = "churchfinder.core.database"


def test_session_commits_on_success(database, make_church):
    church_id = make_church()
    with database.session() as session:
        session.get(Church, church_id).name = "Renamed"

    with database.session() as session:
        assert session.get(Church, church_id).name == "Renamed"


def test_session_rolls_back_and_logs_unexpected_errors(database, make_church, caplog):
    church_id = make_church(name="Original")
    with caplog.at_level(logging.ERROR, logger=DB_LOGGER):
        with pytest.raises(RuntimeError):
            with database.session() as session:
                session.get(Church, church_id).name = "Changed"
                session.flush()
                raise RuntimeError("boom")

    assert any("Session error: boom" in record.getMessage() for record in caplog.records)
    with database.session() as session:
        assert session.get(Church, church_id).name == "Original"


def test_error_responses_roll_back_quietly(database, caplog):
    with caplog.at_level(logging.ERROR, logger=DB_LOGGER):
        with pytest.raises(HTTPException):
            with database.session() as session:
                session.execute(text("SELECT 1"))
                raise HTTPException(status_code=404, detail="Church with ID 1 not found")

    assert not [record for record in caplog.records if record.name == DB_LOGGER]


def test_not_found_request_does_not_log_a_session_error(client, caplog):
    with caplog.at_level(logging.ERROR, logger=DB_LOGGER):
        assert client.get("/api/churches/9999").status_code == 404

    assert not [record for record in caplog.records if record.name == DB_LOGGER]


def test_timestamps_are_timezone_aware():
    assert utcnow().tzinfo is timezone.utc
