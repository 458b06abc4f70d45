import os

os.environ["RATELIMIT_ENABLED"] = "false"

import pytest

import assessment_engine
import config
import database


@pytest.fixture(autouse=True)
def isolated_db(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "DB_PATH", str(tmp_path / "test.db"))
    monkeypatch.setattr(config, "GEMINI_API_KEY", None)
    database.init_db()
    assessment_engine.clear_local_results()
    yield
    assessment_engine.clear_local_results()


@pytest.fixture
def client():
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
