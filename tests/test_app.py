import logging

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError as SettingsValidationError

from global_api_exceptions import ExceptionDefinition
from global_api_exceptions.config import Settings
from global_api_exceptions.core.logging_config import remove_logging_handlers
from global_api_exceptions.main import create_app
from conftest import NotFoundError


@pytest.fixture(autouse=True)
def cleanup_logging():
    yield
    remove_logging_handlers()


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("GLOBAL_API_EXCEPTIONS_CATCH_UNFILTERED_EXCEPTIONS", raising=False)
    settings = Settings()

    assert settings.catch_unfiltered_exceptions is False
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GLOBAL_API_EXCEPTIONS_CATCH_UNFILTERED_EXCEPTIONS", "true")
    monkeypatch.setenv("GLOBAL_API_EXCEPTIONS_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.catch_unfiltered_exceptions is True
    assert settings.log_level == "DEBUG"


def test_settings_reject_unknown_log_level():
    with pytest.raises(SettingsValidationError):
        Settings(log_level="chatty")


def test_create_app_health():
    app = create_app(settings=Settings(app_name="Errors Demo"))

    with TestClient(app) as client:
        resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.json()["service"] == "Errors Demo"


def test_create_app_translates(tmp_path):
    settings = Settings(catch_unfiltered_exceptions=True, log_file=str(tmp_path / "logs" / "app.log"))
    app = create_app([ExceptionDefinition(NotFoundError, "Resource missing", 404)], settings=settings)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("row 7")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    with TestClient(app) as client:
        assert client.get("/missing").json() == {"Message": "Resource missing"}
        resp = client.get("/boom")

    assert resp.status_code == 500
    assert resp.json() == {"Message": "boom"}
    assert len(app.state.exception_translator.rules) == 1
    log_text = (tmp_path / "logs" / "app.log").read_text()
    assert "Translated exception: NotFoundError" in log_text
    assert "Caught unfiltered exception: boom" in log_text


def test_log_file_receives_records(tmp_path):
    log_file = tmp_path / "app.log"
    create_app(settings=Settings(log_file=str(log_file)))

    logging.getLogger("global_api_exceptions.tests").warning("written to file")

    assert "written to file" in log_file.read_text()


def test_repeated_setup_replaces_log_file(tmp_path):
    first = tmp_path / "first.log"
    second = tmp_path / "second.log"
    create_app(settings=Settings(log_file=str(first)))
    create_app(settings=Settings(log_file=str(second)))

    logging.getLogger("global_api_exceptions.tests").warning("after second setup")

    # Only the latest configuration is attached to the root logger
    assert "after second setup" not in first.read_text()
    assert "after second setup" in second.read_text()
    log_files = [
        h.baseFilename for h in logging.getLogger().handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename.startswith(str(tmp_path))
    ]
    assert log_files == [str(second)]
