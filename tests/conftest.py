import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from global_api_exceptions import (
    ExceptionDefinition,
    GlobalExceptionTranslator,
    install_exception_translator,
)


class NotFoundError(Exception):
    pass


class ValidationError(Exception):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is invalid")


class CustomError(Exception):
    def __init__(self, code: int):
        self.code = code
        super().__init__(f"custom error {code}")


class SpecificNotFoundError(NotFoundError):
    pass


@pytest.fixture(name="definitions")
def definitions_fixture():
    return [
        ExceptionDefinition(NotFoundError, "Resource missing", 404),
        ExceptionDefinition.from_formatter(
            ValidationError, lambda ex: "Invalid: " + ex.field, 400, error_code="VAL001"
        ),
        ExceptionDefinition(CustomError, "Custom error two", 409).when(lambda ex: ex.code == 2),
    ]


@pytest.fixture(name="finalized")
def finalized_fixture():
    return []


def build_client(translator: GlobalExceptionTranslator, raise_server_exceptions: bool = True) -> TestClient:
    app = FastAPI()
    install_exception_translator(app, translator)

    @app.get("/missing")
    async def missing():
        raise NotFoundError("row 7 not in table")

    @app.get("/specific-missing")
    async def specific_missing():
        raise SpecificNotFoundError("row 8 not in table")

    @app.get("/validate/{field}")
    def validate(field: str):
        raise ValidationError(field)

    @app.get("/custom/{code}")
    async def custom(code: int):
        raise CustomError(code)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    @app.get("/teapot")
    async def teapot():
        raise HTTPException(status_code=418, detail="short and stout")

    @app.get("/ok")
    async def ok():
        return {"status": "ok"}

    return TestClient(app, raise_server_exceptions=raise_server_exceptions)


@pytest.fixture(name="client")
def client_fixture(definitions, finalized):
    translator = GlobalExceptionTranslator(definitions, finalizers=[finalized.append])
    with build_client(translator) as client:
        yield client


@pytest.fixture(name="catching_client")
def catching_client_fixture(definitions, finalized):
    translator = GlobalExceptionTranslator(
        definitions, catch_unfiltered_exceptions=True, finalizers=[finalized.append]
    )
    with build_client(translator) as client:
        yield client
