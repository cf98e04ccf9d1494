"""
Unit tests for the error envelope handlers.
"""

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field

from uom_service.core.errors import (
    AuthTokenError,
    ConflictError,
    NotFoundError,
    ValidationError,
    error_body,
    register_exception_handlers,
)


class _Payload(BaseModel):
    name: str = Field(min_length=2)


def _build_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/conflict")
    async def conflict() -> None:
        raise ConflictError("already exists")

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundError("UOM not found")

    @app.get("/invalid")
    async def invalid() -> None:
        raise ValidationError("bad ratio", details={"field": "conversionRatio"})

    @app.get("/token")
    async def token() -> None:
        raise AuthTokenError("Token has expired", error_code="TOKEN_EXPIRED")

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("database exploded with secret details")

    @app.post("/payload")
    async def payload(body: _Payload) -> dict[str, str]:
        return {"name": body.name}

    return app


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=_build_app(), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http


def test_error_body_drops_empty_extras():
    assert error_body("nope", "CONFLICT", details=None) == {
        "success": False,
        "message": "nope",
        "errorCode": "CONFLICT",
    }


@pytest.mark.asyncio
async def test_conflict_maps_to_400(client):
    response = await client.get("/conflict")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "already exists",
        "errorCode": "CONFLICT",
    }


@pytest.mark.asyncio
async def test_not_found_maps_to_404(client):
    response = await client.get("/missing")

    assert response.status_code == 404
    assert response.json()["errorCode"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_validation_error_carries_details(client):
    response = await client.get("/invalid")

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "conversionRatio"}


@pytest.mark.asyncio
async def test_auth_error_sets_www_authenticate(client):
    response = await client.get("/token")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["errorCode"] == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_request_validation_lists_field_errors(client):
    response = await client.post("/payload", json={"name": "x"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation Error"
    assert body["errorCode"] == "VALIDATION_ERROR"
    assert len(body["errors"]) == 1
    assert body["errors"][0].startswith("name: ")


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client):
    response = await client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["errorCode"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_wrong_method_uses_envelope(client):
    response = await client.delete("/conflict")

    assert response.status_code == 405
    assert response.json()["errorCode"] == "METHOD_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_unhandled_error_hides_internals(client):
    response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Internal Server Error",
        "errorCode": "INTERNAL_ERROR",
    }
