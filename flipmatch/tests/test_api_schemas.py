"""
Tests for API schemas and OpenAPI generation.

Ensures:
1. Schemas validate input the way the game expects
2. OpenAPI documentation generates correctly
"""

import pytest
from pydantic import ValidationError


class TestRequestSchemas:
    """Request validation."""

    def test_create_session_defaults(self):
        from flipmatch.api.schemas import CreateSessionRequest

        assert CreateSessionRequest().grid_size == 4

    @pytest.mark.parametrize("grid_size", [1, 11, -1])
    def test_create_session_bounds(self, grid_size):
        from flipmatch.api.schemas import CreateSessionRequest

        with pytest.raises(ValidationError):
            CreateSessionRequest(grid_size=grid_size)

    def test_grid_size_request_is_not_range_checked(self):
        from flipmatch.api.schemas import GridSizeRequest

        assert GridSizeRequest(grid_size=42).grid_size == 42

    def test_flip_request_requires_card(self):
        from flipmatch.api.schemas import FlipRequest

        with pytest.raises(ValidationError):
            FlipRequest()


class TestResponseSchemas:
    """Response models."""

    def test_card_info_from_view(self):
        from flipmatch.api.schemas import CardInfo
        from flipmatch.engine_core.state import CardView

        info = CardInfo.model_validate(CardView(card_id=3, visible=False, value=None, solved=False))
        assert info.card_id == 3
        assert info.value is None

    def test_error_response_schema(self):
        from flipmatch.api.schemas import ErrorResponse, ErrorCode

        error = ErrorResponse(error="Session not found", error_code=ErrorCode.SESSION_NOT_FOUND)
        data = error.model_dump(mode="json")

        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] is None

    def test_error_code_values_are_strings(self):
        from flipmatch.api.schemas import ErrorCode

        for code in ErrorCode:
            assert code.value == code.name


class TestOpenAPI:
    """OpenAPI generation."""

    def test_response_models_in_schema(self):
        from flipmatch.api.app import app
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
        schemas = schema["components"]["schemas"]

        for name in [
            "GameStateResponse",
            "FlipResponse",
            "GridSizeResponse",
            "ErrorResponse",
            "CardInfo",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_game_endpoints_present(self):
        from flipmatch.api.app import app
        from fastapi.openapi.utils import get_openapi

        paths = get_openapi(title=app.title, version=app.version, routes=app.routes)["paths"]

        assert "post" in paths["/api/v1/sessions"]
        assert "post" in paths["/api/v1/sessions/{session_id}/flip"]
        assert "post" in paths["/api/v1/sessions/{session_id}/reset"]
        assert "put" in paths["/api/v1/sessions/{session_id}/grid-size"]
        assert "get" in paths["/api/v1/sessions/{session_id}/state"]
        assert "post" in paths["/api/v1/sessions/{session_id}/instructions"]
        assert "get" in paths["/api/v1/rules"]

    def test_validation_errors_documented_as_error_response(self):
        from flipmatch.api.app import app

        create = app.openapi()["paths"]["/api/v1/sessions"]["post"]
        ref = create["responses"]["422"]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
