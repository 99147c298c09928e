"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agent_memory.adapters.rate_limit.base import RateLimitResult
from agent_memory.core.errors import (
    AppError,
    EmbeddingAppError,
    LLMAppError,
    StorageAppError,
    ValidationAppError,
    VectorStoreAppError,
)
from agent_memory.core.exception_handlers import setup_exception_handlers
from agent_memory.core.rate_limit import RateLimitExceeded


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError returns HTTP 400."""
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(
                code="test_validation",
                message="Test validation error"
            )

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "test_validation"
        assert data["error"]["message"] == "Test validation error"
        assert "request_id" in data["error"]
        assert data["success"] is False

    def test_validation_error_includes_details(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError includes details when provided."""
        @app_with_handlers.get("/test-validation-details")
        async def test_endpoint():
            raise ValidationAppError(
                code="text_too_long",
                message="text exceeds the maximum of 1000 characters",
                details={"max_value": 1000, "actual_value": 1500},
            )

        response = client.get("/test-validation-details")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["details"]["max_value"] == 1000
        assert data["error"]["details"]["actual_value"] == 1500

    @pytest.mark.parametrize("error_cls", [VectorStoreAppError, EmbeddingAppError])
    def test_upstream_errors_return_502(self, client: TestClient, app_with_handlers: FastAPI, error_cls):
        """Verify vector store and embedding failures return HTTP 502."""
        @app_with_handlers.get("/test-upstream")
        async def test_endpoint():
            raise error_cls(code="upstream_down", message="Upstream service unavailable")

        response = client.get("/test-upstream")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "upstream_down"

    def test_llm_error_returns_500(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify LLMAppError returns HTTP 500."""
        @app_with_handlers.get("/test-llm")
        async def test_endpoint():
            raise LLMAppError(
                code="api_error",
                message="LLM service returned an error"
            )

        response = client.get("/test-llm")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "api_error"

    def test_storage_error_returns_500(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify StorageAppError returns HTTP 500."""
        @app_with_handlers.get("/test-storage")
        async def test_endpoint():
            raise StorageAppError(
                code="child_registry_corrupt",
                message="Child registry file is not valid JSON"
            )

        response = client.get("/test-storage")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "child_registry_corrupt"

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify error responses have consistent JSON structure."""
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise ValidationAppError(code="test", message="test")

        response = client.get("/test-format")
        data = response.json()

        # Required fields always present
        assert "error" in data
        assert "code" in data["error"]
        assert "message" in data["error"]
        assert "request_id" in data["error"]
        assert "details" not in data["error"]


class TestRateLimitHandler:
    """Test handler for rejected (over budget) requests."""

    def test_rate_limit_exceeded_returns_429(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/test-rate-limit")
        async def test_endpoint():
            raise RateLimitExceeded(
                RateLimitResult(
                    allowed=False,
                    limit=10,
                    remaining=0,
                    reset_at=1_700_000_060.0,
                    retry_after_seconds=42,
                )
            )

        response = client.get("/test-rate-limit")

        assert response.status_code == 429
        assert response.json()["rateLimit"] == {
            "limit": 10,
            "remaining": 0,
            "resetTime": 1_700_000_060_000,
            "retryAfter": 42,
        }
        assert response.headers["Retry-After"] == "42"


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        """Verify fallback exception handler is registered."""
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self):
        """Verify general_exception_handler returns correct structure."""
        from agent_memory.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: database connection failed")
        response = asyncio.run(general_exception_handler(request, exc))

        # Verify response structure
        response_body = response.body if isinstance(response.body, bytes) else bytes(response.body)
        data = json.loads(response_body.decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        # Original error message should NOT be in response
        assert "database connection" not in data["error"]["message"]
        assert "request_id" in data["error"]

    def test_general_exception_handler_never_leaks_stack_trace(self):
        """Verify stack traces are never included in response."""
        from agent_memory.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = ValueError("Test error with details")
        response = asyncio.run(general_exception_handler(request, exc))

        response_body = response.body if isinstance(response.body, bytes) else bytes(response.body)
        response_text = response_body.decode()
        # No traceback indicators
        assert "Traceback" not in response_text
        assert "File \"" not in response_text
        assert "ValueError" not in response_text


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        """Verify setup_exception_handlers properly registers handlers."""
        assert RateLimitExceeded in app_with_handlers.exception_handlers
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        """Verify calling setup_exception_handlers multiple times is safe."""
        app = FastAPI()

        # Should not raise or fail
        setup_exception_handlers(app)
        setup_exception_handlers(app)  # Second call should override safely

        assert AppError in app.exception_handlers
