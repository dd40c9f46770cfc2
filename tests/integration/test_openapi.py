"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client for the application (lifespan not started)."""
    return TestClient(app)


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_accessible(self, client: TestClient) -> None:
        response = client.get("/openapi.json")
        assert response.status_code == 200
        schema = response.json()
        assert "openapi" in schema
        assert "paths" in schema

    def test_openapi_title_and_version(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        assert schema["info"]["title"] == "docmailer"
        assert schema["info"]["version"] == "0.1.0"

    def test_send_code_endpoint_in_schema(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        send_code = schema["paths"]["/api/v1/send-code"]
        assert send_code["post"]["summary"] == "Send a verification code"
        assert {"400", "429", "502"} <= set(send_code["post"]["responses"])

    def test_verify_endpoint_in_schema(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        verify = schema["paths"]["/api/v1/verify-and-send"]
        assert verify["post"]["summary"] == "Verify code and send the PDF"
        assert {"400", "404", "429", "502"} <= set(verify["post"]["responses"])

    def test_verify_request_schema(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        verify_request = schema["components"]["schemas"]["VerifyRequest"]
        assert set(verify_request["required"]) == {"email", "code"}
        assert verify_request["properties"]["code"]["pattern"] == "^[0-9]{6}$"

    def test_health_endpoint_in_schema(self, client: TestClient) -> None:
        schema = client.get("/openapi.json").json()
        assert "/health" in schema["paths"]


class TestCors:
    """Tests for CORS configuration."""

    def test_preflight_allowed_for_configured_origin(self, client: TestClient) -> None:
        response = client.options(
            "/api/v1/send-code",
            headers={
                "Origin": "https://tinepasul.info",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://tinepasul.info"

    def test_preflight_rejected_for_other_origin(self, client: TestClient) -> None:
        response = client.options(
            "/api/v1/send-code",
            headers={
                "Origin": "https://evil.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert "access-control-allow-origin" not in response.headers
