"""
Integration tests for health check endpoints.
"""


class TestHealthEndpoints:
    """Tests for /api/health endpoints."""

    def test_health_check_basic(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["components"]["database"]["status"] == "healthy"
        assert data["components"]["storage"]["status"] == "healthy"
        # No default Gemini key in the test environment
        assert data["components"]["gemini_api"]["status"] == "degraded"
        assert data["status"] == "degraded"

    def test_detailed_health_without_database(self, no_db_client):
        response = no_db_client.get("/api/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["components"]["database"]["status"] == "unhealthy"
        assert data["status"] == "unhealthy"

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Prompt Gallery"
        assert data["health"] == "/api/health"
