"""
Tests for health check endpoints.
"""

from sqlalchemy.exc import OperationalError


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        """Basic health check should return healthy status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "food-api"
        assert data["environment"] == "test"

    def test_detailed_health_check(self, client):
        """Detailed health check should report database status."""
        response = client.get("/api/health/detailed")
        assert response.status_code == 200
        data = response.json()
        assert data["dependencies"]["database"]["status"] == "healthy"

    def test_detailed_health_check_reports_unreachable_database(self, client, monkeypatch):
        """Detailed health check should answer 503 when the database cannot be reached."""

        def broken_session():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(client.app.state, "session_factory", broken_session)

        response = client.get("/api/health/detailed")
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["dependencies"]["database"]["status"] == "unhealthy"
