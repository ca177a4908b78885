"""
Tests for core infrastructure views.
"""

from unittest.mock import patch

from django.db import DatabaseError
from django.urls import reverse


class TestHealthCheck:
    """Tests for the health check endpoint."""

    def test_healthy(self, client, db):
        response = client.get(reverse("health_check"))

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_database_down(self, client, db):
        with patch("core.views.connection.cursor", side_effect=DatabaseError("down")):
            response = client.get(reverse("health_check"))

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
