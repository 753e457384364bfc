"""
Department/city lookups against a mocked api-colombia.
"""

import httpx

from storefront.services import geo_service


def mock_client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


DEPARTMENTS = [
    {"id": 2, "name": "Antioquia", "description": "Departamento de Antioquia", "population": 6407102},
    {"id": 5, "name": "Bolívar", "description": "Departamento de Bolívar"},
]


class TestGeoService:

    def test_departments(self, app):
        def handler(request):
            assert request.url == "https://geo.test/api/v1/Department"
            return httpx.Response(200, json=DEPARTMENTS)

        result = geo_service.get_departments(client=mock_client(handler))
        assert result == [
            {"id": 2, "name": "Antioquia", "description": "Departamento de Antioquia"},
            {"id": 5, "name": "Bolívar", "description": "Departamento de Bolívar"},
        ]

    def test_cities(self, app):
        def handler(request):
            assert request.url.path == "/api/v1/Department/2/cities"
            return httpx.Response(200, json=[{"id": 1, "name": "Medellín", "description": None}])

        result = geo_service.get_cities_by_department(2, client=mock_client(handler))
        assert [c["name"] for c in result] == ["Medellín"]

    def test_server_error_returns_empty(self, app):
        assert geo_service.get_departments(client=mock_client(lambda r: httpx.Response(503))) == []

    def test_bad_json_returns_empty(self, app):
        client = mock_client(lambda r: httpx.Response(200, content=b"<html>"))
        assert geo_service.get_departments(client=client) == []

    def test_non_list_returns_empty(self, app):
        client = mock_client(lambda r: httpx.Response(200, json={"error": "x"}))
        assert geo_service.get_departments(client=client) == []

    def test_transport_error_returns_empty(self, app, caplog):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        assert geo_service.get_departments(client=mock_client(handler)) == []
        assert "Geo lookup failed" in caplog.text


class TestGeoRoutes:

    def test_routes_degrade_to_empty_lists(self, client, monkeypatch):
        monkeypatch.setattr(geo_service, "get_departments", lambda: [])
        monkeypatch.setattr(geo_service, "get_cities_by_department", lambda department_id: [])

        assert client.get("/api/geo/departments").json == {"departments": []}
        assert client.get("/api/geo/departments/2/cities").json == {"cities": []}
