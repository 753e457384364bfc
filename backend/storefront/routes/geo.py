# Overview: Department and city lookups for the checkout form.

from flask import Blueprint

from ..services import geo_service

geo_bp = Blueprint("geo", __name__, url_prefix="/api/geo")


@geo_bp.get("/departments")
def list_departments():
    """Always 200; an upstream failure yields an empty list."""
    return {"departments": geo_service.get_departments()}


@geo_bp.get("/departments/<int:department_id>/cities")
def list_cities(department_id: int):
    return {"cities": geo_service.get_cities_by_department(department_id)}
