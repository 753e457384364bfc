# Overview: Department and city lists for the checkout form (api-colombia).

"""
Geographic lookup.

The upstream API is public and unauthenticated. Any failure degrades to an
empty list so the checkout form can still render; the shopper then types the
values by hand.
"""

from __future__ import annotations

import httpx
from flask import current_app


def _get_json_list(path: str, client: httpx.Client | None = None) -> list[dict]:
    cfg = current_app.config
    url = f"{cfg['GEO_API_BASE'].rstrip('/')}/{path.lstrip('/')}"

    try:
        if client is None:
            with httpx.Client(timeout=cfg["GEO_API_TIMEOUT"]) as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        current_app.logger.warning("Geo lookup failed for %s: %s", url, exc)
        return []

    if not isinstance(data, list):
        current_app.logger.warning("Geo lookup for %s returned a non-list payload", url)
        return []

    return [
        {"id": row.get("id"), "name": row.get("name"), "description": row.get("description")}
        for row in data
        if isinstance(row, dict)
    ]


def get_departments(client: httpx.Client | None = None) -> list[dict]:
    return _get_json_list("/Department", client=client)


def get_cities_by_department(department_id: int, client: httpx.Client | None = None) -> list[dict]:
    return _get_json_list(f"/Department/{department_id}/cities", client=client)
