"""
tests/helpers.py -- Request helpers shared by the route test modules.

One TestClient holds one cookie jar, so tests that need several actors log in
as each of them in turn on the same client.
"""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient
from httpx import Response

ADMIN_USERNAME = "root"
ADMIN_PASSWORD = "rootpass1"

TREE_BODY: dict[str, Any] = {
    "name": "Oak",
    "scientificName": "Quercus robur",
    "description": "Large deciduous tree with lobed leaves.",
    "habitat": "Temperate forests of Europe",
    "image": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg==",
    "facts": {"Height": "up to 40 m", "Lifespan": "several centuries"},
}


def register(client: TestClient, username: str, password: str = "secret1", email: str | None = None) -> Response:
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )


def login(client: TestClient, username: str, password: str = "secret1") -> Response:
    return client.post("/api/auth/login", json={"username": username, "password": password})


def login_admin(client: TestClient) -> Response:
    return login(client, ADMIN_USERNAME, ADMIN_PASSWORD)


def create_tree(client: TestClient, **overrides: Any) -> int:
    resp = client.post("/api/trees", json={**TREE_BODY, **overrides})
    assert resp.status_code == 200, f"Expected 200, got {resp.status_code}: {resp.text}"
    return resp.json()["id"]


def current_user(client: TestClient) -> dict[str, Any] | None:
    return client.get("/api/auth/check").json()["user"]
