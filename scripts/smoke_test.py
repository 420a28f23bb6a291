#!/usr/bin/env python3
"""
Exercise a running deployment end to end: login, the road hierarchy and a
road-development project round trip. Everything the run creates is deleted
again at the end.

Environment variables (or .env file):
  API_BASE_URL     default http://localhost:8000
  ADMIN_USERNAME   default admin
  ADMIN_PASSWORD   default admin
"""

import os
import sys
import uuid

import httpx
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000").rstrip("/")
ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")


class SmokeTestFailure(Exception):
    pass


def call(client: httpx.Client, method: str, path: str, expected: int = 200, **kwargs):
    resp = client.request(method, path, **kwargs)
    print(f"  {method} {path} -> {resp.status_code}")
    if resp.status_code != expected:
        raise SmokeTestFailure(f"{method} {path}: expected {expected}, got {resp.status_code}: {resp.text}")
    return resp.json()


def check_login(client: httpx.Client) -> str:
    print("Logging in ...")
    call(client, "POST", "/auth/login", expected=401, json={"username": ADMIN_USERNAME, "password": "wrong"})
    body = call(client, "POST", "/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    return body["token"]


def check_hierarchy(client: httpx.Client, suffix: str) -> None:
    print("Checking the road hierarchy ...")
    road = call(client, "POST", "/roads", expected=201, json={"name": f"Smoke Road {suffix}"})
    call(client, "POST", "/roads", expected=409, json={"name": road["name"]})

    sub_road = call(client, "POST", "/sub-roads", expected=201, json={"name": "Smoke Lane", "road_id": road["id"]})
    call(client, "DELETE", f"/roads/{road['id']}", expected=400)

    address = {"address": "1 Smoke Street"}
    created = call(client, "POST", f"/roads/{road['id']}/addresses", expected=201, json=address)
    call(client, "POST", f"/roads/{road['id']}/addresses", expected=409, json=address)

    call(client, "DELETE", f"/addresses/{created['id']}")
    call(client, "DELETE", f"/sub-roads/{sub_road['id']}")
    call(client, "DELETE", f"/roads/{road['id']}")


def check_road_development(client: httpx.Client, suffix: str) -> None:
    print("Checking road development ...")
    roads = call(client, "GET", "/roads")
    if not roads:
        raise SmokeTestFailure("No roads found, seed at least one road first")

    project = call(
        client,
        "POST",
        "/road-development",
        expected=201,
        json={
            "name": f"Smoke Development Lane {suffix}",
            "road_id": roads[0]["id"],
            "width": 30,
            "height": 25,
            "cost_per_sq_ft": 450,
        },
    )
    if project["square_feet"] != 750 or project["total_cost"] != 337500:
        raise SmokeTestFailure(f"Unexpected cost calculation: {project}")

    stats = call(client, "GET", "/road-development", params={"stats": "true"})
    print(f"  {stats['totalProjects']} project(s), estimated cost {stats['totalEstimatedCost']}")

    call(
        client,
        "PUT",
        "/road-development",
        json={"id": project["id"], "width": 35, "height": 25, "cost_per_sq_ft": 450, "development_status": "in_progress"},
    )
    call(client, "DELETE", "/road-development", json={"id": project["id"]})


def main() -> None:
    suffix = uuid.uuid4().hex[:8]
    print(f"Smoke testing {API_BASE_URL}")

    with httpx.Client(base_url=API_BASE_URL, timeout=30) as client:
        health = call(client, "GET", "/health")
        print(f"  backend: {health['backend']}")

        token = check_login(client)
        client.headers["Authorization"] = f"Bearer {token}"

        check_hierarchy(client, suffix)
        check_road_development(client, suffix)

        logs = call(client, "GET", "/activity-logs", params={"limit": 5})
        print(f"  {logs['count']} activity log entries")

        call(client, "POST", "/auth/logout")

    print("\nAll smoke checks passed.")


if __name__ == "__main__":
    try:
        main()
    except (SmokeTestFailure, httpx.HTTPError) as exc:
        print(f"\nSmoke test failed: {exc}", file=sys.stderr)
        sys.exit(1)
