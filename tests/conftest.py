import pytest
from fastapi.testclient import TestClient

from app.auth import generate_token
from app.config import settings
from app.main import app


@pytest.fixture(autouse=True)
def fixture_settings(monkeypatch):
    """Every test runs against a fresh in-memory fixture store with default auth."""
    monkeypatch.setattr(settings, "DATABASE_URL", "")
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "")
    monkeypatch.setattr(settings, "JWT_SECRET", "test-secret")
    monkeypatch.setattr(settings, "TOKEN_TTL_HOURS", 24)
    monkeypatch.setattr(settings, "REQUIRE_AUTH_FOR_WRITES", False)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {generate_token('admin')}"}


@pytest.fixture
def run_db(client):
    """Run ``fn(session, *args)`` on the app's event loop with a fresh session."""
    backend = client.app.state.backend

    def _run(fn, *args):
        async def _call():
            async with backend.sessionmaker() as session:
                return await fn(session, *args)

        return client.portal.call(_call)

    return _run


def member_form(nic: str, **overrides) -> dict:
    member = {
        "fullName": f"Member {nic}",
        "nameWithInitial": f"M. {nic}",
        "memberType": "permanent",
        "nic": nic,
        "gender": "male",
        "age": 30,
        "occupation": "Farmer",
        "offersReceiving": ["Samurdhi"],
        "isDisabled": False,
        "landHouseStatus": "own",
    }
    member.update(overrides)
    return member


def household_payload(address_id: int = 1, members: list[dict] | None = None) -> dict:
    return {
        "homeDetails": {"assessmentNumber": "A-100", "residentType": "permanent", "wasteDisposal": "local_council"},
        "members": members or [],
        "addressId": address_id,
    }
