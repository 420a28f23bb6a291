import pytest
from sqlalchemy import func, select

from app.models import Household, Member
from app.registration import coerce_offers, location_breadcrumb
from conftest import household_payload, member_form


def member_payload(household_id: int, nic: str, **overrides) -> dict:
    payload = {
        "household_id": household_id,
        "full_name": f"Person {nic}",
        "name_with_initial": f"P. {nic}",
        "nic": nic,
        "gender": "female",
        "occupation": "Teacher",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def household_id(client):
    resp = client.post("/households", json=household_payload(1))
    assert resp.status_code == 201
    return resp.json()["household"]["id"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (["Samurdhi", None, "", "Aswasuma"], ["Samurdhi", "Aswasuma"]),
        ("Samurdhi", ["Samurdhi"]),
        (None, []),
        ("", []),
    ],
)
def test_coerce_offers(value, expected):
    assert coerce_offers(value) == expected


def test_location_breadcrumb_skips_empty_parts():
    assert location_breadcrumb("Main Road", "Sub Road A", "123 Sample Address") == "Main Road > Sub Road A > 123 Sample Address"
    assert location_breadcrumb("Main Road", "", "1 Main Road") == "Main Road > 1 Main Road"


def test_household_with_members_is_registered_together(client):
    members = [member_form("199012345678"), member_form("199112345678", gender="female"), member_form("200512345678")]
    resp = client.post("/households", json=household_payload(1, members))
    assert resp.status_code == 201

    body = resp.json()
    assert body["message"] == "Household created successfully"
    household = body["household"]
    assert household["address_id"] == 1
    assert household["resident_type"] == "permanent"

    listed = [m for m in client.get("/members").json() if m["household_id"] == household["id"]]
    assert len(listed) == 3
    for member in listed:
        assert member["resident_type"] == "permanent"
        assert member["waste_disposal"] == "local_council"
        assert member["assessment_number"] == "A-100"
        assert member["address"] == "123 Sample Address"
        assert member["road_name"] == "Main Road"
        assert member["sub_road_name"] == "Sub Road A"
        assert member["location"] == "Main Road > Sub Road A > 123 Sample Address"
        assert member["offers"] == "Samurdhi"
        assert member["household_created_at"] is not None


def test_duplicate_nic_within_the_payload_writes_nothing(client, run_db):
    members = [member_form("111111111V"), member_form("111111111V")]
    resp = client.post("/households", json=household_payload(1, members))
    assert resp.status_code == 409
    assert "111111111V" in resp.json()["error"]

    async def household_count(session):
        return await session.scalar(select(func.count(Household.id)))

    assert run_db(household_count) == 0


def test_duplicate_nic_against_existing_members(client):
    assert client.post("/households", json=household_payload(1, [member_form("222222222V")])).status_code == 201

    resp = client.post("/households", json=household_payload(2, [member_form("222222222V")]))
    assert resp.status_code == 409
    assert resp.json() == {
        "error": "Duplicate NIC(s) found: 222222222V. These members already exist in the system."
    }


def test_household_address_must_exist(client):
    resp = client.post("/households", json=household_payload(999))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Address not found"}


def test_household_member_age_is_checked(client):
    resp = client.post("/households", json=household_payload(1, [member_form("333333333V", age=151)]))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Age must be between 0 and 150"}


def test_invalid_resident_type_is_a_400(client):
    payload = household_payload(1)
    payload["homeDetails"]["residentType"] = "visitor"
    assert client.post("/households", json=payload).status_code == 400


def test_get_and_update_household(client, household_id):
    assert client.get(f"/households/{household_id}").json()["id"] == household_id
    assert [h["id"] for h in client.get("/households").json()] == [household_id]
    assert client.get("/households/999").status_code == 404

    resp = client.put(f"/households/{household_id}", json={"assessment_number": "B-7"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required household fields"}

    resp = client.put(
        f"/households/{household_id}",
        json={"assessment_number": "B-7", "resident_type": "rent", "waste_disposal": "home"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["resident_type"] == "rent"
    assert body["assessment_number"] == "B-7"
    assert body["waste_disposal"] == "home"


def test_member_age_bounds(client, household_id):
    assert client.post("/members", json=member_payload(household_id, "150150150V", age=150)).status_code == 201

    resp = client.post("/members", json=member_payload(household_id, "151151151V", age=151))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Age must be between 0 and 150"}

    assert client.post("/members", json=member_payload(household_id, "000000000V", age=-1)).status_code == 400


def test_member_defaults(client, household_id):
    resp = client.post("/members", json=member_payload(household_id, "444444444V", offers_receiving="Mahapola"))
    assert resp.status_code == 201
    body = resp.json()
    assert body["member_type"] == "permanent"
    assert body["offers_receiving"] == ["Mahapola"]
    assert body["is_disabled"] is False
    assert body["is_thief"] is False


def test_member_required_fields(client, household_id):
    payload = member_payload(household_id, "555555555V")
    del payload["occupation"]
    resp = client.post("/members", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}


def test_member_for_unknown_household(client):
    resp = client.post("/members", json=member_payload(999, "666666666V"))
    assert resp.status_code == 400
    assert resp.json() == {"error": "Referenced record does not exist"}


def test_member_nic_is_unique(client, household_id):
    first = client.post("/members", json=member_payload(household_id, "777777777V")).json()
    second = client.post("/members", json=member_payload(household_id, "888888888V")).json()

    assert client.post("/members", json=member_payload(household_id, "777777777V")).status_code == 409

    resp = client.put(f"/members/{second['id']}", json=member_payload(household_id, "777777777V"))
    assert resp.status_code == 409
    assert resp.json() == {"error": "NIC already exists"}

    resp = client.put(f"/members/{first['id']}", json=member_payload(household_id, "777777777V", age=41))
    assert resp.status_code == 200
    assert resp.json()["age"] == 41


def test_soft_deleted_member_leaves_the_list_but_keeps_the_row(client, household_id, run_db):
    member = client.post("/members", json=member_payload(household_id, "999999999V")).json()

    resp = client.delete(f"/members/{member['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Member deleted successfully"}

    assert member["id"] not in [m["id"] for m in client.get("/members").json()]

    row = run_db(lambda session: session.get(Member, member["id"]))
    assert row is not None
    assert row.is_deleted is True

    assert client.delete(f"/members/{member['id']}").status_code == 404
    # the NIC is free again once its holder is deleted
    assert client.post("/members", json=member_payload(household_id, "999999999V")).status_code == 201


def test_members_are_ordered_by_full_name(client, household_id):
    client.post("/members", json=member_payload(household_id, "1V", full_name="Zara"))
    client.post("/members", json=member_payload(household_id, "2V", full_name="Amal"))
    assert [m["full_name"] for m in client.get("/members").json()] == ["Amal", "Zara"]
