from app.dashboard import age_bracket, member_stats_from_rows, occupation_slices
from conftest import household_payload, member_form


def slice_values(slices: list[dict]) -> dict[str, int]:
    return {s["label"]: s["value"] for s in slices}


def test_stats_are_zero_without_records(client):
    assert client.get("/dashboard/stats").json() == {
        "totalMembers": 0,
        "totalHouseholds": 0,
        "totalBusinesses": 0,
        "totalRoadLamps": 0,
        "workingLamps": 0,
        "brokenLamps": 0,
    }


def test_member_stats_are_zero_without_members(client):
    stats = client.get("/dashboard/member-stats").json()
    assert slice_values(stats["genderStats"]) == {"Male": 0, "Female": 0, "Other": 0}
    assert slice_values(stats["ageGroups"]) == {"0-17": 0, "18-35": 0, "36-55": 0, "56+": 0}
    assert slice_values(stats["memberTypes"]) == {"Permanent": 0, "Temporary": 0}
    assert stats["occupations"] == []
    assert slice_values(stats["disabilities"]) == {"No Disability": 0, "With Disability": 0}


def test_stats_count_active_records(client):
    members = [member_form("1V"), member_form("2V"), member_form("3V")]
    household = client.post("/households", json=household_payload(1, members)).json()["household"]
    client.post("/households", json=household_payload(2))

    member_ids = [m["id"] for m in client.get("/members").json()]
    client.delete(f"/members/{member_ids[0]}")

    stats = client.get("/dashboard/stats").json()
    assert stats["totalMembers"] == 2
    assert stats["totalHouseholds"] == 2
    assert household["id"] in [h["id"] for h in client.get("/households").json()]


def test_member_stats_groups(client):
    members = [
        member_form("1V", gender="male", age=12, occupation="Student"),
        member_form("2V", gender="female", age=35, occupation="Teacher", memberType="temporary"),
        member_form("3V", gender="female", age=56, occupation="Teacher", isDisabled=True),
    ]
    client.post("/households", json=household_payload(1, members))

    stats = client.get("/dashboard/member-stats").json()
    assert slice_values(stats["genderStats"]) == {"Male": 1, "Female": 2, "Other": 0}
    assert slice_values(stats["ageGroups"]) == {"0-17": 1, "18-35": 1, "36-55": 0, "56+": 1}
    assert slice_values(stats["memberTypes"]) == {"Permanent": 2, "Temporary": 1}
    assert [s["label"] for s in stats["occupations"]] == ["Teacher", "Student"]
    assert slice_values(stats["disabilities"]) == {"No Disability": 2, "With Disability": 1}


def test_age_brackets():
    assert age_bracket(0) == "0-17"
    assert age_bracket(17) == "0-17"
    assert age_bracket(18) == "18-35"
    assert age_bracket(55) == "36-55"
    assert age_bracket(150) == "56+"
    assert age_bracket(None) is None


def test_occupation_colours_follow_first_appearance():
    slices = occupation_slices(["Student", None, "Farmer", "Farmer", ""])
    assert [(s.label, s.value, s.color) for s in slices] == [
        ("Other", 2, "#10B981"),
        ("Farmer", 2, "#F59E0B"),
        ("Student", 1, "#3B82F6"),
    ]


def test_member_without_age_is_not_bracketed():
    stats = member_stats_from_rows([("Male", None, "permanent", "Farmer", False)])
    assert sum(s.value for s in stats.ageGroups) == 0
    assert stats.genderStats[0].value == 1
