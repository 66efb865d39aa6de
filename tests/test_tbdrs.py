from __future__ import annotations
import pytest

from app import create_app
from extensions import db


@pytest.fixture()
def client():
    app = create_app("test")
    with app.app_context():
        db.create_all()
    yield app.test_client()
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def auth(client):
    client.post("/register", json={
        "firstname": "Admin", "lastname": "User", "email": "admin@school.edu",
        "password": "secret123", "role": "teacher",
    })
    rv = client.post("/login", json={"email": "admin@school.edu", "password": "secret123"})
    return {"Authorization": f"Bearer {rv.get_json()['token']}"}


def _make(client, auth, path, key, field, name):
    rv = client.post(f"/{path}", json={field: name}, headers=auth)
    assert rv.status_code == 201, rv.get_json()
    return rv.get_json()[key]["id"]


@pytest.fixture()
def parts(client, auth):
    return {
        "track_id": _make(client, auth, "tracks", "track", "track_name", "Academic"),
        "building_id": _make(client, auth, "buildings", "building", "building_name", "Main"),
        "department_id": _make(client, auth, "departments", "department", "department_name", "Senior High"),
        "section_id": _make(client, auth, "sections", "section", "section_name", "Grade 11 - A"),
    }


def test_create_expands_all_four_parts(client, auth, parts):
    rv = client.post("/tbdrs-merge", json=parts, headers=auth)
    assert rv.status_code == 201
    body = rv.get_json()
    assert body["message"] == "TBDRS merge created successfully"
    row = body["tbdrs_merge"]
    assert row["track"]["track_name"] == "Academic"
    assert row["building"]["building_name"] == "Main"
    assert row["department"]["department_name"] == "Senior High"
    assert row["section"]["section_name"] == "Grade 11 - A"
    assert rv.headers["Location"].endswith(f"/tbdrs-merge/{row['id']}")

    rv = client.get("/tbdrs-merge", headers=auth)
    rows = rv.get_json()["tbdrs_merges"]
    assert len(rows) == 1
    assert rows[0]["section"]["id"] == parts["section_id"]

    rv = client.get(f"/tbdrs-merge/{row['id']}", headers=auth)
    assert rv.get_json()["tbdrs_merge"]["department"]["id"] == parts["department_id"]


def test_duplicate_combination_returns_existing_row(client, auth, parts):
    first = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]

    rv = client.post("/tbdrs-merge", json=parts, headers=auth)
    assert rv.status_code == 422
    body = rv.get_json()
    assert body["message"] == "This TBDRS combination already exists"
    assert body["tbdrs_merge"]["id"] == first["id"]
    assert body["tbdrs_merge"]["track"]["track_name"] == "Academic"
    assert len(client.get("/tbdrs-merge", headers=auth).get_json()["tbdrs_merges"]) == 1


def test_combinations_differing_in_one_part_coexist(client, auth, parts):
    other_section = _make(client, auth, "sections", "section", "section_name", "Grade 11 - B")
    a = client.post("/tbdrs-merge", json=parts, headers=auth)
    b = client.post("/tbdrs-merge", json={**parts, "section_id": other_section}, headers=auth)
    assert a.status_code == b.status_code == 201

    # duplicates are caught whichever was inserted first
    assert client.post("/tbdrs-merge", json={**parts, "section_id": other_section}, headers=auth).status_code == 422
    assert client.post("/tbdrs-merge", json=parts, headers=auth).status_code == 422


def test_update_into_existing_combination_is_rejected(client, auth, parts):
    other_section = _make(client, auth, "sections", "section", "section_name", "Grade 11 - B")
    a = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]
    b = client.post("/tbdrs-merge", json={**parts, "section_id": other_section}, headers=auth).get_json()["tbdrs_merge"]

    rv = client.put(f"/tbdrs-merge/{b['id']}", json=parts, headers=auth)
    assert rv.status_code == 422
    assert rv.get_json()["tbdrs_merge"]["id"] == a["id"]

    # re-saving a row with its own values is fine
    rv = client.put(f"/tbdrs-merge/{a['id']}", json=parts, headers=auth)
    assert rv.status_code == 200
    assert rv.get_json()["message"] == "TBDRS merge updated successfully"

    third_section = _make(client, auth, "sections", "section", "section_name", "Grade 12 - A")
    rv = client.put(f"/tbdrs-merge/{b['id']}", json={**parts, "section_id": third_section}, headers=auth)
    assert rv.status_code == 200
    assert rv.get_json()["tbdrs_merge"]["section"]["section_name"] == "Grade 12 - A"


def test_validation_of_references(client, auth, parts):
    rv = client.post("/tbdrs-merge", json={}, headers=auth)
    assert rv.status_code == 422
    assert rv.get_json()["errors"] == {
        "track_id": ["The track id field is required."],
        "building_id": ["The building id field is required."],
        "department_id": ["The department id field is required."],
        "section_id": ["The section id field is required."],
    }

    rv = client.post("/tbdrs-merge", json={**parts, "track_id": 999, "section_id": 998}, headers=auth)
    assert rv.status_code == 422
    assert rv.get_json()["errors"] == {
        "track_id": ["The selected track id is invalid."],
        "section_id": ["The selected section id is invalid."],
    }


def test_missing_rows_are_404(client, auth, parts):
    for call in (client.get, client.delete):
        rv = call("/tbdrs-merge/77", headers=auth)
        assert rv.status_code == 404
        assert rv.get_json() == {"message": "TBDRS merge not found"}
    assert client.put("/tbdrs-merge/77", json=parts, headers=auth).status_code == 404


def test_referenced_parts_cannot_be_deleted(client, auth, parts):
    tid = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]["id"]

    rv = client.delete(f"/tracks/{parts['track_id']}", headers=auth)
    assert rv.status_code == 422
    assert rv.get_json() == {
        "message": "Track is still in use and cannot be deleted",
        "references": {"tbdrs_merges": 1},
    }
    assert client.delete(f"/sections/{parts['section_id']}", headers=auth).status_code == 422
    assert client.delete(f"/departments/{parts['department_id']}", headers=auth).status_code == 422
    assert client.delete(f"/buildings/{parts['building_id']}", headers=auth).get_json()["references"] == {
        "tbdrs_merges": 1,
    }

    assert client.delete(f"/tbdrs-merge/{tid}", headers=auth).status_code == 200
    assert client.delete(f"/tracks/{parts['track_id']}", headers=auth).status_code == 200


def test_delete_cascades_to_student_assignments(client, auth, parts):
    rv = client.post("/register", json={
        "firstname": "Kid", "lastname": "Student", "email": "kid@school.edu",
        "password": "secret123", "role": "student",
    })
    student_id = rv.get_json()["user"]["id"]
    tid = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]["id"]
    aid = client.post("/std-tbdrs-merge", json={"uusers_id": student_id, "tbdrs_id": tid},
                      headers=auth).get_json()["std_tbdrs_merge"]["id"]

    rv = client.delete(f"/tbdrs-merge/{tid}", headers=auth)
    assert rv.status_code == 200
    assert rv.get_json() == {"message": "TBDRS merge deleted successfully"}
    assert client.get(f"/std-tbdrs-merge/{aid}", headers=auth).status_code == 404
    assert client.get("/std-tbdrs-merge", headers=auth).get_json()["std_tbdrs_merges"] == []


def _miss_once(monkeypatch, name):
    """Make the duplicate pre-check ``name`` in the tbdrs routes miss on its first call."""
    import blueprints.tbdrs.routes as routes
    real = getattr(routes, name)
    calls = []

    def lookup(*args, **kwargs):
        calls.append(args)
        return None if len(calls) == 1 else real(*args, **kwargs)

    monkeypatch.setattr(routes, name, lookup)
    return calls


def test_duplicate_caught_by_constraint_returns_existing_row(client, auth, parts, monkeypatch):
    first = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]
    calls = _miss_once(monkeypatch, "find_combination")

    rv = client.post("/tbdrs-merge", json=parts, headers=auth)
    assert rv.status_code == 422
    body = rv.get_json()
    assert body["message"] == "This TBDRS combination already exists"
    assert body["tbdrs_merge"]["id"] == first["id"]
    assert body["tbdrs_merge"]["section"]["section_name"] == "Grade 11 - A"
    assert len(calls) == 2
    assert len(client.get("/tbdrs-merge", headers=auth).get_json()["tbdrs_merges"]) == 1


def test_update_caught_by_constraint_returns_existing_row(client, auth, parts, monkeypatch):
    other_section = _make(client, auth, "sections", "section", "section_name", "Grade 11 - B")
    a = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]
    b = client.post("/tbdrs-merge", json={**parts, "section_id": other_section}, headers=auth).get_json()["tbdrs_merge"]
    _miss_once(monkeypatch, "find_combination")

    rv = client.put(f"/tbdrs-merge/{b['id']}", json=parts, headers=auth)
    assert rv.status_code == 422
    assert rv.get_json()["tbdrs_merge"]["id"] == a["id"]
    rv = client.get(f"/tbdrs-merge/{b['id']}", headers=auth)
    assert rv.get_json()["tbdrs_merge"]["section_id"] == other_section


def test_assignment_duplicate_caught_by_constraint(client, auth, parts, monkeypatch):
    rv = client.post("/register", json={
        "firstname": "Kid", "lastname": "Student", "email": "kid@school.edu",
        "password": "secret123", "role": "student",
    })
    student_id = rv.get_json()["user"]["id"]
    tid = client.post("/tbdrs-merge", json=parts, headers=auth).get_json()["tbdrs_merge"]["id"]
    payload = {"uusers_id": student_id, "tbdrs_id": tid}
    first = client.post("/std-tbdrs-merge", json=payload, headers=auth).get_json()["std_tbdrs_merge"]
    _miss_once(monkeypatch, "find_assignment")

    rv = client.post("/std-tbdrs-merge", json=payload, headers=auth)
    assert rv.status_code == 422
    body = rv.get_json()
    assert body["message"] == "This student is already assigned to this TBDRS"
    assert body["std_tbdrs_merge"]["id"] == first["id"]


def test_out_of_range_ids(client, auth, parts):
    huge = 2**70
    rv = client.get(f"/tbdrs-merge/{huge}", headers=auth)
    assert rv.status_code == 404
    assert rv.get_json() == {"message": "TBDRS merge not found"}

    rv = client.post("/tbdrs-merge", json={**parts, "track_id": huge}, headers=auth)
    assert rv.status_code == 422
    assert rv.get_json()["errors"] == {"track_id": ["The selected track id is invalid."]}
