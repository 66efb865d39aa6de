from __future__ import annotations
import pytest
from pydantic import ValidationError

from app import create_app
from extensions import db
from models import Building
from blueprints.auth.schemas import RegisterIn
from blueprints.core.errors import ValidationFailed
from blueprints.core.validators import Validator, format_errors
from blueprints.directory.schemas import BuildingIn, RoomIn


@pytest.fixture()
def app_ctx():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


def _errors(schema, payload):
    with pytest.raises(ValidationError) as ei:
        schema.model_validate(payload)
    return format_errors(ei.value)


def test_missing_fields_are_required():
    errs = _errors(RoomIn, {})
    assert errs == {
        "room_name": ["The room name field is required."],
        "room_number": ["The room number field is required."],
        "building_id": ["The building id field is required."],
    }


def test_blank_string_counts_as_missing():
    errs = _errors(BuildingIn, {"building_name": "   "})
    assert errs == {"building_name": ["The building name field is required."]}


def test_length_type_and_enum_messages():
    errs = _errors(RoomIn, {"room_name": "x" * 256, "room_number": 101, "building_id": "abc"})
    assert errs["room_name"] == ["The room name field must not be greater than 255 characters."]
    assert errs["room_number"] == ["The room number field must be a string."]
    assert errs["building_id"] == ["The building id field must be an integer."]

    errs = _errors(RegisterIn, {"firstname": "A", "lastname": "B", "email": "nope",
                                "password": "123", "role": "admin"})
    assert errs["email"] == ["The email field must be a valid email address."]
    assert errs["password"] == ["The password field must be at least 6 characters."]
    assert errs["role"] == ["The selected role is invalid."]


def test_unique_rule_and_ignore_id(app_ctx):
    b = Building(building_name="Main")
    db.session.add(b)
    db.session.commit()

    v = Validator(BuildingIn, {"building_name": "Main"}).unique("building_name", Building.building_name)
    assert v.errors == {"building_name": ["The building name has already been taken."]}

    v = Validator(BuildingIn, {"building_name": "Main"}).unique(
        "building_name", Building.building_name, ignore_id=b.id)
    assert v.errors == {}
    assert v.validated().building_name == "Main"


def test_rules_skip_fields_that_already_failed(app_ctx):
    v = Validator(BuildingIn, {}).unique("building_name", Building.building_name)
    assert v.errors == {"building_name": ["The building name field is required."]}


def test_exists_rule_runs_alongside_schema_errors(app_ctx):
    v = Validator(RoomIn, {"room_number": "101", "building_id": 999}).exists("building_id", Building)
    assert v.errors == {
        "room_name": ["The room name field is required."],
        "building_id": ["The selected building id is invalid."],
    }
    with pytest.raises(ValidationFailed) as ei:
        v.validated()
    assert ei.value.to_dict()["errors"] == v.errors


def test_non_object_payload_is_treated_as_empty(app_ctx):
    v = Validator(BuildingIn, ["Main"])
    assert v.errors == {"building_name": ["The building name field is required."]}
