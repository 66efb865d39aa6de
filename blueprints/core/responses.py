from __future__ import annotations
from typing import Any, Iterable, Type

from flask import jsonify
from pydantic import BaseModel


def dump(schema: Type[BaseModel], obj: Any) -> dict:
    return schema.model_validate(obj).model_dump(mode="json")


def dump_many(schema: Type[BaseModel], rows: Iterable[Any]) -> list[dict]:
    return [dump(schema, r) for r in rows]


def ok(data: Any, status: int = 200):
    return jsonify(data), status


def created(location: str, data: Any):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp
