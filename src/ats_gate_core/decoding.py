"""Validated decoding of loosely-typed model output into tagged results."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from ats_gate_core.models.requirements import JobRequirements

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class DecodeOk(Generic[T]):
    """Successful decode carrying the validated value."""

    value: T
    ok: bool = True


@dataclass(frozen=True)
class DecodeFailure:
    """Failed decode with a short reason; never carries partial data."""

    reason: str
    ok: bool = False


def extract_json_object(text: str) -> str | None:
    """Return the outermost ``{...}`` span in text, or None.

    Tolerates markdown fences and prose around the JSON body.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def decode_model(
    raw: object, model_cls: type[T]
) -> DecodeOk[T] | DecodeFailure:
    """Decode str/bytes/dict/model input into ``model_cls``.

    Never raises: truncated, non-JSON or schema-violating input yields a
    DecodeFailure.
    """
    if isinstance(raw, model_cls):
        return DecodeOk(raw)
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        body = extract_json_object(raw)
        if body is None:
            return DecodeFailure("no JSON object found")
        try:
            raw = json.loads(body)
        except json.JSONDecodeError as exc:
            return DecodeFailure(f"invalid JSON: {exc.msg}")
    if not isinstance(raw, dict):
        return DecodeFailure(f"expected object, got {type(raw).__name__}")
    try:
        return DecodeOk(model_cls.model_validate(raw))
    except ValidationError as exc:
        return DecodeFailure(f"schema mismatch: {exc.error_count()} error(s)")


def parse_requirements(raw: object) -> DecodeOk[JobRequirements] | DecodeFailure:
    """Decode job requirements from cached or model-produced data."""
    return decode_model(raw, JobRequirements)
