"""Tests for validated decoding of model output."""

from __future__ import annotations

import pytest

from ats_gate_core.decoding import (
    DecodeFailure,
    DecodeOk,
    decode_model,
    extract_json_object,
    parse_requirements,
)
from ats_gate_core.models.requirements import Domain, JobRequirements


@pytest.mark.unit
class TestExtractJsonObject:
    """Test locating the JSON body in free text."""

    def test_strips_markdown_fence(self) -> None:
        """Fenced JSON is extracted."""
        text = 'Here you go:\n```json\n{"domain": "qa"}\n```'
        assert extract_json_object(text) == '{"domain": "qa"}'

    def test_no_object(self) -> None:
        """Text without braces yields None."""
        assert extract_json_object("no json here") is None


@pytest.mark.unit
class TestParseRequirements:
    """Test parse_requirements on the shapes it receives."""

    def test_dict_input(self) -> None:
        """A valid dict decodes."""
        result = parse_requirements({"domain": "backend", "must_have_skills": ["go"]})
        assert isinstance(result, DecodeOk)
        assert result.value.domain == Domain.BACKEND

    def test_json_string_with_prose(self) -> None:
        """JSON wrapped in prose decodes."""
        result = parse_requirements('Sure! {"domain": "devops"} Hope that helps.')
        assert result.ok
        assert isinstance(result, DecodeOk)
        assert result.value.domain == Domain.DEVOPS

    def test_bytes_input(self) -> None:
        """UTF-8 bytes decode."""
        result = parse_requirements(b'{"domain": "mobile"}')
        assert isinstance(result, DecodeOk)

    def test_model_instance_passthrough(self) -> None:
        """An existing model instance is returned as-is."""
        reqs = JobRequirements(domain=Domain.QA)
        result = parse_requirements(reqs)
        assert isinstance(result, DecodeOk)
        assert result.value is reqs

    @pytest.mark.parametrize(
        ("raw", "reason"),
        [
            ('{"domain": "backend", "must_have', "no JSON object found"),
            ('{"domain": backend}', "invalid JSON"),
            ("[1, 2, 3]", "no JSON object found"),
            (42, "expected object"),
            ({"must_have_skills": ["x"]}, "schema mismatch"),
        ],
    )
    def test_failures_never_raise(self, raw: object, reason: str) -> None:
        """Truncated, non-JSON and schema-violating input yields DecodeFailure."""
        result = parse_requirements(raw)
        assert isinstance(result, DecodeFailure)
        assert result.ok is False
        assert reason in result.reason

    def test_decode_model_generic(self) -> None:
        """decode_model works for any pydantic model."""
        result = decode_model({"domain": "design"}, JobRequirements)
        assert isinstance(result, DecodeOk)
        assert result.value.domain == Domain.DESIGN
