"""Architectural tests for the published JSON schema of module worksheets."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest
from jsonschema import Draft202012Validator


PROJECT_ROOT = Path(__file__).resolve().parents[2]
SCHEMAS_DIR = PROJECT_ROOT / "docs" / "schemas"
MODULE_SCHEMA = SCHEMAS_DIR / "ModuleTestSuite.schema.json"


def _load_json(path: Path) -> Dict[str, Any]:
    """Load JSON from path, failing the test with a clear message on error."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        pytest.fail(f"Expected file is missing: {path}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        pytest.fail(f"Invalid JSON in {path}: {exc}")


def test_schema_is_valid_draft_2020_12():
    schema = _load_json(MODULE_SCHEMA)
    assert schema.get("$schema") == "https://json-schema.org/draft/2020-12/schema"
    Draft202012Validator.check_schema(schema)


def test_schema_is_closed_at_top_level():
    schema = _load_json(MODULE_SCHEMA)
    assert schema.get("additionalProperties") is False
    assert set(schema["required"]) <= set(schema["properties"])


def test_test_id_pattern_accepts_generated_ids():
    schema = _load_json(MODULE_SCHEMA)
    validator = Draft202012Validator({**schema["$defs"]["TestCase"]["properties"]["test_id"]})
    assert validator.is_valid("TC-POS-01-001")
    assert validator.is_valid("TC-A-12-104")
    assert not validator.is_valid("TC-POSTS-01-001")
    assert not validator.is_valid("POS-01-001")


def test_summary_requires_tester_fields():
    schema = _load_json(MODULE_SCHEMA)
    summary = schema["properties"]["test_summary"]
    for key in ("total_test_cases", "passed", "failed", "not_tested", "tester_name", "test_date", "notes"):
        assert key in summary["required"], key
