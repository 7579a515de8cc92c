"""Tests for flow definition validation."""

import pytest

from oauth_flow_engine.core import ValidationError, validate_flow
from oauth_flow_engine.core.validation import SEQUENCE_ERROR, FlowValidator


def with_steps(flow, numbers):
    flow["steps"] = [{"number": n, "id": f"s{i}", "title": f"Step {i}"} for i, n in enumerate(numbers)]
    return flow


class TestValidFlows:
    """Valid definitions pass with no errors."""

    def test_device_grant_scenario_is_valid(self, device_grant):
        report = validate_flow(device_grant)

        assert report.valid is True
        assert report.errors == []
        assert report.to_dict() == {"valid": True, "errors": [], "warnings": []}

    def test_full_flow_is_valid(self, full_flow):
        report = validate_flow(full_flow)

        assert report.valid
        assert report.errors == []

    def test_same_document_same_report(self, full_flow):
        assert validate_flow(full_flow).to_dict() == validate_flow(full_flow).to_dict()

    def test_config_fields_as_mapping(self, device_grant):
        device_grant["configSections"] = [{"id": "okta", "title": "Okta", "fields": ["oktaDomain"]}]
        device_grant["configFields"] = {"oktaDomain": {"label": "Okta Domain", "type": "text"}}

        assert validate_flow(device_grant).valid


class TestRequiredFields:
    """Top-level and per-step required fields."""

    @pytest.mark.parametrize("key", ["id", "name", "configType"])
    def test_missing_top_level_field(self, device_grant, key):
        del device_grant[key]

        report = validate_flow(device_grant)

        assert not report.valid
        assert f"Missing required field: {key}" in report.errors

    def test_steps_must_be_array(self, device_grant):
        device_grant["steps"] = {"number": 1}

        report = validate_flow(device_grant)

        assert not report.valid
        assert "Missing or invalid required field: steps (must be array)" in report.errors

    def test_errors_accumulate(self):
        report = validate_flow({"steps": [{"number": 1}]})

        assert "Missing required field: id" in report.errors
        assert "Missing required field: name" in report.errors
        assert "Missing required field: configType" in report.errors
        assert "Step 0: missing id" in report.errors
        assert "Step 0: missing title" in report.errors

    def test_step_missing_number(self, device_grant):
        del device_grant["steps"][1]["number"]

        report = validate_flow(device_grant)

        assert "Step 1: missing number" in report.errors

    def test_step_not_an_object(self, device_grant):
        device_grant["steps"].append("step three")

        assert "Step 2: must be an object" in validate_flow(device_grant).errors

    def test_non_integer_step_number(self, device_grant):
        device_grant["steps"][1]["number"] = "2"

        assert "Step 1: number must be an integer" in validate_flow(device_grant).errors

    def test_non_object_document(self):
        report = validate_flow(["not", "a", "flow"])

        assert not report.valid
        assert report.errors == ["Flow definition must be a JSON object"]


class TestStepNumbering:
    """Step numbers must form 1..N."""

    def test_gap_is_rejected(self, device_grant):
        report = validate_flow(with_steps(device_grant, [1, 2, 4]))

        assert not report.valid
        assert any("sequential" in error for error in report.errors)

    def test_must_start_at_one(self, device_grant):
        report = validate_flow(with_steps(device_grant, [2, 3]))

        assert report.errors == [SEQUENCE_ERROR]

    def test_sequence_error_reported_once(self, device_grant):
        report = validate_flow(with_steps(device_grant, [3, 5, 9]))

        assert report.errors.count(SEQUENCE_ERROR) == 1

    def test_unordered_but_contiguous_is_valid(self, device_grant):
        assert validate_flow(with_steps(device_grant, [2, 1, 3])).valid

    def test_duplicate_number_named_explicitly(self, device_grant):
        report = validate_flow(with_steps(device_grant, [1, 1, 2]))

        assert not report.valid
        assert report.errors == ["Duplicate step number 1 (steps: s0, s1)"]

    def test_duplicate_and_gap_both_reported(self, device_grant):
        report = validate_flow(with_steps(device_grant, [1, 1, 3]))

        assert "Duplicate step number 1 (steps: s0, s1)" in report.errors
        assert SEQUENCE_ERROR in report.errors

    def test_empty_steps_are_valid(self, device_grant):
        device_grant["steps"] = []

        assert validate_flow(device_grant).valid


class TestSectionReferences:
    """Every field a section references must exist."""

    def test_one_error_per_missing_reference(self, full_flow):
        full_flow["configSections"][0]["fields"] += ["ghost", "phantom"]
        full_flow["configSections"][1]["fields"].append("ghost")

        report = validate_flow(full_flow)

        assert report.errors == [
            'Section "okta" references unknown field: ghost',
            'Section "okta" references unknown field: phantom',
            'Section "client" references unknown field: ghost',
        ]

    @pytest.mark.parametrize("empty_fields", [[], {}])
    def test_references_checked_against_empty_fields(self, device_grant, empty_fields):
        device_grant["configSections"] = [{"id": "okta", "title": "Okta", "fields": ["ghost"]}]
        device_grant["configFields"] = empty_fields

        report = validate_flow(device_grant)

        assert not report.valid
        assert report.errors == ['Section "okta" references unknown field: ghost']

    def test_references_not_checked_without_fields(self, device_grant):
        device_grant["configSections"] = [{"id": "okta", "title": "Okta", "fields": ["ghost"]}]

        assert validate_flow(device_grant).valid


class TestWarnings:
    """Unknown enum values warn but do not invalidate."""

    def test_unknown_field_type_warns(self, full_flow):
        full_flow["configFields"][0]["type"] = "color-picker"

        report = validate_flow(full_flow)

        assert report.valid
        assert any("color-picker" in w for w in report.warnings)

    def test_unknown_actor_and_action_warn(self, device_grant):
        device_grant["steps"][0]["actor"] = "robot"
        device_grant["steps"][0]["button"] = {"label": "Go", "actionType": "teleport"}

        report = validate_flow(device_grant)

        assert report.valid
        assert len(report.warnings) == 2

    def test_unknown_state_warns(self, device_grant):
        device_grant["state"] = "archived"

        report = validate_flow(device_grant)

        assert report.valid
        assert report.warnings == ["Unknown state 'archived'"]


class TestReport:
    """Report formatting and raising."""

    def test_raise_if_invalid(self):
        report = validate_flow({"name": "x"})

        with pytest.raises(ValidationError) as exc_info:
            report.raise_if_invalid()

        assert "Missing required field: id" in exc_info.value.errors

    def test_raise_if_invalid_passes_valid_report(self, device_grant):
        validate_flow(device_grant).raise_if_invalid()

    def test_format_lists_errors(self):
        text = validate_flow({"name": "x"}).format()

        assert text.startswith("Validation FAILED")
        assert "Missing required field: id" in text

    def test_format_clean_report(self, device_grant):
        assert validate_flow(device_grant).format() == "✓ Validation passed with no issues"

    def test_validator_resets_between_runs(self, device_grant):
        validator = FlowValidator()
        validator.validate({})

        assert validator.validate(device_grant).valid
