"""Structural validation for flow definitions."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from .definition import ACTOR_CLASSES, ActionType, FieldType, FlowState, is_present, normalize_config_fields
from .errors import ValidationError

REQUIRED_FIELDS = ("id", "name", "configType")
STEP_REQUIRED_FIELDS = ("number", "id", "title")
SEQUENCE_ERROR = "Step numbers must be sequential starting from 1"


@dataclass
class ValidationMessage:
    """A validation message (error or warning)."""
    level: str  # "error", "warning"
    message: str
    location: str | None = None

    def __str__(self) -> str:
        icon = {"error": "✗", "warning": "⚠"}.get(self.level, "•")
        if self.location:
            return f"{icon} {self.message}  ({self.location})"
        return f"{icon} {self.message}"


@dataclass
class ValidationReport:
    """Complete validation report for a flow definition."""
    valid: bool
    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [m.message for m in self.messages if m.level == "error"]

    @property
    def warnings(self) -> list[str]:
        return [m.message for m in self.messages if m.level == "warning"]

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}

    def raise_if_invalid(self) -> None:
        """Raise ValidationError carrying every error message."""
        if not self.valid:
            raise ValidationError(f"Invalid flow: {', '.join(self.errors)}", errors=self.errors)

    def format(self) -> str:
        """Format the report as a string."""
        if not self.messages:
            return "✓ Validation passed with no issues"

        lines = []
        errors = [m for m in self.messages if m.level == "error"]
        warnings = [m for m in self.messages if m.level == "warning"]
        if errors:
            lines.append(f"Errors ({len(errors)}):")
            for msg in errors:
                lines.append(f"  {msg}")
        if warnings:
            lines.append(f"\nWarnings ({len(warnings)}):")
            for msg in warnings:
                lines.append(f"  {msg}")

        status = "FAILED" if not self.valid else "PASSED with warnings"
        lines.insert(0, f"Validation {status}")
        lines.insert(1, "=" * 50)

        return "\n".join(lines)


class FlowValidator:
    """
    Validates flow definitions before they are saved or served.

    Checks (all violations are collected, nothing fails fast):
    1. Required top-level fields - id, name, configType, steps
    2. Step shape - number, id and title on every step
    3. Step numbering - no duplicates, contiguous 1..N
    4. Section references - every field a section lists exists

    Unknown field types, actors, action types and states are reported as
    warnings: the renderer has a fallback for each of them.
    """

    def __init__(self):
        self.messages: list[ValidationMessage] = []

    def validate(self, flow: Any) -> ValidationReport:
        """Run all validations and return a report."""
        self.messages = []

        if not isinstance(flow, dict):
            self._add_error("Flow definition must be a JSON object")
            return self._report()

        self._validate_schema(flow)
        self._validate_steps(flow.get("steps"))
        self._validate_config_references(flow)
        self._validate_config_fields(flow)

        return self._report()

    def _report(self) -> ValidationReport:
        return ValidationReport(
            valid=not any(m.level == "error" for m in self.messages),
            messages=self.messages,
        )

    def _add_error(self, message: str, location: str | None = None) -> None:
        self.messages.append(ValidationMessage(level="error", message=message, location=location))

    def _add_warning(self, message: str, location: str | None = None) -> None:
        self.messages.append(ValidationMessage(level="warning", message=message, location=location))

    def _validate_schema(self, flow: dict) -> None:
        """Check required flow fields."""
        for key in REQUIRED_FIELDS:
            if not flow.get(key):
                self._add_error(f"Missing required field: {key}", location=key)

        if not isinstance(flow.get("steps"), list):
            self._add_error("Missing or invalid required field: steps (must be array)", location="steps")

        state = flow.get("state")
        if state is not None and state not in FlowState._value2member_map_:
            self._add_warning(f"Unknown state '{state}'", location="state")

    def _validate_steps(self, steps: Any) -> None:
        """Check each step and the numbering across steps."""
        if not isinstance(steps, list):
            return

        ids_by_number: dict[int, list[str]] = defaultdict(list)

        for index, step in enumerate(steps):
            path = f"steps[{index}]"
            if not isinstance(step, dict):
                self._add_error(f"Step {index}: must be an object", location=path)
                continue

            for key in STEP_REQUIRED_FIELDS:
                if step.get(key) is None or step.get(key) == "":
                    self._add_error(f"Step {index}: missing {key}", location=f"{path}.{key}")

            number = step.get("number")
            if number is not None:
                if isinstance(number, bool) or not isinstance(number, int):
                    self._add_error(f"Step {index}: number must be an integer", location=f"{path}.number")
                else:
                    ids_by_number[number].append(str(step.get("id") or f"#{index}"))

            actor = step.get("actor")
            if actor and actor not in ACTOR_CLASSES:
                self._add_warning(f"Step {index}: unknown actor '{actor}'", location=f"{path}.actor")

            button = step.get("button")
            if isinstance(button, dict):
                action = button.get("actionType")
                if action and action not in ActionType._value2member_map_:
                    self._add_warning(
                        f"Step {index}: unknown button actionType '{action}'",
                        location=f"{path}.button.actionType",
                    )

        for number in sorted(ids_by_number):
            step_ids = ids_by_number[number]
            if len(step_ids) > 1:
                self._add_error(f"Duplicate step number {number} (steps: {', '.join(step_ids)})")

        for expected, number in enumerate(sorted(ids_by_number), start=1):
            if number != expected:
                self._add_error(SEQUENCE_ERROR, location="steps")
                break

    def _validate_config_references(self, flow: dict) -> None:
        """Every field listed by a section must exist in configFields."""
        sections = flow.get("configSections")
        raw_fields = flow.get("configFields")
        if not is_present(sections) or not is_present(raw_fields) or not isinstance(sections, list):
            return

        field_ids = set(normalize_config_fields(raw_fields))
        for index, section in enumerate(sections):
            if not isinstance(section, dict):
                continue
            fields = section.get("fields")
            if not isinstance(fields, list):
                continue
            for field_id in fields:
                if field_id not in field_ids:
                    self._add_error(
                        f'Section "{section.get("id")}" references unknown field: {field_id}',
                        location=f"configSections[{index}]",
                    )

    def _validate_config_fields(self, flow: dict) -> None:
        for field_id, spec in normalize_config_fields(flow.get("configFields")).items():
            field_type = spec.get("type")
            if field_type and not FieldType.is_known(field_type):
                self._add_warning(
                    f"Field '{field_id}': unknown type '{field_type}' (rendered as text input)",
                    location=f"configFields.{field_id}",
                )


def validate_flow(flow: Any) -> ValidationReport:
    """Convenience function to validate a flow definition."""
    validator = FlowValidator()
    return validator.validate(flow)
