# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Structural validation of component configurations against their schemas."""

from __future__ import annotations

from collections.abc import Iterable
from threading import Lock

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from .errors import SchemaIntegrityError
from .models import ComponentSchema, ValidationIssue, ValidationResult
from .types import JSONValue
from .utils import thaw_json_value

ROOT_FIELD = "(root)"


class ConfigValidator:
    """Validate decoded configuration values with the Draft 2020-12 dialect.

    Validation is exhaustive: every mismatch is reported, in the order the
    schema tree is walked. Undeclared object keys are accepted unless the
    schema sets ``additionalProperties`` to ``false``. String ``format``
    keywords such as ``date-time`` are asserted. Compiled validators are
    memoized per component identity.
    """

    def __init__(self) -> None:
        self._validators: dict[str, Draft202012Validator] = {}
        self._lock = Lock()

    def validate(self, schema: ComponentSchema, instance: JSONValue) -> ValidationResult:
        """Validate ``instance`` against ``schema``.

        Args:
            schema: Component schema holding the document tree.
            instance: Decoded configuration value.

        Returns:
            ValidationResult: Result carrying every structural mismatch.

        Raises:
            SchemaIntegrityError: If the stored document is not a usable JSON Schema.
        """

        validator = self._validator_for(schema)
        issues = tuple(_to_issue(error) for error in _iter_errors(validator, instance))
        return ValidationResult.from_issues(issues)

    def _validator_for(self, schema: ComponentSchema) -> Draft202012Validator:
        key = schema.identity.cache_key
        with self._lock:
            existing = self._validators.get(key)
        if existing is not None:
            return existing
        document = thaw_json_value(schema.document.to_mapping())
        try:
            Draft202012Validator.check_schema(document)
        except SchemaError as exc:
            raise SchemaIntegrityError(f"schema {schema.identity}: {exc.message}") from exc
        validator = Draft202012Validator(document, format_checker=Draft202012Validator.FORMAT_CHECKER)
        with self._lock:
            return self._validators.setdefault(key, validator)


def _iter_errors(validator: Draft202012Validator, instance: JSONValue) -> Iterable[JsonSchemaValidationError]:
    return validator.iter_errors(thaw_json_value(instance))


def _to_issue(error: JsonSchemaValidationError) -> ValidationIssue:
    segments = [str(segment) for segment in error.absolute_path]
    return ValidationIssue(
        pointer=json_pointer(segments),
        field=".".join(segments) if segments else ROOT_FIELD,
        message=error.message,
        keyword=str(error.validator),
    )


def json_pointer(segments: Iterable[str]) -> str:
    """Return the RFC 6901 pointer addressing ``segments``."""

    return "".join("/" + segment.replace("~", "~0").replace("/", "~1") for segment in segments)


__all__ = ["ConfigValidator", "ROOT_FIELD", "json_pointer"]
