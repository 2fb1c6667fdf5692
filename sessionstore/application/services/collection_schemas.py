"""Per-collection record schemas and the registry that validates against them.

Known collections have an explicit pydantic model; extra fields are allowed so
records stay forward compatible. Other collections can register a JSON Schema
at runtime. Collections with neither always validate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Literal

import jsonschema
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sessionstore.domain.enums import CollectionName, canonical_collection
from sessionstore.domain.exceptions import ValidationException
from sessionstore.domain.value_objects import FieldViolation

logger = logging.getLogger(__name__)

REQUIRED = "required"
MAX_LENGTH = "max_length"
TYPE = "type"


class _RecordModel(BaseModel):
    """Base for collection schemas: unknown fields pass through untouched."""

    model_config = ConfigDict(extra="allow")


class AgentRecord(_RecordModel):
    name: str = Field(min_length=1, max_length=100)
    voice: str | None = None
    greeting: str | None = Field(default=None, max_length=500)
    specialty: str | None = Field(default=None, max_length=100)
    temperature: float | None = Field(default=None, ge=0, le=2)


class CallRecord(_RecordModel):
    agent_id: str | None = None
    direction: Literal["inbound", "outbound"] | None = None
    status: str | None = None


class ComplianceScriptRecord(_RecordModel):
    name: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=5000)
    category: str = Field(min_length=1, max_length=100)
    required_phrases: list[str] | None = None


class ConversationFlowRecord(_RecordModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    nodes: list[dict[str, Any]] | None = None


class KnowledgeBaseRecord(_RecordModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)


class VideoSummaryRecord(_RecordModel):
    title: str = Field(min_length=1, max_length=100)
    summary: str = Field(min_length=1, max_length=5000)
    timestamps: list[dict[str, Any]] | None = None


class PhoneNumberRecord(_RecordModel):
    phone_number: str = Field(min_length=1, max_length=32)
    label: str | None = Field(default=None, max_length=100)
    is_active: bool | None = None


BUILTIN_SCHEMAS: dict[str, type[BaseModel]] = {
    CollectionName.AGENTS.value: AgentRecord,
    CollectionName.CALLS.value: CallRecord,
    CollectionName.COMPLIANCE_SCRIPTS.value: ComplianceScriptRecord,
    CollectionName.CONVERSATION_FLOWS.value: ConversationFlowRecord,
    CollectionName.KNOWLEDGE_BASES.value: KnowledgeBaseRecord,
    CollectionName.VIDEO_SUMMARIES.value: VideoSummaryRecord,
    CollectionName.PHONE_NUMBERS.value: PhoneNumberRecord,
}


def required_violation(field: str) -> FieldViolation:
    return FieldViolation(field, REQUIRED, f"Field '{field}' is required")


def max_length_violation(field: str, limit: int) -> FieldViolation:
    return FieldViolation(
        field, MAX_LENGTH, f"Field '{field}' exceeds maximum length of {limit}"
    )


def type_violation(field: str, reason: str) -> FieldViolation:
    return FieldViolation(field, TYPE, f"Field '{field}' is invalid: {reason}")


def _violations_from_pydantic(exc: PydanticValidationError) -> list[FieldViolation]:
    """Map pydantic errors onto required / max_length / type rules."""
    violations: list[FieldViolation] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "__root__"
        kind = err["type"]
        if kind == "missing" or (
            kind in ("string_type", "string_too_short") and err.get("input") in (None, "")
        ):
            violations.append(required_violation(field))
        elif kind == "string_too_long":
            violations.append(max_length_violation(field, err["ctx"]["max_length"]))
        else:
            violations.append(type_violation(field, err["msg"]))
    return violations


def _violations_from_json_schema(
    validator: jsonschema.Draft202012Validator, record: Mapping[str, Any]
) -> list[FieldViolation]:
    """Collect every JSON Schema error; top-level required also rejects null and ''."""
    violations: list[FieldViolation] = []
    missing: set[str] = set()
    for field in validator.schema.get("required", []):
        if record.get(field) in (None, ""):
            missing.add(field)
            violations.append(required_violation(field))
    for err in validator.iter_errors(record):
        path = [str(p) for p in err.absolute_path]
        if err.validator == "required":
            if not path:
                continue
            instance = err.instance if isinstance(err.instance, Mapping) else {}
            for name in err.validator_value:
                if name not in instance:
                    violations.append(required_violation(".".join([*path, name])))
            continue
        field = ".".join(path) or "__root__"
        if path and path[0] in missing:
            continue
        if err.validator == "maxLength":
            violations.append(max_length_violation(field, err.validator_value))
        else:
            violations.append(type_violation(field, err.message))
    return violations


class SchemaRegistry:
    """Resolves a collection's schema and validates records against it."""

    def __init__(self, models: Mapping[str, type[BaseModel]] | None = None) -> None:
        self._models: dict[str, type[BaseModel]] = dict(
            BUILTIN_SCHEMAS if models is None else models
        )
        self._json_schemas: dict[str, jsonschema.Draft202012Validator] = {}

    def register_model(self, collection: str, model: type[BaseModel]) -> None:
        """Register (or replace) a pydantic model for a collection."""
        name = canonical_collection(collection)
        self._json_schemas.pop(name, None)
        self._models[name] = model

    def register_json_schema(self, collection: str, schema: dict[str, Any]) -> None:
        """Register a JSON Schema (Draft 2020-12) for a collection.

        Raises:
            jsonschema.SchemaError: If the schema itself is invalid.
        """
        jsonschema.Draft202012Validator.check_schema(schema)
        name = canonical_collection(collection)
        self._models.pop(name, None)
        self._json_schemas[name] = jsonschema.Draft202012Validator(schema)
        logger.info("Registered JSON schema for collection %s", name)

    def has_schema(self, collection: str) -> bool:
        name = canonical_collection(collection)
        return name in self._models or name in self._json_schemas

    def validate(self, collection: str, record: Mapping[str, Any]) -> list[FieldViolation]:
        """Return every violated rule for record; empty when valid or unregistered."""
        name = canonical_collection(collection)
        model = self._models.get(name)
        if model is not None:
            try:
                model.model_validate(dict(record))
            except PydanticValidationError as e:
                return _violations_from_pydantic(e)
            return []
        validator = self._json_schemas.get(name)
        if validator is not None:
            return _violations_from_json_schema(validator, record)
        return []

    def ensure_valid(self, collection: str, record: Mapping[str, Any]) -> None:
        """Validate record.

        Raises:
            ValidationException: If any rule is violated.
        """
        violations = self.validate(collection, record)
        if violations:
            raise ValidationException(violations, collection=canonical_collection(collection))
