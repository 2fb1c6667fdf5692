"""Value objects: small immutable types shared by services and results."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldViolation:
    """One failed validation rule on one record field.

    Attributes:
        field: Field name (dotted path for nested fields).
        rule: Rule that failed: "required", "max_length" or "type".
        message: Human-readable description.
    """

    field: str
    rule: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "rule": self.rule, "message": self.message}
