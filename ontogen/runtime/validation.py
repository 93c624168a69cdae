"""Validation results — what ``validate()`` returns.

  ValidationResult = Ok | Violations(items) | NotConfigured

Constraint violations are data: ``validate()`` never raises for them.
Callers that want control flow call ``or_throw()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from .errors import ValidationException

SH = "http://www.w3.org/ns/shacl#"


class ConstraintKind(Enum):
    """SHACL constraint components, by their local name."""
    MIN_COUNT = "minCount"
    MAX_COUNT = "maxCount"
    DATATYPE = "datatype"
    CLASS = "class"
    NODE_KIND = "nodeKind"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    IN = "in"
    HAS_VALUE = "hasValue"
    MIN_INCLUSIVE = "minInclusive"
    MAX_INCLUSIVE = "maxInclusive"
    MIN_EXCLUSIVE = "minExclusive"
    MAX_EXCLUSIVE = "maxExclusive"
    QUALIFIED_MIN_COUNT = "qualifiedMinCount"
    QUALIFIED_MAX_COUNT = "qualifiedMaxCount"
    OTHER = "other"

    @property
    def component(self) -> str:
        """IRI of the SHACL constraint component, e.g. sh:MinCountConstraintComponent."""
        name = self.value
        return f"{SH}{name[0].upper()}{name[1:]}ConstraintComponent"

    @classmethod
    def from_component(cls, iri: str) -> ConstraintKind:
        for kind in cls:
            if kind != cls.OTHER and kind.component == str(iri):
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class ShaclViolation:
    """A single violation: which node broke which constraint of which shape."""
    focus_node: str
    shape_iri: str
    constraint: ConstraintKind
    path: str | None = None
    message: str = ""
    severity: str = "Violation"

    def __repr__(self) -> str:
        node = self.focus_node.rsplit("/", 1)[-1]
        path = (self.path or "").rsplit("/", 1)[-1]
        return f"ShaclViolation({node}.{path}: {self.constraint.value})"


class ValidationResult:
    """Base of the three result variants."""

    conforms: bool = True

    def or_throw(self) -> None:
        """Raise ValidationException when violations were found."""

    def summary(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Ok(ValidationResult):
    conforms = True

    def summary(self) -> str:
        return "Validation: OK"


@dataclass(frozen=True)
class NotConfigured(ValidationResult):
    """No validation context was attached to the handle."""
    conforms = True

    def summary(self) -> str:
        return "Validation: not configured"


@dataclass(frozen=True)
class Violations(ValidationResult):
    items: tuple[ShaclViolation, ...]
    conforms = False

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("Violations requires at least one violation; use Ok()")
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def or_throw(self) -> None:
        message = "; ".join(v.message for v in self.items if v.message)
        raise ValidationException(message or "SHACL validation failed", self.items)

    def summary(self) -> str:
        lines = ["Validation: DOES NOT CONFORM", "-" * 50]
        lines.append(f"  Violations ({len(self.items)}):")
        for v in self.items:
            lines.append(f"    - {v.focus_node} {v.path or ''} [{v.constraint.value}] {v.message}")
        return "\n".join(lines)


def result_of(violations: list[ShaclViolation]) -> ValidationResult:
    """Ok() for an empty list, Violations otherwise."""
    if violations:
        return Violations(tuple(violations))
    return Ok()


@runtime_checkable
class ValidationContext(Protocol):
    """Anything that can validate a focus node in a data graph."""

    def validate(self, graph, node) -> ValidationResult:
        ...
