"""Runtime exceptions raised by generated code."""

from __future__ import annotations


class OntogenRuntimeError(Exception):
    """Base exception for failures of generated wrappers and builders."""


class MissingPropertyError(OntogenRuntimeError, LookupError):
    """A required property has no (convertible) value on the node."""

    def __init__(self, class_name: str, property_name: str, path: str, node):
        super().__init__(
            f"{class_name}.{property_name} is required but {node} has no value for {path}"
        )
        self.class_name = class_name
        self.property_name = property_name
        self.path = path
        self.node = node


class ConstraintViolationError(OntogenRuntimeError, ValueError):
    """A builder setter rejected a value; nothing was written."""

    def __init__(self, property_name: str, constraint, message: str):
        super().__init__(message)
        self.property_name = property_name
        self.constraint = constraint


class ValidationException(OntogenRuntimeError):
    """Raised by ValidationResult.or_throw() when violations were found."""

    def __init__(self, message: str, violations=()):
        super().__init__(message)
        self.violations = tuple(violations)
