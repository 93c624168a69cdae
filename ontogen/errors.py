"""Generation-time exceptions.

Everything the generator raises derives from ``GenerationError``. Runtime
failures of the emitted code live in ``ontogen.runtime.errors``.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base exception for code generation failures."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class InvalidConfigurationError(GenerationError):
    """Raised when GenerationOptions are inconsistent."""


class DuplicatePropertyPathError(GenerationError):
    """Raised when a shape declares the same sh:path twice."""

    def __init__(self, shape_iri: str, path: str):
        super().__init__(
            "Duplicate property path in shape",
            {"shape": shape_iri, "path": path},
        )
        self.shape_iri = shape_iri
        self.path = path


class PropertyNameCollisionError(GenerationError):
    """Raised when two properties of a shape normalise to the same identifier."""

    def __init__(self, shape_iri: str, identifier: str, paths: tuple[str, str]):
        super().__init__(
            f"Properties {paths[0]} and {paths[1]} both map to identifier '{identifier}'",
            {"shape": shape_iri},
        )
        self.shape_iri = shape_iri
        self.identifier = identifier
        self.paths = paths


class ClassNameCollisionError(GenerationError):
    """Raised when two shapes normalise to the same class name."""

    def __init__(self, class_name: str, class_iris: tuple[str, str]):
        super().__init__(
            f"Classes {class_iris[0]} and {class_iris[1]} both map to class name '{class_name}'"
        )
        self.class_name = class_name
        self.class_iris = class_iris


class UnknownDatatypeError(GenerationError):
    """Raised in strict mode for a datatype with no scalar mapping."""

    def __init__(self, datatype: str, path: str):
        super().__init__(
            f"Unrecognized datatype {datatype}",
            {"path": path},
        )
        self.datatype = datatype
        self.path = path


class InvalidConstraintError(GenerationError):
    """Raised when an sh:in / sh:hasValue constant does not fit the property type."""


class ShapeParseError(GenerationError):
    """Raised when a SHACL shapes graph cannot be read."""


class ContextParseError(GenerationError):
    """Raised when a JSON-LD context cannot be read."""


class DataParseError(GenerationError):
    """Raised when a data graph to be checked cannot be read."""


class OutputWriteError(GenerationError):
    """Raised when the generated package cannot be written."""
