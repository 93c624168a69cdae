"""Generation options.

Validation mode, naming strategy and output toggles are fixed per build; they
shape the emitted code, they are never consulted at runtime.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping

from .errors import InvalidConfigurationError


_DSL_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*$")
_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_VALIDATOR_RE = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*:[A-Za-z_][A-Za-z0-9_]*$"
)


class ValidationMode(Enum):
    """How ``validate()`` is generated."""
    NONE = "none"          # omitted entirely
    EMBEDDED = "embedded"  # inline cardinality checks
    EXTERNAL = "external"  # delegate to a named validator


class NamingStrategy(Enum):
    CAMEL_CASE = "camel_case"
    SNAKE_CASE = "snake_case"
    PASCAL_CASE = "pascal_case"


@dataclass(frozen=True)
class ValidationConfig:
    enabled: bool = True
    mode: ValidationMode = ValidationMode.EMBEDDED
    external_validator: str | None = None  # "package.module:attribute"
    validate_on_build: bool = True

    def __post_init__(self) -> None:
        if self.mode == ValidationMode.EXTERNAL and self.enabled:
            if not self.external_validator:
                raise InvalidConfigurationError(
                    "EXTERNAL validation mode requires external_validator"
                )
            if not _VALIDATOR_RE.match(self.external_validator):
                raise InvalidConfigurationError(
                    "external_validator must look like 'package.module:attribute'",
                    {"external_validator": self.external_validator},
                )

    @property
    def effective_mode(self) -> ValidationMode:
        return self.mode if self.enabled else ValidationMode.NONE

    @property
    def validator_module(self) -> str:
        return self.external_validator.split(":", 1)[0]

    @property
    def validator_attribute(self) -> str:
        return self.external_validator.split(":", 1)[1]


@dataclass(frozen=True)
class NamingConfig:
    """Where property identifiers come from and how they are cased.

    Precedence: JSON-LD alias (if enabled) -> sh:name (if enabled) -> local
    name of sh:path.
    """
    strategy: NamingStrategy = NamingStrategy.CAMEL_CASE
    use_property_names: bool = False
    use_jsonld_aliases: bool = False


@dataclass(frozen=True)
class OutputConfig:
    include_docstrings: bool = True
    support_language_tags: bool = True
    default_language: str | None = None
    constraint_annotations: bool = True
    emit_shapes_graph: bool = False


@dataclass(frozen=True)
class TypeConfig:
    # Lenient mode maps unrecognized datatypes to str; strict mode fails.
    strict_datatypes: bool = False


@dataclass(frozen=True)
class GenerationOptions:
    package_name: str = "generated"
    dsl_name: str = "ontology"
    generate_interfaces: bool = True
    generate_wrappers: bool = True
    generate_dsl: bool = True
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    types: TypeConfig = field(default_factory=TypeConfig)

    def __post_init__(self) -> None:
        if not _DSL_NAME_RE.match(self.dsl_name):
            raise InvalidConfigurationError(
                "dsl_name must be a valid identifier", {"dsl_name": self.dsl_name}
            )
        if not _PACKAGE_RE.match(self.package_name):
            raise InvalidConfigurationError(
                "package_name must be a dotted identifier",
                {"package_name": self.package_name},
            )
        if self.generate_wrappers and not self.generate_interfaces:
            raise InvalidConfigurationError("wrappers cannot be generated without interfaces")

    def with_changes(self, **changes: Any) -> GenerationOptions:
        return replace(self, **changes)

    # -----------------------------------------------------------------------
    # Mapping (JSON config file) support
    # -----------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GenerationOptions:
        """Build options from a JSON-style mapping.

        Nested sections ``validation``, ``naming``, ``output`` and ``types``
        mirror the dataclasses; enum values are given by their string value.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigurationError(
                "Unknown option keys", {"keys": ", ".join(sorted(unknown))}
            )

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key == "validation":
                section = dict(value)
                if "mode" in section:
                    section["mode"] = _enum_value(ValidationMode, section["mode"])
                kwargs[key] = _section(ValidationConfig, section)
            elif key == "naming":
                section = dict(value)
                if "strategy" in section:
                    section["strategy"] = _enum_value(NamingStrategy, section["strategy"])
                kwargs[key] = _section(NamingConfig, section)
            elif key == "output":
                kwargs[key] = _section(OutputConfig, dict(value))
            elif key == "types":
                kwargs[key] = _section(TypeConfig, dict(value))
            else:
                kwargs[key] = value
        return cls(**kwargs)


def _section(section_cls, data: dict[str, Any]):
    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown keys for {section_cls.__name__}",
            {"keys": ", ".join(sorted(unknown))},
        )
    return section_cls(**data)


def _enum_value(enum_cls, raw):
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidConfigurationError(
            f"Invalid {enum_cls.__name__}: {raw!r}", {"allowed": allowed}
        ) from None
