"""Schema model for code generation — SHACL shapes plus a JSON-LD context.

The model is the generator's sole input. It is built once per run (usually by
``ontogen.shacl_bridge`` and ``ontogen.jsonld``) and treated as read-only
afterwards: every type here is a frozen dataclass and collections are tuples.

  OntologyModel = (shapes, context, classes)

  ShaclShape    — one NodeShape, one generated class family
  ShaclProperty — one property shape; exactly one of datatype / target_class
  JsonLdContext — prefixes, @base, @vocab, type and property aliases
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


# ---------------------------------------------------------------------------
# Node kinds: sh:nodeKind values
# ---------------------------------------------------------------------------

class NodeKind(Enum):
    IRI = "http://www.w3.org/ns/shacl#IRI"
    BLANK_NODE = "http://www.w3.org/ns/shacl#BlankNode"
    LITERAL = "http://www.w3.org/ns/shacl#Literal"
    BLANK_NODE_OR_IRI = "http://www.w3.org/ns/shacl#BlankNodeOrIRI"
    BLANK_NODE_OR_LITERAL = "http://www.w3.org/ns/shacl#BlankNodeOrLiteral"
    IRI_OR_LITERAL = "http://www.w3.org/ns/shacl#IRIOrLiteral"


# ---------------------------------------------------------------------------
# Constraint groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StringConstraints:
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None

    def is_empty(self) -> bool:
        return self.min_length is None and self.max_length is None and self.pattern is None


@dataclass(frozen=True)
class NumericConstraints:
    min_inclusive: float | None = None
    max_inclusive: float | None = None
    min_exclusive: float | None = None
    max_exclusive: float | None = None

    def is_empty(self) -> bool:
        return (
            self.min_inclusive is None
            and self.max_inclusive is None
            and self.min_exclusive is None
            and self.max_exclusive is None
        )


@dataclass(frozen=True)
class ValueConstraints:
    """sh:in and sh:hasValue, kept in lexical (string) form."""
    in_values: tuple[str, ...] | None = None
    has_value: str | None = None

    def is_empty(self) -> bool:
        return not self.in_values and self.has_value is None


@dataclass(frozen=True)
class NodeConstraints:
    node_kind: NodeKind | None = None
    qualified_value_shape: str | None = None
    qualified_min_count: int | None = None
    qualified_max_count: int | None = None


# ---------------------------------------------------------------------------
# ShaclProperty / ShaclShape
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ShaclProperty:
    """A SHACL property shape.

    ``path`` is the identity key of the property inside its shape. Exactly one
    of ``datatype`` (literal property) and ``target_class`` (nested object
    property) is set.
    """
    path: str
    name: str = ""
    description: str = ""
    datatype: str | None = None
    target_class: str | None = None
    min_count: int | None = None
    max_count: int | None = None
    string: StringConstraints = field(default_factory=StringConstraints)
    numeric: NumericConstraints = field(default_factory=NumericConstraints)
    values: ValueConstraints = field(default_factory=ValueConstraints)
    node: NodeConstraints = field(default_factory=NodeConstraints)

    def __post_init__(self) -> None:
        if (self.datatype is None) == (self.target_class is None):
            raise ValueError(
                f"Property {self.path} must declare exactly one of datatype or target_class"
            )
        if self.min_count is not None and self.min_count < 0:
            raise ValueError(f"Property {self.path} has negative minCount {self.min_count}")
        if (
            self.min_count is not None
            and self.max_count is not None
            and self.min_count > self.max_count
        ):
            raise ValueError(
                f"Property {self.path} has minCount {self.min_count} > maxCount {self.max_count}"
            )

    @property
    def is_reference(self) -> bool:
        return self.target_class is not None

    @property
    def is_list(self) -> bool:
        return self.max_count is None or self.max_count > 1

    @property
    def is_required(self) -> bool:
        return self.min_count is not None and self.min_count >= 1

    def __repr__(self) -> str:
        kind = self.target_class or self.datatype
        return f"ShaclProperty({self.path} -> {kind} [{self.min_count}..{self.max_count}])"


@dataclass(frozen=True)
class ShaclShape:
    """A SHACL NodeShape — one shape yields interface + wrapper + builder."""
    shape_iri: str
    target_class: str
    properties: tuple[ShaclProperty, ...] = ()

    def __repr__(self) -> str:
        return f"ShaclShape({self.shape_iri} -> {self.target_class}, {len(self.properties)} properties)"


# ---------------------------------------------------------------------------
# JSON-LD context
# ---------------------------------------------------------------------------

class JsonLdType:
    """Tagged variant for a term's ``@type``: ``Id`` or ``Iri(iri)``."""

    __slots__ = ()


@dataclass(frozen=True)
class JsonLdIdType(JsonLdType):
    def __repr__(self) -> str:
        return "JsonLdType.Id"


@dataclass(frozen=True)
class JsonLdIriType(JsonLdType):
    iri: str


JsonLdType.Id = JsonLdIdType()
JsonLdType.Iri = JsonLdIriType


class JsonLdContainer:
    """Tagged variant for ``@container``: List | Set | Index | Language | Unknown(raw)."""

    __slots__ = ()


@dataclass(frozen=True)
class _NamedContainer(JsonLdContainer):
    keyword: str

    def __repr__(self) -> str:
        return f"JsonLdContainer({self.keyword})"


@dataclass(frozen=True)
class JsonLdUnknownContainer(JsonLdContainer):
    raw: str


JsonLdContainer.List = _NamedContainer("@list")
JsonLdContainer.Set = _NamedContainer("@set")
JsonLdContainer.Index = _NamedContainer("@index")
JsonLdContainer.Language = _NamedContainer("@language")
JsonLdContainer.Unknown = JsonLdUnknownContainer


@dataclass(frozen=True)
class JsonLdProperty:
    id: str
    type: JsonLdType | None = None
    container: JsonLdContainer | None = None


@dataclass(frozen=True)
class JsonLdContext:
    """Aliases recovered from a JSON-LD context. Never required for correctness."""
    prefixes: Mapping[str, str] = field(default_factory=dict)
    base_iri: str | None = None
    vocab_iri: str | None = None
    type_mappings: Mapping[str, str] = field(default_factory=dict)
    property_mappings: Mapping[str, JsonLdProperty] = field(default_factory=dict)

    def alias_for(self, iri: str) -> str | None:
        """Return the first property alias whose @id is ``iri``."""
        for alias, prop in self.property_mappings.items():
            if prop.id == iri:
                return alias
        return None


# ---------------------------------------------------------------------------
# OntologyClass / OntologyModel
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OntologyClass:
    """An explicitly declared class (e.g. extracted from OWL/RDFS)."""
    class_iri: str
    class_name: str = ""
    super_classes: tuple[str, ...] = ()


@dataclass(frozen=True)
class OntologyModel:
    """The generator's input: shapes + context (+ optional declared classes)."""
    shapes: tuple[ShaclShape, ...] = ()
    context: JsonLdContext = field(default_factory=JsonLdContext)
    classes: tuple[OntologyClass, ...] = ()

    def shape_for(self, class_iri: str) -> ShaclShape | None:
        for shape in self.shapes:
            if shape.target_class == class_iri:
                return shape
        return None

    def __repr__(self) -> str:
        return (
            f"OntologyModel({len(self.shapes)} shapes, "
            f"{len(self.context.property_mappings)} property aliases, "
            f"{len(self.classes)} declared classes)"
        )
