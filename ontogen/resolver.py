"""Type resolution — SHACL datatype + cardinality to Python types.

  resolve(property) -> ResolvedType(scalar | reference, cardinality)

Cardinality rule shared by literal and reference properties:

  maxCount is None or > 1      -> LIST      (list[T])
  otherwise minCount >= 1      -> REQUIRED  (T)
  otherwise                    -> OPTIONAL  (T | None)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from . import codemodel as cm
from .errors import InvalidConstraintError, UnknownDatatypeError
from .naming import class_name_of, property_name_of
from .options import GenerationOptions
from .types import (
    JsonLdContainer,
    JsonLdContext,
    JsonLdIdType,
    JsonLdIriType,
    JsonLdProperty,
    JsonLdUnknownContainer,
    OntologyModel,
    ShaclProperty,
)

logger = logging.getLogger(__name__)

XSD = "http://www.w3.org/2001/XMLSchema#"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"


class ScalarKind(Enum):
    STRING = "str"
    INTEGER = "int"
    DOUBLE = "float"
    BOOLEAN = "bool"

    @property
    def xsd(self) -> str:
        return _CANONICAL_XSD[self]


class Cardinality(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    LIST = "list"


_CANONICAL_XSD = {
    ScalarKind.STRING: XSD + "string",
    ScalarKind.INTEGER: XSD + "integer",
    ScalarKind.DOUBLE: XSD + "double",
    ScalarKind.BOOLEAN: XSD + "boolean",
}

_DATATYPE_MAP: dict[str, ScalarKind] = {
    XSD + "string": ScalarKind.STRING,
    XSD + "normalizedString": ScalarKind.STRING,
    XSD + "token": ScalarKind.STRING,
    XSD + "anyURI": ScalarKind.STRING,
    RDF_NS + "langString": ScalarKind.STRING,
    XSD + "int": ScalarKind.INTEGER,
    XSD + "integer": ScalarKind.INTEGER,
    XSD + "long": ScalarKind.INTEGER,
    XSD + "short": ScalarKind.INTEGER,
    XSD + "byte": ScalarKind.INTEGER,
    XSD + "nonNegativeInteger": ScalarKind.INTEGER,
    XSD + "positiveInteger": ScalarKind.INTEGER,
    XSD + "nonPositiveInteger": ScalarKind.INTEGER,
    XSD + "negativeInteger": ScalarKind.INTEGER,
    XSD + "unsignedInt": ScalarKind.INTEGER,
    XSD + "unsignedLong": ScalarKind.INTEGER,
    XSD + "double": ScalarKind.DOUBLE,
    XSD + "float": ScalarKind.DOUBLE,
    XSD + "decimal": ScalarKind.DOUBLE,
    XSD + "boolean": ScalarKind.BOOLEAN,
}


@dataclass(frozen=True)
class ResolvedType:
    """The Python type of one generated property.

    Exactly one of ``scalar`` and ``reference_iri`` is set. ``reference_name``
    is the interface name of the referenced class, or None when the model has
    no shape for it (the property is then annotated as ``object``).
    """
    cardinality: Cardinality
    scalar: ScalarKind | None = None
    reference_iri: str | None = None
    reference_name: str | None = None

    @property
    def is_reference(self) -> bool:
        return self.reference_iri is not None

    @property
    def is_list(self) -> bool:
        return self.cardinality == Cardinality.LIST

    @property
    def is_required(self) -> bool:
        return self.cardinality == Cardinality.REQUIRED

    @property
    def element_type(self) -> str:
        """Name of the element type as written in annotations."""
        if self.scalar is not None:
            return self.scalar.value
        return self.reference_name or "object"

    def annotation(self) -> str:
        element = self.element_type
        if self.cardinality == Cardinality.LIST:
            return f"list[{element}]"
        if self.cardinality == Cardinality.OPTIONAL:
            return f"{element} | None"
        return element

    def annotation_node(self) -> cm.Expr:
        element = cm.name(self.element_type)
        if self.cardinality == Cardinality.LIST:
            return cm.subscript("list", element)
        if self.cardinality == Cardinality.OPTIONAL:
            return cm.union(element, cm.const(None))
        return element

    def __repr__(self) -> str:
        return f"ResolvedType({self.annotation()})"


def cardinality_of(prop: ShaclProperty) -> Cardinality:
    if prop.is_list:
        return Cardinality.LIST
    if prop.is_required:
        return Cardinality.REQUIRED
    return Cardinality.OPTIONAL


def scalar_kind_of(datatype: str, path: str = "", strict: bool = False) -> ScalarKind:
    """Map a literal datatype IRI to a scalar kind.

    Unrecognized datatypes become STRING, unless ``strict`` is set.
    """
    kind = _DATATYPE_MAP.get(datatype)
    if kind is not None:
        return kind
    if strict:
        raise UnknownDatatypeError(datatype, path)
    logger.debug("Datatype %s of %s mapped to str", datatype, path)
    return ScalarKind.STRING


def convert_constant(kind: ScalarKind | None, raw: str, path: str):
    """Convert an sh:in / sh:hasValue lexical constant to the property's Python type.

    Reference properties (``kind`` None) keep IRIs as strings.
    """
    if kind is None or kind == ScalarKind.STRING:
        return raw
    try:
        if kind == ScalarKind.INTEGER:
            return int(raw)
        if kind == ScalarKind.DOUBLE:
            return float(raw)
        if raw in ("true", "1"):
            return True
        if raw in ("false", "0"):
            return False
        raise ValueError(raw)
    except ValueError:
        raise InvalidConstraintError(
            f"Constant {raw!r} is not a valid {kind.value}", {"path": path}
        ) from None


def describe_jsonld(prop: JsonLdProperty | None) -> str:
    """Short human description of a JSON-LD term definition."""
    if prop is None:
        return ""
    parts = [f"@id {prop.id}"]
    term_type = prop.type
    if isinstance(term_type, JsonLdIdType):
        parts.append("@type @id")
    elif isinstance(term_type, JsonLdIriType):
        parts.append(f"@type {term_type.iri}")
    elif term_type is not None:
        raise TypeError(f"Unexpected JSON-LD type {term_type!r}")
    container = prop.container
    if isinstance(container, JsonLdUnknownContainer):
        parts.append(f"@container {container.raw} (unrecognized)")
    elif container is JsonLdContainer.List:
        parts.append("@container @list")
    elif container is JsonLdContainer.Set:
        parts.append("@container @set")
    elif container is JsonLdContainer.Index:
        parts.append("@container @index")
    elif container is JsonLdContainer.Language:
        parts.append("@container @language")
    elif container is not None:
        raise TypeError(f"Unexpected JSON-LD container {container!r}")
    return ", ".join(parts)


class TypeResolver:
    """Resolves names and types for one OntologyModel under one set of options.

    Holds the class IRIs the run will generate so that references to classes
    without a shape can be reported and annotated as ``object``.
    """

    def __init__(self, model: OntologyModel, options: GenerationOptions):
        self.model = model
        self.options = options
        self.generated_classes: dict[str, str] = {
            shape.target_class: class_name_of(shape.target_class) for shape in model.shapes
        }
        self._warned: set[str] = set()

    @property
    def context(self) -> JsonLdContext:
        return self.model.context

    def class_name(self, class_iri: str) -> str:
        return class_name_of(class_iri)

    def property_name(self, prop: ShaclProperty) -> str:
        naming = self.options.naming
        source = None
        if naming.use_jsonld_aliases:
            source = self.context.alias_for(prop.path)
        if source is None and naming.use_property_names and prop.name:
            source = prop.name
        if source is None:
            source = prop.path
        return property_name_of(source, naming.strategy)

    def jsonld_alias(self, prop: ShaclProperty) -> str:
        """Alias for PROPERTY_MAPPINGS: context alias, else sh:name, else local name."""
        alias = self.context.alias_for(prop.path)
        if alias:
            return alias
        return prop.name or property_name_of(prop.path)

    def jsonld_term(self, prop: ShaclProperty) -> JsonLdProperty | None:
        """The context term definition whose @id is the path of ``prop``."""
        alias = self.context.alias_for(prop.path)
        return self.context.property_mappings[alias] if alias else None

    def resolve(self, prop: ShaclProperty) -> ResolvedType:
        cardinality = cardinality_of(prop)
        if prop.target_class is not None:
            name = self.generated_classes.get(prop.target_class)
            if name is None and prop.target_class not in self._warned:
                self._warned.add(prop.target_class)
                logger.warning(
                    "No SHACL shape found for class %s referenced by %s",
                    prop.target_class, prop.path,
                )
            return ResolvedType(
                cardinality=cardinality,
                reference_iri=prop.target_class,
                reference_name=name,
            )
        kind = scalar_kind_of(prop.datatype, prop.path, self.options.types.strict_datatypes)
        return ResolvedType(cardinality=cardinality, scalar=kind)
