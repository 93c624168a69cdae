"""SHACL Bridge — reads SHACL shapes graphs into the schema model, and back.

  parse_shapes(Graph)         -> tuple[ShaclShape, ...]
  load_shapes(path)           -> tuple[ShaclShape, ...]
  load_model(shapes, context) -> OntologyModel
  model_to_shacl(model)       -> Graph (SHACL shapes)
  validate_data(model, data)  -> SHACLValidationResult via pySHACL

Reading covers what drives code shape: every sh:NodeShape with an
sh:targetClass, and for each sh:property its path, sh:name, sh:description,
sh:datatype or sh:class, counts, string and numeric facets, sh:in,
sh:hasValue, sh:nodeKind and qualified value shapes. Property shapes with
neither sh:datatype nor sh:class, or with a non-IRI path, carry no type to
generate from and are skipped.

Output is ordered for determinism: shapes by IRI, properties by sh:order and
then by path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rdflib import BNode, Graph, Literal, RDF, URIRef
from rdflib.collection import Collection
from rdflib.namespace import SH, XSD

from .errors import DataParseError, ShapeParseError
from .naming import local_name, to_snake_case
from .types import (
    JsonLdContext,
    NodeConstraints,
    NodeKind,
    NumericConstraints,
    OntologyClass,
    OntologyModel,
    ShaclProperty,
    ShaclShape,
    StringConstraints,
    ValueConstraints,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# SHACL graph → ShaclShape
# ---------------------------------------------------------------------------

def parse_shapes(graph: Graph) -> tuple[ShaclShape, ...]:
    """Translate the node shapes of a SHACL graph into ShaclShapes."""
    candidates = set(graph.subjects(RDF.type, SH.NodeShape)) | set(graph.subjects(SH.targetClass, None))
    shapes = []
    for shape_node in sorted(candidates, key=str):
        targets = sorted(str(t) for t in graph.objects(shape_node, SH.targetClass))
        if not targets:
            logger.debug("Node shape %s has no sh:targetClass; skipping", shape_node)
            continue
        properties = _parse_properties(graph, shape_node)
        for target in targets:
            shapes.append(ShaclShape(
                shape_iri=str(shape_node),
                target_class=target,
                properties=properties,
            ))
    return tuple(shapes)


def _parse_properties(graph: Graph, shape_node) -> tuple[ShaclProperty, ...]:
    parsed = []
    for prop_node in graph.objects(shape_node, SH.property):
        prop = _parse_property(graph, shape_node, prop_node)
        if prop is None:
            continue
        order = graph.value(prop_node, SH.order)
        parsed.append((_order_key(order), prop.path, prop))
    parsed.sort(key=lambda item: (item[0], item[1]))
    return tuple(prop for _, _, prop in parsed)


def _order_key(order) -> tuple[int, float]:
    # properties without sh:order sort after the ordered ones
    if order is None:
        return (1, 0.0)
    try:
        return (0, float(order))
    except (TypeError, ValueError):
        return (1, 0.0)


def _parse_property(graph: Graph, shape_node, node) -> ShaclProperty | None:
    path = graph.value(node, SH.path)
    if not isinstance(path, URIRef):
        logger.debug("Property shape of %s has no IRI path; skipping", shape_node)
        return None

    datatype = graph.value(node, SH.datatype)
    target_class = graph.value(node, SH["class"])
    if datatype is None and target_class is None:
        logger.debug("Property %s of %s has neither sh:datatype nor sh:class; skipping", path, shape_node)
        return None
    if datatype is not None and target_class is not None:
        logger.debug("Property %s declares both sh:datatype and sh:class; using sh:class", path)
        datatype = None

    name = graph.value(node, SH.name)
    description = graph.value(node, SH.description)

    try:
        return ShaclProperty(
            path=str(path),
            name=str(name) if name is not None else local_name(str(path)),
            description=str(description) if description is not None else "",
            datatype=str(datatype) if datatype is not None else None,
            target_class=str(target_class) if target_class is not None else None,
            min_count=_int(graph, node, SH.minCount),
            max_count=_int(graph, node, SH.maxCount),
            string=StringConstraints(
                min_length=_int(graph, node, SH.minLength),
                max_length=_int(graph, node, SH.maxLength),
                pattern=_str(graph, node, SH.pattern),
            ),
            numeric=NumericConstraints(
                min_inclusive=_float(graph, node, SH.minInclusive),
                max_inclusive=_float(graph, node, SH.maxInclusive),
                min_exclusive=_float(graph, node, SH.minExclusive),
                max_exclusive=_float(graph, node, SH.maxExclusive),
            ),
            values=ValueConstraints(
                in_values=_in_values(graph, node),
                has_value=_str(graph, node, SH.hasValue),
            ),
            node=NodeConstraints(
                node_kind=_node_kind(graph, node),
                qualified_value_shape=_str(graph, node, SH.qualifiedValueShape),
                qualified_min_count=_int(graph, node, SH.qualifiedMinCount),
                qualified_max_count=_int(graph, node, SH.qualifiedMaxCount),
            ),
        )
    except ValueError as exc:
        raise ShapeParseError(str(exc), {"shape": str(shape_node), "path": str(path)}) from exc


def _int(graph: Graph, node, predicate) -> int | None:
    value = graph.value(node, predicate)
    if value is None:
        return None
    try:
        return int(str(value))
    except ValueError:
        raise ShapeParseError(f"{predicate} must be an integer", {"value": str(value)}) from None


def _float(graph: Graph, node, predicate) -> float | None:
    value = graph.value(node, predicate)
    if value is None:
        return None
    try:
        return float(str(value))
    except ValueError:
        raise ShapeParseError(f"{predicate} must be numeric", {"value": str(value)}) from None


def _str(graph: Graph, node, predicate) -> str | None:
    value = graph.value(node, predicate)
    return str(value) if value is not None else None


def _in_values(graph: Graph, node) -> tuple[str, ...] | None:
    head = graph.value(node, SH["in"])
    if head is None:
        return None
    return tuple(str(item) for item in Collection(graph, head))


def _node_kind(graph: Graph, node) -> NodeKind | None:
    value = graph.value(node, SH.nodeKind)
    if value is None:
        return None
    try:
        return NodeKind(str(value))
    except ValueError:
        raise ShapeParseError("Unknown sh:nodeKind", {"value": str(value)}) from None


def load_shapes(path: str | Path, format: str | None = None) -> tuple[ShaclShape, ...]:
    """Parse a shapes file (Turtle unless ``format`` or the suffix says otherwise)."""
    graph = Graph()
    try:
        graph.parse(str(path), format=format or _guess_format(path))
    except FileNotFoundError as exc:
        raise ShapeParseError("Shapes file not found", {"path": str(path)}) from exc
    except Exception as exc:
        raise ShapeParseError(f"Cannot parse shapes graph: {exc}", {"path": str(path)}) from exc
    shapes = parse_shapes(graph)
    logger.info("Loaded %d shapes from %s", len(shapes), path)
    return shapes


def load_data(path: str | Path, format: str | None = None) -> Graph:
    """Parse a data graph to validate against the shapes."""
    graph = Graph()
    try:
        graph.parse(str(path), format=format or _guess_format(path))
    except FileNotFoundError as exc:
        raise DataParseError("Data file not found", {"path": str(path)}) from exc
    except Exception as exc:
        raise DataParseError(f"Cannot parse data graph: {exc}", {"path": str(path)}) from exc
    logger.info("Loaded %d triples from %s", len(graph), path)
    return graph


def _guess_format(path: str | Path) -> str:
    suffix = Path(path).suffix.lower()
    return {
        ".ttl": "turtle",
        ".nt": "nt",
        ".n3": "n3",
        ".rdf": "xml",
        ".xml": "xml",
        ".owl": "xml",
        ".jsonld": "json-ld",
        ".json": "json-ld",
        ".trig": "trig",
    }.get(suffix, "turtle")


def load_model(
    shapes_path: str | Path,
    context_path: str | Path | None = None,
    classes: tuple[OntologyClass, ...] = (),
) -> OntologyModel:
    """Shapes file plus optional JSON-LD context file -> OntologyModel."""
    from .jsonld import load_context

    context = load_context(context_path) if context_path else JsonLdContext()
    return OntologyModel(shapes=load_shapes(shapes_path), context=context, classes=tuple(classes))


# ---------------------------------------------------------------------------
# OntologyModel → SHACL graph
# ---------------------------------------------------------------------------

def model_to_shacl(model: OntologyModel) -> Graph:
    """Serialize the model's shapes as a SHACL shapes graph.

    Property shapes are blank nodes with stable identifiers and an sh:order
    matching their position, so parsing the result yields the same shapes.
    """
    sg = Graph()
    sg.bind("sh", SH)
    sg.bind("xsd", XSD)
    for prefix, namespace in sorted(model.context.prefixes.items()):
        sg.bind(prefix, namespace)

    for shape in model.shapes:
        shape_uri = URIRef(shape.shape_iri)
        sg.add((shape_uri, RDF.type, SH.NodeShape))
        sg.add((shape_uri, SH.targetClass, URIRef(shape.target_class)))

        prefix = to_snake_case(local_name(shape.shape_iri)) or "shape"
        for position, prop in enumerate(shape.properties):
            prop_shape = BNode(f"{prefix}_p{position}")
            sg.add((shape_uri, SH.property, prop_shape))
            _add_property(sg, prop_shape, prop, position)

    return sg


def _add_property(sg: Graph, node: BNode, prop: ShaclProperty, position: int) -> None:
    sg.add((node, SH.path, URIRef(prop.path)))
    sg.add((node, SH.order, Literal(position)))
    if prop.name:
        sg.add((node, SH.name, Literal(prop.name)))
    if prop.description:
        sg.add((node, SH.description, Literal(prop.description)))
    if prop.datatype is not None:
        sg.add((node, SH.datatype, URIRef(prop.datatype)))
    if prop.target_class is not None:
        sg.add((node, SH["class"], URIRef(prop.target_class)))

    for predicate, value in (
        (SH.minCount, prop.min_count),
        (SH.maxCount, prop.max_count),
        (SH.minLength, prop.string.min_length),
        (SH.maxLength, prop.string.max_length),
        (SH.qualifiedMinCount, prop.node.qualified_min_count),
        (SH.qualifiedMaxCount, prop.node.qualified_max_count),
    ):
        if value is not None:
            sg.add((node, predicate, Literal(value)))
    if prop.string.pattern is not None:
        sg.add((node, SH.pattern, Literal(prop.string.pattern)))

    for predicate, value in (
        (SH.minInclusive, prop.numeric.min_inclusive),
        (SH.maxInclusive, prop.numeric.max_inclusive),
        (SH.minExclusive, prop.numeric.min_exclusive),
        (SH.maxExclusive, prop.numeric.max_exclusive),
    ):
        if value is not None:
            sg.add((node, predicate, _bound_literal(prop, value)))

    if prop.values.in_values:
        head = BNode(f"{node}_in")
        Collection(sg, head, [_value_term(prop, v) for v in prop.values.in_values])
        sg.add((node, SH["in"], head))
    if prop.values.has_value is not None:
        sg.add((node, SH.hasValue, _value_term(prop, prop.values.has_value)))

    if prop.node.node_kind is not None:
        sg.add((node, SH.nodeKind, URIRef(prop.node.node_kind.value)))
    if prop.node.qualified_value_shape is not None:
        sg.add((node, SH.qualifiedValueShape, URIRef(prop.node.qualified_value_shape)))


def _value_term(prop: ShaclProperty, raw: str):
    if prop.target_class is not None:
        return URIRef(raw)
    return Literal(raw, datatype=URIRef(prop.datatype))


def _bound_literal(prop: ShaclProperty, value: float) -> Literal:
    if prop.datatype and prop.datatype.endswith(("integer", "int", "long", "short")) and float(value).is_integer():
        return Literal(int(value))
    return Literal(value)


# ---------------------------------------------------------------------------
# SHACL Validation
# ---------------------------------------------------------------------------

def validate_data(model: OntologyModel, data_graph: Graph) -> SHACLValidationResult:
    """Validate a whole data graph against the model's shapes with pySHACL."""
    from pyshacl import validate as pyshacl_validate

    shapes_graph = model_to_shacl(model)
    conforms, results_graph, results_text = pyshacl_validate(
        data_graph,
        shacl_graph=shapes_graph,
        inference="none",
        abort_on_first=False,
    )

    violations = []
    for result in results_graph.subjects(RDF.type, SH.ValidationResult):
        focus = results_graph.value(result, SH.focusNode)
        path = results_graph.value(result, SH.resultPath)
        message = results_graph.value(result, SH.resultMessage)
        severity = results_graph.value(result, SH.resultSeverity)
        component = results_graph.value(result, SH.sourceConstraintComponent)

        violations.append(SHACLViolation(
            focus_node=str(focus) if focus else "",
            path=str(path) if path else "",
            message=str(message) if message else "",
            severity=str(severity) if severity else "",
            component=str(component) if component else "",
        ))
    violations.sort(key=lambda v: (v.focus_node, v.path, v.component))

    return SHACLValidationResult(
        conforms=conforms,
        violations=violations,
        results_text=results_text,
        shapes_graph=shapes_graph,
        data_graph=data_graph,
    )


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class SHACLViolation:
    """A single SHACL validation result."""
    focus_node: str
    path: str
    message: str
    severity: str
    component: str = ""

    def __repr__(self) -> str:
        return f"SHACLViolation({local_name(self.focus_node)}.{local_name(self.path)}: {self.message})"


@dataclass
class SHACLValidationResult:
    """Result of validating a data graph against generated-from shapes."""
    conforms: bool
    violations: list[SHACLViolation] = field(default_factory=list)
    results_text: str = ""
    shapes_graph: Graph | None = None
    data_graph: Graph | None = None

    def summary(self) -> str:
        lines = []
        status = "CONFORMS" if self.conforms else "DOES NOT CONFORM"
        lines.append(f"SHACL Validation: {status}")
        lines.append("-" * 50)
        if self.violations:
            lines.append(f"  Violations ({len(self.violations)}):")
            for v in self.violations:
                lines.append(f"    - {local_name(v.focus_node)}.{local_name(v.path)}: {v.message}")
        else:
            lines.append("  No violations found.")
        return "\n".join(lines)

    def shapes_as_turtle(self) -> str:
        """Serialize the SHACL shapes graph as Turtle for inspection."""
        if self.shapes_graph is None:
            return ""
        return self.shapes_graph.serialize(format="turtle")
