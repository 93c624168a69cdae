"""Graph reads and writes used by generated wrappers and builders.

All reads enumerate ``graph.objects(node, predicate)`` and filter by term
kind: literal values for datatype properties, IRIs and blank nodes for object
properties.
"""

from __future__ import annotations

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def literal_values(graph: Graph, node: Node, predicate: URIRef) -> list[Literal]:
    return [o for o in graph.objects(node, predicate) if isinstance(o, Literal)]


def object_values(graph: Graph, node: Node, predicate: URIRef) -> list[Node]:
    return [o for o in graph.objects(node, predicate) if isinstance(o, (URIRef, BNode))]


def count_literals(graph: Graph, node: Node, predicate: URIRef) -> int:
    return len(literal_values(graph, node, predicate))


def count_objects(graph: Graph, node: Node, predicate: URIRef) -> int:
    return len(object_values(graph, node, predicate))


# ---------------------------------------------------------------------------
# Lexical conversion
# ---------------------------------------------------------------------------

_TRUE = {"true", "1"}
_FALSE = {"false", "0"}


def convert_literal(literal: Literal, kind: type):
    """Convert a literal's lexical form to ``kind`` (str, int, float or bool).

    Raises ValueError when the lexical form does not fit.
    """
    lexical = str(literal)
    if kind is str:
        return lexical
    text = lexical.strip()
    if kind is bool:
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(f"{lexical!r} is not a boolean")
    if kind is int:
        return int(text)
    if kind is float:
        return float(text)
    raise TypeError(f"Unsupported scalar type {kind!r}")


def convert_literals(literals: list[Literal], kind: type) -> list:
    """Convert every literal, dropping the ones that fail conversion."""
    converted = []
    for literal in literals:
        try:
            converted.append(convert_literal(literal, kind))
        except ValueError:
            continue
    return converted


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def as_node(value) -> Node:
    """Graph node for a reference value: an RDF-backed object, a node, or an IRI string."""
    rdf = getattr(value, "rdf", None)
    if rdf is not None and hasattr(rdf, "node"):
        return rdf.node
    if isinstance(value, (URIRef, BNode)):
        return value
    if isinstance(value, str):
        return URIRef(value)
    raise TypeError(f"Cannot use {value!r} as a resource reference")


def add_values(graph: Graph, node: Node, predicate: URIRef, objects: list[Node]) -> None:
    for obj in objects:
        graph.add((node, predicate, obj))
