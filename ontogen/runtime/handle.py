"""The RDF side-channel of generated domain objects.

Every wrapper is ``RdfBacked``: next to its typed properties it exposes
``rdf``, an ``RdfHandle`` with the node, the graph, the unmapped triples
(``extras``) and node-level validation.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Node

from .lazy import memoized
from .validation import NotConfigured, ValidationContext, ValidationResult


@dataclass(frozen=True)
class RdfRef:
    """A node within a graph, plus the validation context to hand on."""
    node: Node
    graph: Graph
    validation_context: ValidationContext | None = None


# ---------------------------------------------------------------------------
# PropertyBag: unmapped triples
# ---------------------------------------------------------------------------

class PropertyBag:
    """Triples of a node whose predicates no generated property owns."""

    def __init__(self, graph: Graph, node: Node, exclude: frozenset = frozenset()):
        self._graph = graph
        self._node = node
        self._exclude = frozenset(exclude)

    @memoized
    def _by_predicate(self) -> dict[URIRef, list[Node]]:
        grouped: dict[URIRef, list[Node]] = {}
        for p, o in self._graph.predicate_objects(self._node):
            if p in self._exclude:
                continue
            grouped.setdefault(p, []).append(o)
        return grouped

    def predicates(self) -> list[URIRef]:
        return sorted(self._by_predicate)

    def values(self, predicate) -> list[Node]:
        return list(self._by_predicate.get(URIRef(predicate), ()))

    def literals(self, predicate) -> list[Literal]:
        return [v for v in self.values(predicate) if isinstance(v, Literal)]

    def strings(self, predicate) -> list[str]:
        return [str(v) for v in self.literals(predicate)]

    def iris(self, predicate) -> list[URIRef]:
        return [v for v in self.values(predicate) if isinstance(v, URIRef)]

    def objects(self, predicate, as_type, registry=None) -> list:
        """Materialize the IRI and blank-node values of ``predicate`` as ``as_type``."""
        if registry is None:
            from .registry import registry
        return [
            registry.materialize(RdfRef(v, self._graph), as_type)
            for v in self.values(predicate)
            if isinstance(v, (URIRef, BNode))
        ]

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_predicate.values())

    def __repr__(self) -> str:
        return f"PropertyBag({self._node}, {len(self._by_predicate)} predicates)"


# ---------------------------------------------------------------------------
# RdfHandle
# ---------------------------------------------------------------------------

class RdfHandle(abc.ABC):

    node: Node
    graph: Graph

    @property
    @abc.abstractmethod
    def extras(self) -> PropertyBag:
        ...

    @abc.abstractmethod
    def validate(self) -> ValidationResult:
        ...

    @abc.abstractmethod
    def with_known(self, known: frozenset) -> RdfHandle:
        """A handle on the same node that treats ``known`` as owned predicates."""

    @abc.abstractmethod
    def ref(self, node: Node) -> RdfRef:
        """Reference to another node of the same graph."""

    def validate_or_throw(self) -> None:
        self.validate().or_throw()


class DefaultRdfHandle(RdfHandle):

    def __init__(
        self,
        node: Node,
        graph: Graph,
        known: frozenset = frozenset(),
        validation_context: ValidationContext | None = None,
    ):
        self.node = node
        self.graph = graph
        self.known = frozenset(known)
        self.validation_context = validation_context

    @memoized
    def extras(self) -> PropertyBag:
        return PropertyBag(self.graph, self.node, exclude=self.known)

    def validate(self) -> ValidationResult:
        if self.validation_context is None:
            return NotConfigured()
        return self.validation_context.validate(self.graph, self.node)

    def with_known(self, known: frozenset) -> DefaultRdfHandle:
        return DefaultRdfHandle(self.node, self.graph, self.known | known, self.validation_context)

    def ref(self, node: Node) -> RdfRef:
        return RdfRef(node, self.graph, self.validation_context)

    def __repr__(self) -> str:
        return f"DefaultRdfHandle({self.node}, known={len(self.known)})"


class RdfBacked(abc.ABC):
    """Marker for domain objects backed by an RDF node."""

    @property
    @abc.abstractmethod
    def rdf(self) -> RdfHandle:
        ...


def as_rdf(obj) -> RdfHandle:
    if not isinstance(obj, RdfBacked):
        raise TypeError(f"Object is not RDF-backed: {type(obj).__name__}")
    return obj.rdf
