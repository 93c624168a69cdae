"""pySHACL-backed ValidationContext.

Usable as the EXTERNAL-mode validator of generated code:

    # mypackage/validation.py
    def shapes_validator():
        return PyShaclValidator.from_file("shapes.ttl")

    ontogen shapes.ttl --validation external \\
        --external-validator mypackage.validation:shapes_validator
"""

from __future__ import annotations

from rdflib import Graph, RDF
from rdflib.namespace import SH

from .validation import ConstraintKind, ShaclViolation, ValidationResult, result_of


class PyShaclValidator:
    """Validates one focus node at a time against a SHACL shapes graph."""

    def __init__(self, shapes_graph: Graph, inference: str = "none"):
        self.shapes_graph = shapes_graph
        self.inference = inference

    @classmethod
    def from_file(cls, path, format: str = "turtle") -> PyShaclValidator:
        shapes = Graph()
        shapes.parse(str(path), format=format)
        return cls(shapes)

    @classmethod
    def from_model(cls, model) -> PyShaclValidator:
        from ..shacl_bridge import model_to_shacl
        return cls(model_to_shacl(model))

    def validate(self, graph: Graph, node) -> ValidationResult:
        from pyshacl import validate as pyshacl_validate

        conforms, results_graph, _ = pyshacl_validate(
            graph,
            shacl_graph=self.shapes_graph,
            inference=self.inference,
            abort_on_first=False,
        )
        if conforms:
            return result_of([])

        violations = []
        for result in results_graph.subjects(RDF.type, SH.ValidationResult):
            focus = results_graph.value(result, SH.focusNode)
            if focus != node:
                continue
            path = results_graph.value(result, SH.resultPath)
            message = results_graph.value(result, SH.resultMessage)
            severity = results_graph.value(result, SH.resultSeverity)
            component = results_graph.value(result, SH.sourceConstraintComponent)
            source = results_graph.value(result, SH.sourceShape)
            violations.append(ShaclViolation(
                focus_node=str(focus),
                shape_iri=self._node_shape_of(source),
                constraint=ConstraintKind.from_component(str(component)),
                path=str(path) if path is not None else None,
                message=str(message) if message is not None else "",
                severity=str(severity).rsplit("#", 1)[-1] if severity is not None else "Violation",
            ))
        violations.sort(key=lambda v: (v.path or "", v.constraint.value, v.message))
        return result_of(violations)

    def _node_shape_of(self, source) -> str:
        """IRI of the node shape owning ``source`` (itself, if it is a node shape)."""
        if source is None:
            return ""
        owner = self.shapes_graph.value(predicate=SH.property, object=source)
        return str(owner if owner is not None else source)
