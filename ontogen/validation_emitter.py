"""Validation emitter — the ``validate()`` method of wrappers and builders.

One emitter serves both: the caller says how the generated method reaches the
graph and the focus node (``self._rdf.graph`` in a wrapper, ``self._graph``
in a builder). The body depends on the validation mode fixed at generation
time:

  NONE      — no method at all
  EMBEDDED  — count values per predicate and apply the setter checks to every
              stored value, one ShaclViolation per broken constraint
  EXTERNAL  — import the configured validator factory and delegate to it
"""

from __future__ import annotations

import ast

from . import codemodel as cm
from .builder_model import ClassBuilderModel, PropertyBuilderModel
from .options import OutputConfig, ValidationConfig, ValidationMode
from .property_emitter import strategy_for

RUNTIME = "ontogen.runtime"


class ValidationEmitter:

    def __init__(self, config: ValidationConfig):
        self.config = config

    @property
    def mode(self) -> ValidationMode:
        return self.config.effective_mode

    @property
    def enabled(self) -> bool:
        return self.mode != ValidationMode.NONE

    def emit(
        self,
        model: ClassBuilderModel,
        graph: cm.Expr,
        node: cm.Expr,
        imports: cm.Imports,
        include_docstring: bool = True,
    ) -> ast.FunctionDef | None:
        """The ``validate(self)`` method for ``model``, or None in NONE mode."""
        if self.mode == ValidationMode.NONE:
            return None

        imports.add(f"{RUNTIME}.validation", "ValidationResult")
        if self.mode == ValidationMode.EXTERNAL:
            body = self._external_body(graph, node)
            doc = f"Validate against {self.config.external_validator}."
        else:
            body = self._embedded_body(model, graph, node, imports)
            doc = f"Check the constraints of {model.shape_iri}."

        return cm.function(
            "validate",
            [cm.param("self")],
            body,
            returns=cm.name("ValidationResult"),
            doc=doc if include_docstring else None,
        )

    # -----------------------------------------------------------------------
    # EXTERNAL
    # -----------------------------------------------------------------------

    def _external_body(self, graph: cm.Expr, node: cm.Expr) -> list[cm.Stmt]:
        attribute = self.config.validator_attribute
        # imported on call: the validator module may import this package
        return [
            cm.import_from(self.config.validator_module, [attribute]),
            cm.ret(cm.call(cm.attr(cm.call(attribute), "validate"), graph, node)),
        ]

    # -----------------------------------------------------------------------
    # EMBEDDED
    # -----------------------------------------------------------------------

    def _embedded_body(
        self,
        model: ClassBuilderModel,
        graph: cm.Expr,
        node: cm.Expr,
        imports: cm.Imports,
    ) -> list[cm.Stmt]:
        imports.add(f"{RUNTIME}.validation", "result_of")
        body: list[cm.Stmt] = [cm.assign("violations", cm.list_of([]))]

        for prop in model.properties:
            checks = self._cardinality_checks(model, prop, node, imports)
            if checks:
                counter = "count_objects" if prop.is_reference else "count_literals"
                imports.add(f"{RUNTIME}.graph_ops", counter)
                body.append(cm.assign("count", cm.call(counter, graph, node, _predicate(prop, imports))))
                body.extend(checks)
            body.extend(self._value_checks(model, prop, graph, node, imports))

        body.append(cm.ret(cm.call("result_of", cm.name("violations"))))
        return body

    def _value_checks(
        self,
        model: ClassBuilderModel,
        prop: PropertyBuilderModel,
        graph: cm.Expr,
        node: cm.Expr,
        imports: cm.Imports,
    ) -> list[cm.Stmt]:
        """A loop applying the setter checks of ``prop`` to every stored value."""
        value = cm.name("value")
        failures = strategy_for(prop, OutputConfig()).failures(prop, value, imports)
        if not failures:
            return []
        if prop.is_reference:
            imports.add(f"{RUNTIME}.graph_ops", "object_values")
            values = cm.call("object_values", graph, node, _predicate(prop, imports))
        else:
            imports.add(f"{RUNTIME}.graph_ops", "convert_literals", "literal_values")
            values = cm.call(
                "convert_literals",
                cm.call("literal_values", graph, node, _predicate(prop, imports)),
                cm.name(prop.resolved_type.scalar.value),
            )
        checks = [
            self._check(model, prop, node, imports, f.failed, f.kind, f.message)
            for f in failures
        ]
        return [cm.for_("value", values, checks)]

    def _cardinality_checks(
        self,
        model: ClassBuilderModel,
        prop: PropertyBuilderModel,
        node: cm.Expr,
        imports: cm.Imports,
    ) -> list[cm.Stmt]:
        checks = []
        min_count = prop.constraints.min_count
        max_count = prop.constraints.max_count
        if min_count:
            checks.append(self._check(
                model, prop, node, imports,
                cm.compare(cm.name("count"), "<", cm.const(min_count)),
                "MIN_COUNT",
                _min_message(prop.property_name, min_count),
            ))
        if max_count is not None:
            checks.append(self._check(
                model, prop, node, imports,
                cm.compare(cm.name("count"), ">", cm.const(max_count)),
                "MAX_COUNT",
                _max_message(prop.property_name, max_count),
            ))
        return checks

    def _check(self, model, prop, node, imports, failed, kind, message) -> cm.Stmt:
        imports.add(f"{RUNTIME}.validation", "ConstraintKind", "ShaclViolation")
        violation = cm.call(
            "ShaclViolation",
            focus_node=cm.call("str", node),
            shape_iri=cm.const(model.shape_iri),
            constraint=cm.attr("ConstraintKind", kind),
            path=cm.const(prop.property_iri),
            message=cm.const(message),
        )
        return cm.if_(failed, [cm.expr_stmt(cm.call(cm.attr("violations", "append"), violation))])


def _min_message(property_name: str, min_count: int) -> str:
    if min_count == 1:
        return f"{property_name} is required (minCount=1)"
    return f"{property_name} requires at least {min_count} values (minCount={min_count})"


def _max_message(property_name: str, max_count: int) -> str:
    plural = "value" if max_count == 1 else "values"
    return f"{property_name} allows at most {max_count} {plural} (maxCount={max_count})"


def _predicate(prop: PropertyBuilderModel, imports: cm.Imports) -> cm.Expr:
    imports.add("rdflib", "URIRef")
    return cm.call("URIRef", cm.const(prop.property_iri))
