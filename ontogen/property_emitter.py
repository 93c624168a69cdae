"""Property emitter — builder setters, one strategy per value type.

  string | integer | double | boolean | reference

Every setter checks first and writes second:

    def name(self, value: str, lang: str | None = None) -> PersonBuilder:
        if len(value) < 1:
            raise ConstraintViolationError('name', ConstraintKind.MIN_LENGTH, ...)
        self._graph.add((self._resource, URIRef('...'), <term>))
        return self

List properties also get a multi-value setter (``nameAll`` / ``name_all``)
taking ``*values`` (and, for strings, a keyword-only ``lang``). It checks
every value and builds every term before the first triple is added, so a
rejected call leaves the graph untouched.
"""

from __future__ import annotations

import ast
from typing import NamedTuple

from rdflib import XSD

from . import codemodel as cm
from .builder_model import PropertyBuilderModel
from .options import OutputConfig
from .resolver import RDF_NS, ScalarKind
from .resolver import XSD as XSD_NS

RUNTIME = "ontogen.runtime"

VALUE = "value"
VALUES = "values"
LANG = "lang"
LANG_STRING = RDF_NS + "langString"


class Failure(NamedTuple):
    """One value check: the constraint kind, the expression that is true when
    the value breaks it, and the message reported."""

    kind: str
    failed: cm.Expr
    message: str


class SetterStrategy:
    """Emission rules for one value type.

    ``datatype`` is the datatype IRI the shape declares; written literals
    carry it so the data conforms to the shape's ``sh:datatype``.
    """

    kind: ScalarKind | None = None

    def __init__(self, output: OutputConfig, datatype: str | None = None):
        self.output = output
        self.datatype = datatype or (self.kind.xsd if self.kind else None)

    # -- hooks --------------------------------------------------------------

    def value_annotation(self, prop: PropertyBuilderModel, interfaces: bool) -> cm.Expr:
        return cm.name(self.kind.value)

    def extra_params(self) -> list[cm.Param]:
        return []

    def term(self, value: cm.Expr, imports: cm.Imports, lang: cm.Expr | None = None) -> cm.Expr:
        """Expression building the RDF object term for ``value``."""
        imports.add("rdflib", "Literal")
        return cm.call("Literal", value, datatype=self.datatype_expr(imports))

    def datatype_expr(self, imports: cm.Imports) -> cm.Expr:
        """``XSD.<name>`` for XML Schema datatypes, ``URIRef(...)`` otherwise."""
        local = _xsd_local_name(self.datatype)
        if local is None:
            imports.add("rdflib", "URIRef")
            return cm.call("URIRef", cm.const(self.datatype))
        imports.add("rdflib", "XSD")
        return cm.attr("XSD", local)

    def checked_value(self, value: cm.Expr, imports: cm.Imports) -> cm.Expr:
        """Expression the value checks compare against."""
        return value

    def failures(self, prop: PropertyBuilderModel, value: cm.Expr, imports: cm.Imports) -> list[Failure]:
        """Every value check for ``prop``, applied to the expression ``value``."""
        c = prop.constraints
        checked = self.checked_value(value, imports)
        found = []
        if c.in_values is not None:
            found.append(Failure(
                "IN",
                cm.compare(checked, "not in", cm.literal_value(c.in_values)),
                f"{prop.property_name} must be one of: {', '.join(str(v) for v in c.in_values)}",
            ))
        if c.has_value is not None:
            found.append(Failure(
                "HAS_VALUE",
                cm.compare(checked, "!=", cm.const(c.has_value)),
                f"{prop.property_name} must equal {c.has_value}",
            ))
        return found

    def checks(self, prop: PropertyBuilderModel, value: cm.Expr, imports: cm.Imports) -> list[cm.Stmt]:
        """``if <failed>: raise ConstraintViolationError(...)`` per failure."""
        return [_violation(prop, imports, f) for f in self.failures(prop, value, imports)]


def _xsd_local_name(datatype: str) -> str | None:
    if not datatype.startswith(XSD_NS):
        return None
    local = datatype[len(XSD_NS):]
    if not local.isidentifier() or not hasattr(XSD, local):
        return None
    return local


def _violation(prop: PropertyBuilderModel, imports: cm.Imports, failure: Failure) -> cm.Stmt:
    imports.add(f"{RUNTIME}.errors", "ConstraintViolationError")
    imports.add(f"{RUNTIME}.validation", "ConstraintKind")
    return cm.if_(failure.failed, [cm.raise_(cm.call(
        "ConstraintViolationError",
        cm.const(prop.property_name),
        cm.attr("ConstraintKind", failure.kind),
        cm.const(failure.message),
    ))])


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class StringSetterStrategy(SetterStrategy):
    kind = ScalarKind.STRING

    def __init__(self, output: OutputConfig, datatype: str | None = None):
        # untagged values of an rdf:langString property are written as xsd:string
        if datatype == LANG_STRING:
            datatype = None
        super().__init__(output, datatype)

    def extra_params(self) -> list[cm.Param]:
        if not self.output.support_language_tags:
            return []
        return [cm.param(
            LANG,
            cm.union(cm.name("str"), cm.const(None)),
            cm.const(self.output.default_language),
        )]

    def term(self, value: cm.Expr, imports: cm.Imports, lang: cm.Expr | None = None) -> cm.Expr:
        plain = super().term(value, imports)
        if lang is None:
            return plain
        return cm.if_exp(lang, cm.call("Literal", value, lang=lang), plain)

    def failures(self, prop: PropertyBuilderModel, value: cm.Expr, imports: cm.Imports) -> list[Failure]:
        c = prop.constraints
        found = []
        if c.min_length is not None:
            found.append(Failure(
                "MIN_LENGTH",
                cm.compare(cm.call("len", value), "<", cm.const(c.min_length)),
                f"{prop.property_name} must have minLength >= {c.min_length}",
            ))
        if c.max_length is not None:
            found.append(Failure(
                "MAX_LENGTH",
                cm.compare(cm.call("len", value), ">", cm.const(c.max_length)),
                f"{prop.property_name} must have maxLength <= {c.max_length}",
            ))
        if c.pattern is not None:
            imports.add("re")
            found.append(Failure(
                "PATTERN",
                cm.compare(cm.call(cm.attr("re", "search"), cm.const(c.pattern), value), "is", cm.const(None)),
                f"{prop.property_name} must match pattern: {c.pattern}",
            ))
        return found + super().failures(prop, value, imports)


class _NumericSetterStrategy(SetterStrategy):

    def failures(self, prop: PropertyBuilderModel, value: cm.Expr, imports: cm.Imports) -> list[Failure]:
        c = prop.constraints
        bounds = [
            (c.min_inclusive, "<", "MIN_INCLUSIVE", ">="),
            (c.max_inclusive, ">", "MAX_INCLUSIVE", "<="),
            (c.min_exclusive, "<=", "MIN_EXCLUSIVE", ">"),
            (c.max_exclusive, ">=", "MAX_EXCLUSIVE", "<"),
        ]
        found = []
        for bound, failing_op, kind, expected in bounds:
            if bound is None:
                continue
            found.append(Failure(
                kind,
                cm.compare(value, failing_op, cm.const(bound)),
                f"{prop.property_name} must be {expected} {bound}",
            ))
        return found + super().failures(prop, value, imports)


class IntegerSetterStrategy(_NumericSetterStrategy):
    kind = ScalarKind.INTEGER


class DoubleSetterStrategy(_NumericSetterStrategy):
    kind = ScalarKind.DOUBLE


class BooleanSetterStrategy(SetterStrategy):
    kind = ScalarKind.BOOLEAN


class ReferenceSetterStrategy(SetterStrategy):
    """Object properties: accepts a wrapper, an rdflib node or an IRI string."""

    def value_annotation(self, prop: PropertyBuilderModel, interfaces: bool) -> cm.Expr:
        options = [cm.name("URIRef"), cm.name("str")]
        ref_name = prop.resolved_type.reference_name
        if interfaces and ref_name:
            options.insert(0, cm.name(ref_name))
        return cm.union(*options)

    def term(self, value: cm.Expr, imports: cm.Imports, lang: cm.Expr | None = None) -> cm.Expr:
        imports.add(f"{RUNTIME}.graph_ops", "as_node")
        return cm.call("as_node", value)

    def checked_value(self, value: cm.Expr, imports: cm.Imports) -> cm.Expr:
        return cm.call("str", self.term(value, imports))


_STRATEGIES: dict[ScalarKind | None, type[SetterStrategy]] = {
    ScalarKind.STRING: StringSetterStrategy,
    ScalarKind.INTEGER: IntegerSetterStrategy,
    ScalarKind.DOUBLE: DoubleSetterStrategy,
    ScalarKind.BOOLEAN: BooleanSetterStrategy,
    None: ReferenceSetterStrategy,
}


def strategy_for(prop: PropertyBuilderModel, output: OutputConfig) -> SetterStrategy:
    return _STRATEGIES[prop.resolved_type.scalar](output, prop.source.datatype)


# ---------------------------------------------------------------------------
# PropertyEmitter
# ---------------------------------------------------------------------------

class PropertyEmitter:
    """Emits the setter methods of one builder class."""

    def __init__(self, output: OutputConfig, interfaces: bool = True):
        self.output = output
        self.interfaces = interfaces

    def setters(self, prop: PropertyBuilderModel, builder_class: str, imports: cm.Imports) -> list[ast.FunctionDef]:
        strategy = strategy_for(prop, self.output)
        setters = [self._single(prop, strategy, builder_class, imports)]
        if prop.is_list and prop.multi_setter_name:
            setters.append(self._multi(prop, strategy, builder_class, imports))
        return setters

    def _predicate(self, prop: PropertyBuilderModel, imports: cm.Imports) -> cm.Expr:
        imports.add("rdflib", "URIRef")
        return cm.call("URIRef", cm.const(prop.property_iri))

    def _single(self, prop, strategy: SetterStrategy, builder_class: str, imports: cm.Imports) -> ast.FunctionDef:
        value = cm.name(VALUE)
        extra = strategy.extra_params()
        lang = cm.name(LANG) if extra else None

        body: list[cm.Stmt] = strategy.checks(prop, value, imports)
        triple = cm.tuple_of([
            cm.attr("self", "_resource"),
            self._predicate(prop, imports),
            strategy.term(value, imports, lang),
        ])
        body.append(cm.expr_stmt(cm.call(cm.attr("self", "_graph", "add"), triple)))
        body.append(cm.ret(cm.name("self")))

        return cm.function(
            prop.property_name,
            [cm.param("self"), cm.param(VALUE, strategy.value_annotation(prop, self.interfaces)), *extra],
            body,
            returns=cm.name(builder_class),
            doc=self._doc(prop, single=True),
        )

    def _multi(self, prop, strategy: SetterStrategy, builder_class: str, imports: cm.Imports) -> ast.FunctionDef:
        value = cm.name(VALUE)
        extra = strategy.extra_params()
        lang = cm.name(LANG) if extra else None

        body: list[cm.Stmt] = []
        checks = strategy.checks(prop, value, imports)
        if checks:
            body.append(cm.for_(VALUE, cm.name(VALUES), checks))
        body.append(cm.assign(
            "objects",
            cm.list_comp(strategy.term(value, imports, lang), VALUE, cm.name(VALUES)),
        ))
        imports.add(f"{RUNTIME}.graph_ops", "add_values")
        body.append(cm.expr_stmt(cm.call(
            "add_values",
            cm.attr("self", "_graph"),
            cm.attr("self", "_resource"),
            self._predicate(prop, imports),
            cm.name("objects"),
        )))
        body.append(cm.ret(cm.name("self")))

        return cm.function(
            prop.multi_setter_name,
            [cm.param("self")],
            body,
            returns=cm.name(builder_class),
            doc=self._doc(prop, single=False),
            vararg=cm.param(VALUES, strategy.value_annotation(prop, self.interfaces)),
            kwonly=extra,
        )

    def _doc(self, prop: PropertyBuilderModel, single: bool) -> str | None:
        if not self.output.include_docstrings:
            return None
        if single:
            return f"Add one {prop.property_iri} value."
        return f"Add several {prop.property_iri} values; all are checked before any is written."
