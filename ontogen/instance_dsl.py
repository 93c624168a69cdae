"""Instance DSL orchestrator — builders, factories and the DSL entry point.

Produces ``<dsl_name>_dsl.py``:

    def ontology(configure=None) -> OntologyDsl

    class OntologyDsl:
        def person(self, iri=None, configure=None) -> URIRef   # one per class
        def build(self) -> Graph
        def instances(self) -> list[URIRef]

    class PersonBuilder:                                       # one per class
        def name(self, value, lang=None) -> PersonBuilder      # setters
        def validate(self) -> ValidationResult                 # unless NONE

A factory creates the resource, asserts its rdf:type, runs ``configure`` on
a fresh builder, validates when ``validate_on_build`` is set, and records the
resource in ``instances()``.
"""

from __future__ import annotations

import ast

from . import codemodel as cm
from .builder_model import ClassBuilderModel
from .naming import dsl_class_name_of, module_name_of
from .options import GenerationOptions
from .property_emitter import PropertyEmitter
from .validation_emitter import ValidationEmitter


class InstanceDslEmitter:

    def __init__(self, options: GenerationOptions, validation: ValidationEmitter | None = None):
        self.options = options
        self.validation = validation or ValidationEmitter(options.validation)
        self.properties = PropertyEmitter(options.output, interfaces=options.generate_interfaces)

    @property
    def dsl_class_name(self) -> str:
        return dsl_class_name_of(self.options.dsl_name)

    @property
    def validates_on_build(self) -> bool:
        return self.validation.enabled and self.options.validation.validate_on_build

    def emit(self, models: list[ClassBuilderModel]) -> str:
        return cm.render(self.emit_module(models), header=["GENERATED FILE - DO NOT EDIT"])

    def emit_module(self, models: list[ClassBuilderModel]) -> ast.Module:
        imports = cm.Imports()
        imports.add("typing", "Callable")
        imports.add("rdflib", "BNode", "Graph", "RDF", "URIRef")
        if self.options.generate_interfaces:
            for model in models:
                for prop in model.properties:
                    ref = prop.resolved_type.reference_name
                    if ref:
                        imports.add(module_name_of(ref), ref, level=1, type_checking=True)

        builders = [self.emit_builder(m, imports) for m in models]
        dsl = self._dsl_class(models)
        entry = self._entry_point()
        return cm.module(
            [*imports.statements(), *builders, dsl, entry],
            doc=self._module_doc(models),
        )

    # -----------------------------------------------------------------------
    # Builders
    # -----------------------------------------------------------------------

    def emit_builder(self, model: ClassBuilderModel, imports: cm.Imports) -> ast.ClassDef:
        init = cm.function(
            "__init__",
            [cm.param("self"), cm.param("resource", cm.name("URIRef")), cm.param("graph", cm.name("Graph"))],
            [
                cm.assign(cm.store_attr("self", "_resource"), cm.name("resource")),
                cm.assign(cm.store_attr("self", "_graph"), cm.name("graph")),
            ],
        )
        resource = cm.function(
            "resource",
            [cm.param("self")],
            [cm.ret(cm.attr("self", "_resource"))],
            returns=cm.name("URIRef"),
            decorators=[cm.name("property")],
        )
        body: list[cm.Stmt] = [init, resource]
        for prop in model.properties:
            body.extend(self.properties.setters(prop, model.builder_class_name, imports))

        validate = self.validation.emit(
            model,
            cm.attr("self", "_graph"),
            cm.attr("self", "_resource"),
            imports,
            include_docstring=self.options.output.include_docstrings,
        )
        if validate is not None:
            body.append(validate)

        doc = None
        if self.options.output.include_docstrings:
            doc = f"Builds {model.class_iri} resources; setters check values before writing."
        return cm.cls(model.builder_class_name, [], body, doc=doc)

    # -----------------------------------------------------------------------
    # DSL context
    # -----------------------------------------------------------------------

    def _dsl_class(self, models: list[ClassBuilderModel]) -> ast.ClassDef:
        init = cm.function(
            "__init__",
            [cm.param("self")],
            [
                cm.assign(cm.store_attr("self", "_graph"), cm.call("Graph")),
                cm.assign(cm.store_attr("self", "_instances"), cm.list_of([])),
            ],
        )
        body: list[cm.Stmt] = [init]
        body.extend(self._factory(m) for m in models)
        body.append(cm.function(
            "build",
            [cm.param("self")],
            [cm.ret(cm.attr("self", "_graph"))],
            returns=cm.name("Graph"),
            doc="The graph holding every resource built so far." if self.options.output.include_docstrings else None,
        ))
        body.append(cm.function(
            "instances",
            [cm.param("self")],
            [cm.ret(cm.call("list", cm.attr("self", "_instances")))],
            returns=cm.subscript("list", cm.name("URIRef")),
        ))
        return cm.cls(self.dsl_class_name, [], body)

    def _factory(self, model: ClassBuilderModel) -> ast.FunctionDef:
        configure_type = _configure_type(model.builder_class_name)
        body: list[cm.Stmt] = [
            cm.assign("resource", cm.if_exp(
                cm.compare(cm.name("iri"), "is", cm.const(None)),
                cm.call("BNode"),
                cm.call("URIRef", cm.name("iri")),
            )),
            cm.expr_stmt(cm.call(
                cm.attr("self", "_graph", "add"),
                cm.tuple_of([
                    cm.name("resource"),
                    cm.attr("RDF", "type"),
                    cm.call("URIRef", cm.const(model.class_iri)),
                ]),
            )),
            cm.assign("builder", cm.call(
                model.builder_class_name, cm.name("resource"), cm.attr("self", "_graph"),
            )),
            cm.if_(
                cm.compare(cm.name("configure"), "is not", cm.const(None)),
                [cm.expr_stmt(cm.call("configure", cm.name("builder")))],
            ),
        ]
        if self.validates_on_build:
            body.append(cm.expr_stmt(cm.call(
                cm.attr(cm.call(cm.attr("builder", "validate")), "or_throw"),
            )))
        body.append(cm.expr_stmt(cm.call(cm.attr("self", "_instances", "append"), cm.name("resource"))))
        body.append(cm.ret(cm.name("resource")))

        doc = None
        if self.options.output.include_docstrings:
            doc = f"Create a {model.class_name} resource ({model.class_iri})."
        return cm.function(
            model.builder_name,
            [
                cm.param("self"),
                cm.param("iri", cm.union(cm.name("str"), cm.const(None)), cm.const(None)),
                cm.param("configure", configure_type, cm.const(None)),
            ],
            body,
            returns=cm.name("URIRef"),
            doc=doc,
        )

    def _entry_point(self) -> ast.FunctionDef:
        dsl_class = self.dsl_class_name
        configure_type = _configure_type(dsl_class)
        doc = None
        if self.options.output.include_docstrings:
            doc = f"Create a {dsl_class} and run ``configure`` on it."
        return cm.function(
            self.options.dsl_name,
            [cm.param("configure", configure_type, cm.const(None))],
            [
                cm.assign("dsl", cm.call(dsl_class)),
                cm.if_(
                    cm.compare(cm.name("configure"), "is not", cm.const(None)),
                    [cm.expr_stmt(cm.call("configure", cm.name("dsl")))],
                ),
                cm.ret(cm.name("dsl")),
            ],
            returns=cm.name(dsl_class),
            doc=doc,
        )

    def _module_doc(self, models: list[ClassBuilderModel]) -> str | None:
        if not self.options.output.include_docstrings:
            return None
        names = ", ".join(m.class_name for m in models) or "no classes"
        return f"Instance DSL for {names}."


def _configure_type(target: str) -> cm.Expr:
    """``Callable[[target], object] | None``."""
    return cm.union(
        cm.subscript("Callable", cm.tuple_of([cm.list_of([cm.name(target)]), cm.name("object")])),
        cm.const(None),
    )
