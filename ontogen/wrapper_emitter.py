"""Wrapper emitter — the graph-backed implementation of each interface.

Per shape, ``<class>_wrapper.py`` holds

    class PersonWrapper(Person, RdfBacked):
        KNOWN_PREDICATES = frozenset({...})
        SHAPE_IRI = '...'
        PROPERTY_MAPPINGS = {'name': '...'}

        def __init__(self, handle): ...
        @memoized
        def name(self) -> str: ...        # one per property
        def validate(self): ...           # unless validation mode is NONE

    registry.register('<class IRI>', PersonWrapper)

Property reads by kind and cardinality:

  literal   required -> first converted value, MissingPropertyError if none
            optional -> first converted value or None
            list     -> every value that converts, the rest are dropped
  object    same cardinality rules; each node goes through the registry
"""

from __future__ import annotations

import ast

from . import codemodel as cm
from .builder_model import ClassBuilderModel, PropertyBuilderModel
from .interface_emitter import file_header
from .naming import module_name_of
from .options import GenerationOptions
from .resolver import Cardinality
from .validation_emitter import ValidationEmitter

RUNTIME = "ontogen.runtime"


def _rdf(*path: str) -> cm.Expr:
    return cm.attr("self", "_rdf", *path)


class WrapperEmitter:

    def __init__(self, options: GenerationOptions, validation: ValidationEmitter | None = None):
        self.options = options
        self.validation = validation or ValidationEmitter(options.validation)

    def emit(self, model: ClassBuilderModel) -> str:
        """Source of ``<module_name>_wrapper.py`` for ``model``."""
        return cm.render(self.emit_module(model), header=file_header(model))

    def emit_module(self, model: ClassBuilderModel) -> ast.Module:
        imports = cm.Imports()
        imports.add("rdflib", "URIRef")
        imports.add(f"{RUNTIME}.handle", "RdfBacked", "RdfHandle")
        imports.add(f"{RUNTIME}.registry", "registry")
        imports.add(model.module_name, model.class_name, level=1)
        for ref in model.references():
            imports.add(module_name_of(ref), ref, level=1, type_checking=True)

        body: list[cm.Stmt] = [
            cm.assign("KNOWN_PREDICATES", self._known_predicates(model)),
            cm.assign("SHAPE_IRI", cm.const(model.shape_iri)),
            cm.assign("PROPERTY_MAPPINGS", cm.dict_of(
                (cm.const(p.alias), cm.const(p.property_iri)) for p in model.properties
            )),
            self._init(),
            self._rdf_accessor(),
        ]
        body.extend(self._accessor(model, p, imports) for p in model.properties)

        validate = self.validation.emit(
            model, _rdf("graph"), _rdf("node"), imports,
            include_docstring=self.options.output.include_docstrings,
        )
        if validate is not None:
            body.append(validate)
        body.append(self._repr(model))

        wrapper = cm.cls(
            model.wrapper_name,
            [cm.name(model.class_name), cm.name("RdfBacked")],
            body,
            doc=self._doc(model),
        )
        register = cm.expr_stmt(cm.call(
            cm.attr("registry", "register"),
            cm.const(model.class_iri),
            cm.name(model.wrapper_name),
        ))
        return cm.module([*imports.statements(), wrapper, register])

    # -----------------------------------------------------------------------
    # Fixed members
    # -----------------------------------------------------------------------

    def _known_predicates(self, model: ClassBuilderModel) -> cm.Expr:
        predicates = model.known_predicates
        if not predicates:
            return cm.call("frozenset")
        return cm.call("frozenset", cm.set_of(
            cm.call("URIRef", cm.const(iri)) for iri in predicates
        ))

    def _init(self) -> ast.FunctionDef:
        return cm.function(
            "__init__",
            [cm.param("self"), cm.param("handle", cm.name("RdfHandle"))],
            [cm.assign(
                cm.store_attr("self", "_rdf"),
                cm.call(cm.attr("handle", "with_known"), cm.attr("self", "KNOWN_PREDICATES")),
            )],
        )

    def _rdf_accessor(self) -> ast.FunctionDef:
        return cm.function(
            "rdf",
            [cm.param("self")],
            [cm.ret(cm.attr("self", "_rdf"))],
            returns=cm.name("RdfHandle"),
            decorators=[cm.name("property")],
        )

    def _repr(self, model: ClassBuilderModel) -> ast.FunctionDef:
        return cm.function(
            "__repr__",
            [cm.param("self")],
            [cm.ret(cm.fstring(f"{model.wrapper_name}(", _rdf("node"), ")"))],
            returns=cm.name("str"),
        )

    def _doc(self, model: ClassBuilderModel) -> str | None:
        if not self.options.output.include_docstrings:
            return None
        return f"{model.class_name} backed by an RDF node; properties are read on first access."

    # -----------------------------------------------------------------------
    # Property accessors
    # -----------------------------------------------------------------------

    def _accessor(self, model: ClassBuilderModel, prop: PropertyBuilderModel, imports: cm.Imports) -> ast.FunctionDef:
        imports.add(f"{RUNTIME}.lazy", "memoized")
        predicate = cm.call("URIRef", cm.const(prop.property_iri))
        if prop.is_reference:
            body = self._object_body(model, prop, predicate, imports)
        else:
            body = self._literal_body(model, prop, predicate, imports)
        return cm.function(
            prop.property_name,
            [cm.param("self")],
            body,
            returns=prop.resolved_type.annotation_node(),
            decorators=[cm.name("memoized")],
        )

    def _literal_body(self, model, prop: PropertyBuilderModel, predicate: cm.Expr, imports: cm.Imports) -> list[cm.Stmt]:
        imports.add(f"{RUNTIME}.graph_ops", "convert_literals", "literal_values")
        read = cm.assign("values", cm.call(
            "convert_literals",
            cm.call("literal_values", _rdf("graph"), _rdf("node"), predicate),
            cm.name(prop.resolved_type.scalar.value),
        ))
        return [read, *self._select(model, prop, "values", lambda first: first, imports)]

    def _object_body(self, model, prop: PropertyBuilderModel, predicate: cm.Expr, imports: cm.Imports) -> list[cm.Stmt]:
        imports.add(f"{RUNTIME}.graph_ops", "object_values")
        read = cm.assign("nodes", cm.call("object_values", _rdf("graph"), _rdf("node"), predicate))

        if prop.resolved_type.reference_name is None:
            # no generated class for the target: hand out the nodes themselves
            def wrap(node):
                return node
        else:
            target = prop.resolved_type.reference_iri

            def wrap(node):
                return cm.call(
                    cm.attr("registry", "materialize"),
                    cm.call(_rdf("ref"), node),
                    cm.const(target),
                )
        return [read, *self._select(model, prop, "nodes", wrap, imports)]

    def _select(self, model, prop: PropertyBuilderModel, var: str, wrap, imports: cm.Imports) -> list[cm.Stmt]:
        values = cm.name(var)
        cardinality = prop.resolved_type.cardinality
        if cardinality == Cardinality.LIST:
            if prop.is_reference and prop.resolved_type.reference_name is not None:
                return [cm.ret(cm.list_comp(wrap(cm.name("node")), "node", values))]
            return [cm.ret(values)]

        first = wrap(cm.index(values, 0))
        if cardinality == Cardinality.OPTIONAL:
            return [cm.ret(cm.if_exp(values, first, cm.const(None)))]

        imports.add(f"{RUNTIME}.errors", "MissingPropertyError")
        missing = cm.raise_(cm.call(
            "MissingPropertyError",
            cm.const(model.class_name),
            cm.const(prop.property_name),
            cm.const(prop.property_iri),
            _rdf("node"),
        ))
        return [cm.if_(cm.not_(values), [missing]), cm.ret(first)]
