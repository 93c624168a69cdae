"""Interface emitter — one abstract domain class per shape.

The interface is a typed, documented contract and nothing else: abstract
read-only properties carrying their IRIs as metadata, no rdflib import.

    @rdf_class('http://example.org/Person')
    class Person(abc.ABC):

        @property
        @rdf_property('http://example.org/name')
        @cardinality(min_count=1, max_count=1)
        @abc.abstractmethod
        def name(self) -> str:
            ...
"""

from __future__ import annotations

import ast

from . import codemodel as cm
from .builder_model import ClassBuilderModel, PropertyBuilderModel
from .naming import module_name_of
from .options import GenerationOptions
from .resolver import describe_jsonld

ANNOTATIONS = "ontogen.annotations"


def file_header(model: ClassBuilderModel) -> list[str]:
    return ["GENERATED FILE - DO NOT EDIT", f"Generated from SHACL shape: {model.shape_iri}"]


class InterfaceEmitter:

    def __init__(self, options: GenerationOptions):
        self.options = options

    def emit(self, model: ClassBuilderModel) -> str:
        """Source of ``<module_name>.py`` for ``model``."""
        return cm.render(self.emit_module(model), header=file_header(model))

    def emit_module(self, model: ClassBuilderModel) -> ast.Module:
        imports = cm.Imports()
        imports.add("abc")
        imports.add(ANNOTATIONS, "rdf_class", "rdf_property")
        for ref in model.references():
            imports.add(module_name_of(ref), ref, level=1, type_checking=True)

        body = [self._property(p, imports) for p in model.properties]
        interface = cm.cls(
            model.class_name,
            [cm.attr("abc", "ABC")],
            body,
            decorators=[cm.call("rdf_class", cm.const(model.class_iri))],
            doc=self._class_doc(model),
        )
        return cm.module([*imports.statements(), interface])

    def _property(self, prop: PropertyBuilderModel, imports: cm.Imports) -> ast.FunctionDef:
        decorators: list[cm.Expr] = [
            cm.name("property"),
            cm.call("rdf_property", cm.const(prop.property_iri)),
        ]
        c = prop.constraints
        if self.options.output.constraint_annotations and c.has_cardinality:
            imports.add(ANNOTATIONS, "cardinality")
            bounds = {}
            if c.min_count is not None:
                bounds["min_count"] = cm.const(c.min_count)
            if c.max_count is not None:
                bounds["max_count"] = cm.const(c.max_count)
            decorators.append(cm.call("cardinality", **bounds))
        decorators.append(cm.attr("abc", "abstractmethod"))

        return cm.function(
            prop.property_name,
            [cm.param("self")],
            [],
            returns=prop.resolved_type.annotation_node(),
            decorators=decorators,
            doc=self._property_doc(prop),
        )

    # -----------------------------------------------------------------------
    # Docstrings
    # -----------------------------------------------------------------------

    def _class_doc(self, model: ClassBuilderModel) -> str | None:
        if not self.options.output.include_docstrings:
            return None
        return f"{model.class_name} ({model.class_iri}).\n\nShape: {model.shape_iri}\n"

    def _property_doc(self, prop: PropertyBuilderModel) -> str | None:
        if not self.options.output.include_docstrings:
            return None
        lines = []
        summary = prop.description or prop.label
        if summary:
            lines.append(summary)
            lines.append("")
        lines.append(f"Path: {prop.property_iri}")
        c = prop.constraints
        if c.has_cardinality:
            lines.append(f"Cardinality: {_bound(c.min_count, '0')}..{_bound(c.max_count, '*')}")
        if prop.jsonld is not None:
            lines.append(f"JSON-LD: {describe_jsonld(prop.jsonld)}")
        return "\n".join(lines)


def _bound(value: int | None, default: str) -> str:
    return default if value is None else str(value)
