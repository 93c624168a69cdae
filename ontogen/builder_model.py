"""Class builder models — the per-class view every emitter works from.

Built once per run from the OntologyModel:

  ShaclShape    -> ClassBuilderModel    (names, IRIs, module names)
  ShaclProperty -> PropertyBuilderModel (identifier, resolved type, checks)

This is also where structural problems of the schema are detected: duplicate
paths, identifier collisions within a shape, and class or module name
collisions across shapes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from .errors import (
    ClassNameCollisionError,
    DuplicatePropertyPathError,
    PropertyNameCollisionError,
)
from .naming import (
    builder_class_name_of,
    builder_name_of,
    dsl_module_name_of,
    module_name_of,
    variant_name,
    wrapper_name_of,
)
from .options import GenerationOptions
from .resolver import ResolvedType, ScalarKind, TypeResolver, convert_constant
from .types import JsonLdProperty, OntologyModel, ShaclProperty, ShaclShape

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PropertyConstraints:
    """Checks that apply to one property, with constants already typed."""
    min_count: int | None = None
    max_count: int | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min_inclusive: float | None = None
    max_inclusive: float | None = None
    min_exclusive: float | None = None
    max_exclusive: float | None = None
    in_values: tuple | None = None
    has_value: Any = None

    @property
    def has_local_checks(self) -> bool:
        return any(
            v is not None
            for v in (
                self.min_length, self.max_length, self.pattern,
                self.min_inclusive, self.max_inclusive,
                self.min_exclusive, self.max_exclusive,
                self.in_values, self.has_value,
            )
        )

    @property
    def has_cardinality(self) -> bool:
        return self.min_count is not None or self.max_count is not None


def constraints_of(prop: ShaclProperty, resolved: ResolvedType) -> PropertyConstraints:
    kind = resolved.scalar
    string = prop.string if kind == ScalarKind.STRING else None
    numeric = prop.numeric if kind in (ScalarKind.INTEGER, ScalarKind.DOUBLE) else None
    if kind == ScalarKind.INTEGER:
        bound = _integer_bound
    else:
        bound = _float_bound

    in_values = None
    if prop.values.in_values:
        in_values = tuple(convert_constant(kind, v, prop.path) for v in prop.values.in_values)
    has_value = None
    if prop.values.has_value is not None:
        has_value = convert_constant(kind, prop.values.has_value, prop.path)

    return PropertyConstraints(
        min_count=prop.min_count,
        max_count=prop.max_count,
        min_length=string.min_length if string else None,
        max_length=string.max_length if string else None,
        pattern=string.pattern if string else None,
        min_inclusive=bound(numeric.min_inclusive) if numeric else None,
        max_inclusive=bound(numeric.max_inclusive) if numeric else None,
        min_exclusive=bound(numeric.min_exclusive) if numeric else None,
        max_exclusive=bound(numeric.max_exclusive) if numeric else None,
        in_values=in_values,
        has_value=has_value,
    )


def _integer_bound(value):
    if value is None:
        return None
    return int(value) if float(value).is_integer() else float(value)


def _float_bound(value):
    return None if value is None else float(value)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PropertyBuilderModel:
    property_name: str
    property_iri: str
    resolved_type: ResolvedType
    is_required: bool
    is_list: bool
    constraints: PropertyConstraints
    alias: str
    source: ShaclProperty
    multi_setter_name: str | None = None
    jsonld: JsonLdProperty | None = None

    @property
    def is_reference(self) -> bool:
        return self.resolved_type.is_reference

    @property
    def description(self) -> str:
        return self.source.description

    @property
    def label(self) -> str:
        return self.source.name


@dataclass(frozen=True)
class ClassBuilderModel:
    class_name: str
    class_iri: str
    builder_name: str
    properties: tuple[PropertyBuilderModel, ...]
    shape_iri: str
    shape: ShaclShape

    @property
    def module_name(self) -> str:
        return module_name_of(self.class_name)

    @property
    def wrapper_name(self) -> str:
        return wrapper_name_of(self.class_name)

    @property
    def wrapper_module_name(self) -> str:
        return f"{self.module_name}_wrapper"

    @property
    def builder_class_name(self) -> str:
        return builder_class_name_of(self.class_name)

    @property
    def known_predicates(self) -> list[str]:
        return sorted({p.property_iri for p in self.properties})

    def references(self) -> list[str]:
        """Names of generated interfaces this class refers to, sorted."""
        return sorted({
            p.resolved_type.reference_name
            for p in self.properties
            if p.resolved_type.reference_name and p.resolved_type.reference_name != self.class_name
        })


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def build_property_models(
    shape: ShaclShape,
    resolver: TypeResolver,
) -> tuple[PropertyBuilderModel, ...]:
    seen_paths: set[str] = set()
    owners: dict[str, str] = {}
    models: list[PropertyBuilderModel] = []

    for prop in shape.properties:
        if prop.path in seen_paths:
            raise DuplicatePropertyPathError(shape.shape_iri, prop.path)
        seen_paths.add(prop.path)

        identifier = resolver.property_name(prop)
        if identifier in owners:
            raise PropertyNameCollisionError(shape.shape_iri, identifier, (owners[identifier], prop.path))
        owners[identifier] = prop.path

        resolved = resolver.resolve(prop)
        models.append(PropertyBuilderModel(
            property_name=identifier,
            property_iri=prop.path,
            resolved_type=resolved,
            is_required=prop.is_required,
            is_list=prop.is_list,
            constraints=constraints_of(prop, resolved),
            alias=resolver.jsonld_alias(prop),
            source=prop,
            jsonld=resolver.jsonld_term(prop),
        ))

    # multi-value setters share the builder namespace with the plain setters
    strategy = resolver.options.naming.strategy
    result = []
    for model in models:
        if model.is_list:
            multi = variant_name(model.property_name, "all", strategy)
            if multi in owners:
                raise PropertyNameCollisionError(
                    shape.shape_iri, multi, (owners[multi], model.property_iri)
                )
            owners[multi] = model.property_iri
            model = replace(model, multi_setter_name=multi)
        result.append(model)
    return tuple(result)


def build_class_models(
    model: OntologyModel,
    options: GenerationOptions,
    resolver: TypeResolver | None = None,
) -> list[ClassBuilderModel]:
    """One ClassBuilderModel per shape, in model order.

    When the model declares classes explicitly, declared classes without a
    shape are reported and skipped; shapes for undeclared classes are still
    generated.
    """
    resolver = resolver or TypeResolver(model, options)

    if model.classes:
        shaped = {shape.target_class for shape in model.shapes}
        for declared in model.classes:
            if declared.class_iri not in shaped:
                logger.warning("No SHACL shape found for class %s; skipping", declared.class_iri)

    class_models: list[ClassBuilderModel] = []
    by_name: dict[str, str] = {}
    by_module: dict[str, str] = {}
    reserved_modules = {dsl_module_name_of(options.dsl_name)}

    for shape in model.shapes:
        class_name = resolver.class_name(shape.target_class)
        if class_name in by_name:
            raise ClassNameCollisionError(class_name, (by_name[class_name], shape.target_class))
        by_name[class_name] = shape.target_class

        cbm = ClassBuilderModel(
            class_name=class_name,
            class_iri=shape.target_class,
            builder_name=builder_name_of(class_name),
            properties=build_property_models(shape, resolver),
            shape_iri=shape.shape_iri,
            shape=shape,
        )
        for module in (cbm.module_name, cbm.wrapper_module_name):
            if module in by_module or module in reserved_modules:
                other = by_module.get(module, options.dsl_name)
                raise ClassNameCollisionError(module, (other, shape.target_class))
            by_module[module] = shape.target_class
        class_models.append(cbm)

    return class_models
