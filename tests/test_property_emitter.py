"""Tests for builder setter emission, one value type at a time."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import ast

import pytest

from ontogen import codemodel as cm
from ontogen.builder_model import build_class_models
from ontogen.options import GenerationOptions, NamingConfig, NamingStrategy, OutputConfig
from ontogen.property_emitter import (
    BooleanSetterStrategy,
    DoubleSetterStrategy,
    IntegerSetterStrategy,
    PropertyEmitter,
    ReferenceSetterStrategy,
    StringSetterStrategy,
    strategy_for,
)
from ontogen.types import (
    NumericConstraints,
    OntologyModel,
    ShaclProperty,
    ShaclShape,
    ValueConstraints,
)

from conftest import EX, XSD_NS, build_people_model


def _property(model: OntologyModel, name: str, options: GenerationOptions | None = None):
    options = options or GenerationOptions()
    for cbm in build_class_models(model, options):
        for prop in cbm.properties:
            if prop.property_name == name:
                return prop
    raise KeyError(name)


def _setters(name: str, options: GenerationOptions | None = None, model: OntologyModel | None = None) -> dict[str, str]:
    options = options or GenerationOptions()
    prop = _property(model or build_people_model(), name, options)
    emitter = PropertyEmitter(options.output)
    imports = cm.Imports()
    fns = emitter.setters(prop, "PersonBuilder", imports)
    return {fn.name: ast.unparse(fn) for fn in fns}


def _single_shape(*props: ShaclProperty) -> OntologyModel:
    return OntologyModel(shapes=(ShaclShape(EX + "ItemShape", EX + "Item", props),))


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

class TestStrategyFor:
    @pytest.mark.parametrize("name, expected", [
        ("name", StringSetterStrategy),
        ("age", IntegerSetterStrategy),
        ("score", DoubleSetterStrategy),
        ("active", BooleanSetterStrategy),
        ("knows", ReferenceSetterStrategy),
    ])
    def test_by_value_type(self, name, expected):
        prop = _property(build_people_model(), name)
        assert type(strategy_for(prop, OutputConfig())) is expected


# ---------------------------------------------------------------------------
# Single-value setters
# ---------------------------------------------------------------------------

class TestSingleSetter:
    def test_string_setter_signature_and_term(self):
        source = _setters("name")["name"]
        assert "def name(self, value: str, lang: str | None=None) -> PersonBuilder:" in source
        assert "Literal(value, lang=lang) if lang else Literal(value, datatype=XSD.string)" in source
        assert "return self" in source

    def test_checks_come_before_the_write(self):
        fn = ast.parse(_setters("name")["name"]).body[0]
        statements = [s for s in fn.body if not isinstance(s, ast.Expr) or not isinstance(s.value, ast.Constant)]
        kinds = [type(s).__name__ for s in statements]
        assert kinds == ["If", "If", "Expr", "Return"]

    def test_pattern_uses_re_search(self):
        source = _setters("name")["name"]
        assert "if re.search('^[A-Z]', value) is None:" in source
        assert "ConstraintKind.PATTERN, 'name must match pattern: ^[A-Z]'" in source

    def test_language_tags_disabled(self):
        options = GenerationOptions(output=OutputConfig(support_language_tags=False))
        source = _setters("name", options)["name"]
        assert "lang" not in source
        assert "Literal(value, datatype=XSD.string)" in source

    def test_default_language(self):
        options = GenerationOptions(output=OutputConfig(default_language="en"))
        source = _setters("name", options)["name"]
        assert "lang: str | None='en'" in source

    def test_integer_bounds(self):
        source = _setters("age")["age"]
        assert "if value < 0:" in source
        assert "if value > 150:" in source
        assert "'age must be >= 0'" in source
        assert "Literal(value, datatype=XSD.integer)" in source

    def test_exclusive_double_bounds(self):
        model = _single_shape(ShaclProperty(
            path=EX + "ratio", datatype=XSD_NS + "decimal", max_count=1,
            numeric=NumericConstraints(min_exclusive=0, max_exclusive=1),
        ))
        source = _setters("ratio", model=model)["ratio"]
        assert "if value <= 0.0:" in source
        assert "if value >= 1.0:" in source
        assert "ConstraintKind.MIN_EXCLUSIVE, 'ratio must be > 0.0'" in source
        assert "Literal(value, datatype=XSD.decimal)" in source

    def test_boolean(self):
        source = _setters("active")["active"]
        assert "def active(self, value: bool) -> PersonBuilder:" in source
        assert "Literal(value, datatype=XSD.boolean)" in source

    def test_has_value(self):
        model = _single_shape(ShaclProperty(
            path=EX + "kind", datatype=XSD_NS + "string", max_count=1,
            values=ValueConstraints(has_value="book"),
        ))
        source = _setters("kind", model=model)["kind"]
        assert "if value != 'book':" in source
        assert "'kind must equal book'" in source

    def test_typed_in_values(self):
        model = _single_shape(ShaclProperty(
            path=EX + "rating", datatype=XSD_NS + "integer", max_count=1,
            values=ValueConstraints(in_values=("1", "2", "3")),
        ))
        source = _setters("rating", model=model)["rating"]
        assert "if value not in (1, 2, 3):" in source

    def test_reference_setter(self):
        source = _setters("knows")["knows"]
        assert "def knows(self, value: Person | URIRef | str) -> PersonBuilder:" in source
        assert "as_node(value)" in source

    def test_reference_annotation_without_interfaces(self):
        prop = _property(build_people_model(), "knows")
        fn = PropertyEmitter(OutputConfig(), interfaces=False).setters(prop, "PersonBuilder", cm.Imports())[0]
        assert ast.unparse(fn.args.args[1].annotation) == "URIRef | str"

    def test_reference_in_values_compare_iris(self):
        model = _single_shape(ShaclProperty(
            path=EX + "category", target_class=EX + "Category", max_count=1,
            values=ValueConstraints(in_values=(EX + "fiction", EX + "poetry")),
        ))
        source = _setters("category", model=model)["category"]
        assert f"if str(as_node(value)) not in ('{EX}fiction', '{EX}poetry'):" in source


# ---------------------------------------------------------------------------
# Multi-value setters
# ---------------------------------------------------------------------------

class TestMultiSetter:
    def test_only_list_properties_get_one(self):
        assert sorted(_setters("name")) == ["name"]
        assert sorted(_setters("nickname")) == ["nickname", "nicknameAll"]

    def test_checks_all_before_writing(self):
        source = _setters("nickname")["nicknameAll"]
        assert "def nicknameAll(self, *values: str, lang: str | None=None) -> PersonBuilder:" in source
        loop = source.index("for value in values:")
        build = source.index("objects = [")
        write = source.index("add_values(self._graph, self._resource,")
        assert loop < build < write

    def test_snake_case_name(self):
        options = GenerationOptions(naming=NamingConfig(strategy=NamingStrategy.SNAKE_CASE))
        assert sorted(_setters("knows", options)) == ["knows", "knows_all"]

    def test_default_language_in_multi_setter(self):
        options = GenerationOptions(output=OutputConfig(default_language="en"))
        source = _setters("nickname", options)["nicknameAll"]
        assert "*values: str, lang: str | None='en')" in source
        assert "objects = [Literal(value, lang=lang) if lang else Literal(value, datatype=XSD.string) for value in values]" in source

    def test_language_tags_disabled_in_multi_setter(self):
        options = GenerationOptions(output=OutputConfig(support_language_tags=False))
        source = _setters("nickname", options)["nicknameAll"]
        assert "def nicknameAll(self, *values: str) -> PersonBuilder:" in source
        assert "objects = [Literal(value, datatype=XSD.string) for value in values]" in source


# ---------------------------------------------------------------------------
# Declared datatypes
# ---------------------------------------------------------------------------

class TestDeclaredDatatype:
    def test_xsd_int_is_kept(self):
        model = _single_shape(ShaclProperty(path=EX + "count", datatype=XSD_NS + "int", max_count=1))
        source = _setters("count", model=model)["count"]
        assert "def count(self, value: int) -> PersonBuilder:" in source
        assert "Literal(value, datatype=XSD.int)" in source

    def test_non_xsd_datatype_written_as_iri(self):
        model = _single_shape(ShaclProperty(path=EX + "code", datatype=EX + "Code", max_count=1))
        source = _setters("code", model=model)["code"]
        assert f"Literal(value, datatype=URIRef('{EX}Code'))" in source

    def test_lang_string_untagged_values_are_xsd_string(self):
        model = _single_shape(ShaclProperty(
            path=EX + "label", datatype="http://www.w3.org/1999/02/22-rdf-syntax-ns#langString", max_count=1,
        ))
        source = _setters("label", model=model)["label"]
        assert "Literal(value, lang=lang) if lang else Literal(value, datatype=XSD.string)" in source

    def test_strategy_carries_declared_datatype(self):
        model = _single_shape(ShaclProperty(path=EX + "price", datatype=XSD_NS + "decimal", max_count=1))
        strategy = strategy_for(_property(model, "price"), OutputConfig())
        assert type(strategy) is DoubleSetterStrategy
        assert strategy.datatype == XSD_NS + "decimal"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_one_failure_per_facet(self):
        prop = _property(build_people_model(), "age")
        failures = strategy_for(prop, OutputConfig()).failures(prop, cm.name("value"), cm.Imports())
        assert [f.kind for f in failures] == ["MIN_INCLUSIVE", "MAX_INCLUSIVE"]
        assert ast.unparse(failures[1].failed) == "value > 150"
        assert failures[1].message == "age must be <= 150"

    def test_checks_raise_per_failure(self):
        prop = _property(build_people_model(), "name")
        strategy = strategy_for(prop, OutputConfig())
        checks = strategy.checks(prop, cm.name("value"), cm.Imports())
        assert len(checks) == len(strategy.failures(prop, cm.name("value"), cm.Imports())) == 2
        assert all(isinstance(c.body[0], ast.Raise) for c in checks)
