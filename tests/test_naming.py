"""Tests for IRI -> identifier naming."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ontogen.naming import (
    builder_name_of,
    class_name_of,
    dsl_class_name_of,
    dsl_module_name_of,
    local_name,
    module_name_of,
    property_name_of,
    to_snake_case,
    variant_name,
)
from ontogen.options import NamingStrategy


class TestLocalName:
    @pytest.mark.parametrize("iri, expected", [
        ("http://example.org/Person", "Person"),
        ("http://example.org/ns#Person", "Person"),
        ("http://example.org/people/", "people"),
        ("ex:Person", "Person"),
        ("Person", "Person"),
    ])
    def test_local_name(self, iri, expected):
        assert local_name(iri) == expected


class TestClassNames:
    @pytest.mark.parametrize("iri, expected", [
        ("http://example.org/Person", "Person"),
        ("http://example.org/concept-scheme", "ConceptScheme"),
        ("http://example.org/data_set", "DataSet"),
        ("http://example.org/3dModel", "_3dModel"),
    ])
    def test_pascal_case(self, iri, expected):
        assert class_name_of(iri) == expected

    def test_idempotent(self):
        name = class_name_of("http://example.org/concept-scheme")
        assert class_name_of(name) == name

    def test_derived_names(self):
        assert builder_name_of("ConceptScheme") == "conceptScheme"
        assert module_name_of("ConceptScheme") == "concept_scheme"
        assert dsl_class_name_of("ontology") == "OntologyDsl"
        assert dsl_module_name_of("peopleOntology") == "people_ontology_dsl"

    def test_builder_name_avoids_dsl_members(self):
        assert builder_name_of("Build") == "build_"
        assert builder_name_of("Instances") == "instances_"


class TestPropertyNames:
    @pytest.mark.parametrize("name, strategy, expected", [
        ("first-name", NamingStrategy.CAMEL_CASE, "firstName"),
        ("first_name", NamingStrategy.CAMEL_CASE, "firstName"),
        ("firstName", NamingStrategy.SNAKE_CASE, "first_name"),
        ("first-name", NamingStrategy.PASCAL_CASE, "FirstName"),
        ("http://example.org/ns#homePage", NamingStrategy.CAMEL_CASE, "homePage"),
    ])
    def test_strategies(self, name, strategy, expected):
        assert property_name_of(name, strategy) == expected

    @pytest.mark.parametrize("name, expected", [
        ("class", "class_"),
        ("import", "import_"),
        ("rdf", "rdf_"),
        ("validate", "validate_"),
        ("resource", "resource_"),
    ])
    def test_reserved_names(self, name, expected):
        assert property_name_of(name) == expected

    def test_variant_names(self):
        assert variant_name("knows", "all", NamingStrategy.CAMEL_CASE) == "knowsAll"
        assert variant_name("knows", "all", NamingStrategy.SNAKE_CASE) == "knows_all"
        assert variant_name("class_", "all", NamingStrategy.CAMEL_CASE) == "classAll"

    def test_snake_case_keeps_trailing_acronym_together(self):
        assert to_snake_case("homePageURL") == "home_page_url"
