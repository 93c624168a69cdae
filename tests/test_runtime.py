"""Tests for the runtime used by generated code: handles, registry, results."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import threading

import pytest
from rdflib import BNode, Graph, Literal, Namespace, RDF, URIRef

from ontogen.runtime import (
    ConstraintKind,
    DefaultRdfHandle,
    NotConfigured,
    Ok,
    PropertyBag,
    RdfBacked,
    RdfRef,
    Registry,
    ShaclViolation,
    ValidationContext,
    ValidationException,
    Violations,
    as_rdf,
    memoized,
)
from ontogen.runtime.graph_ops import (
    add_values,
    as_node,
    convert_literal,
    convert_literals,
    count_literals,
    count_objects,
)
from ontogen.runtime.validation import result_of

from conftest import EX

EXN = Namespace(EX)


class _Counter:
    def __init__(self):
        self.calls = 0

    @memoized
    def value(self):
        self.calls += 1
        return object()


class _Thing(RdfBacked):
    __rdf_class__ = EX + "Thing"

    def __init__(self, handle):
        self._rdf = handle

    @property
    def rdf(self):
        return self._rdf


class _FixedContext:
    def __init__(self, result):
        self.result = result

    def validate(self, graph, node):
        return self.result


def _violation(path=EX + "name") -> ShaclViolation:
    return ShaclViolation(
        focus_node=EX + "alice",
        shape_iri=EX + "PersonShape",
        constraint=ConstraintKind.MIN_COUNT,
        path=path,
        message="name is required (minCount=1)",
    )


def _graph() -> Graph:
    g = Graph()
    alice = EXN.alice
    g.add((alice, RDF.type, EXN.Person))
    g.add((alice, EXN.name, Literal("Alice")))
    g.add((alice, EXN.hobby, Literal("chess")))
    g.add((alice, EXN.hobby, Literal("go")))
    g.add((alice, EXN.friend, EXN.bob))
    g.add((alice, EXN.friend, BNode("anon")))
    return g


# ---------------------------------------------------------------------------
# memoized
# ---------------------------------------------------------------------------

class TestMemoized:
    def test_computes_once(self):
        c = _Counter()
        first = c.value
        assert c.value is first
        assert c.calls == 1

    def test_per_instance(self):
        a, b = _Counter(), _Counter()
        assert a.value is not b.value

    def test_class_access_returns_descriptor(self):
        assert isinstance(_Counter.value, memoized)

    def test_concurrent_first_reads_agree(self):
        c = _Counter()
        barrier = threading.Barrier(8)
        seen = []

        def read():
            barrier.wait()
            seen.append(c.value)

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert all(v is seen[0] for v in seen)


# ---------------------------------------------------------------------------
# Graph operations
# ---------------------------------------------------------------------------

class TestGraphOps:
    def test_counts_by_term_kind(self):
        g = _graph()
        assert count_literals(g, EXN.alice, EXN.hobby) == 2
        assert count_objects(g, EXN.alice, EXN.friend) == 2
        assert count_objects(g, EXN.alice, EXN.hobby) == 0

    @pytest.mark.parametrize("literal, kind, expected", [
        (Literal("42"), int, 42),
        (Literal(" 7 "), int, 7),
        (Literal("2.5"), float, 2.5),
        (Literal("true"), bool, True),
        (Literal("0"), bool, False),
        (Literal("hi", lang="en"), str, "hi"),
    ])
    def test_convert_literal(self, literal, kind, expected):
        assert convert_literal(literal, kind) == expected

    def test_convert_literal_rejects(self):
        with pytest.raises(ValueError):
            convert_literal(Literal("yes"), bool)

    def test_convert_literals_drops_failures(self):
        assert convert_literals([Literal("1"), Literal("x"), Literal("3")], int) == [1, 3]

    def test_as_node(self):
        handle = DefaultRdfHandle(EXN.bob, Graph())
        assert as_node(_Thing(handle)) == EXN.bob
        assert as_node(EX + "carol") == URIRef(EX + "carol")
        node = BNode()
        assert as_node(node) is node
        with pytest.raises(TypeError):
            as_node(42)

    def test_add_values(self):
        g = Graph()
        add_values(g, EXN.alice, EXN.hobby, [Literal("a"), Literal("b")])
        assert len(g) == 2


# ---------------------------------------------------------------------------
# Handles and extras
# ---------------------------------------------------------------------------

class TestHandle:
    def test_extras_exclude_known(self):
        handle = DefaultRdfHandle(EXN.alice, _graph(), known=frozenset({EXN.name}))
        extras = handle.extras
        assert isinstance(extras, PropertyBag)
        assert EXN.name not in extras.predicates()
        assert sorted(extras.strings(EX + "hobby")) == ["chess", "go"]
        assert extras.iris(EX + "friend") == [EXN.bob]
        assert len(extras) == 5  # type, 2 hobbies, 2 friends

    def test_with_known_accumulates(self):
        handle = DefaultRdfHandle(EXN.alice, _graph(), known=frozenset({EXN.name}))
        narrowed = handle.with_known(frozenset({EXN.hobby}))
        assert narrowed.known == {EXN.name, EXN.hobby}
        assert EXN.hobby not in narrowed.extras.predicates()

    def test_extras_objects_use_registry(self):
        registry = Registry()
        registry.register(_Thing, _Thing)
        handle = DefaultRdfHandle(EXN.alice, _graph())
        things = handle.extras.objects(EX + "friend", _Thing, registry=registry)
        assert sorted(str(t.rdf.node) for t in things) == sorted([EX + "bob", "anon"])

    def test_validate_not_configured(self):
        assert isinstance(DefaultRdfHandle(EXN.alice, Graph()).validate(), NotConfigured)

    def test_validate_with_context(self):
        handle = DefaultRdfHandle(EXN.alice, Graph(), validation_context=_FixedContext(Violations((_violation(),))))
        assert not handle.validate().conforms
        with pytest.raises(ValidationException):
            handle.validate_or_throw()

    def test_ref_carries_context(self):
        context = _FixedContext(Ok())
        ref = DefaultRdfHandle(EXN.alice, Graph(), validation_context=context).ref(EXN.bob)
        assert ref.node == EXN.bob
        assert ref.validation_context is context

    def test_as_rdf(self):
        handle = DefaultRdfHandle(EXN.alice, Graph())
        assert as_rdf(_Thing(handle)) is handle
        with pytest.raises(TypeError):
            as_rdf(object())


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_register_by_iri_and_lookup_by_type(self):
        registry = Registry()
        registry.register(EX + "Thing", _Thing)
        thing = registry.materialize(RdfRef(EXN.alice, _graph()), _Thing)
        assert isinstance(thing, _Thing)
        assert thing.rdf.node == EXN.alice
        assert _Thing in registry
        assert registry.keys() == [EX + "Thing"]

    def test_unknown_key(self):
        with pytest.raises(LookupError):
            Registry().materialize(RdfRef(EXN.alice, Graph()), EX + "Nothing")

    def test_type_without_class_iri(self):
        with pytest.raises(LookupError):
            Registry().register(object, _Thing)
        assert object not in Registry()

    def test_unregister_and_clear(self):
        registry = Registry()
        registry.register(EX + "A", _Thing)
        registry.register(EX + "B", _Thing)
        registry.unregister(EX + "A")
        assert len(registry) == 1
        registry.clear()
        assert len(registry) == 0

    def test_materialize_validated(self):
        registry = Registry()
        registry.register(_Thing, _Thing)
        ref = RdfRef(EXN.alice, _graph())
        thing = registry.materialize_validated(ref, _Thing, _FixedContext(Ok()))
        assert thing.rdf.validate().conforms
        with pytest.raises(ValidationException) as exc:
            registry.materialize_validated(ref, _Thing, _FixedContext(Violations((_violation(),))))
        assert len(exc.value.violations) == 1


# ---------------------------------------------------------------------------
# Validation results
# ---------------------------------------------------------------------------

class TestValidationResults:
    def test_result_of(self):
        assert isinstance(result_of([]), Ok)
        result = result_of([_violation()])
        assert isinstance(result, Violations)
        assert len(result) == 1
        assert list(result)[0].constraint == ConstraintKind.MIN_COUNT

    def test_violations_must_not_be_empty(self):
        with pytest.raises(ValueError):
            Violations(())

    def test_or_throw(self):
        Ok().or_throw()
        NotConfigured().or_throw()
        with pytest.raises(ValidationException, match="name is required"):
            result_of([_violation()]).or_throw()

    def test_summaries(self):
        assert Ok().summary() == "Validation: OK"
        assert "DOES NOT CONFORM" in result_of([_violation()]).summary()

    def test_constraint_components(self):
        assert ConstraintKind.MIN_COUNT.component == "http://www.w3.org/ns/shacl#MinCountConstraintComponent"
        assert ConstraintKind.from_component("http://www.w3.org/ns/shacl#InConstraintComponent") == ConstraintKind.IN
        assert ConstraintKind.from_component("http://example.org/Custom") == ConstraintKind.OTHER

    def test_context_protocol(self):
        assert isinstance(_FixedContext(Ok()), ValidationContext)


# ---------------------------------------------------------------------------
# pySHACL validation context
# ---------------------------------------------------------------------------

class TestPyShaclValidator:
    def test_reports_violations_for_focus_node_only(self):
        from ontogen.runtime.pyshacl_validator import PyShaclValidator
        from conftest import build_people_model

        g = Graph()
        g.add((EXN.bob, RDF.type, EXN.Person))
        g.add((EXN.carol, RDF.type, EXN.Person))
        g.add((EXN.carol, EXN.name, Literal("Carol")))

        validator = PyShaclValidator.from_model(build_people_model())
        result = validator.validate(g, EXN.bob)
        assert isinstance(result, Violations)
        kinds = {(v.constraint, v.path) for v in result}
        assert (ConstraintKind.MIN_COUNT, EX + "name") in kinds
        assert all(v.focus_node == EX + "bob" for v in result)
        assert isinstance(validator.validate(g, EXN.carol), Ok)
