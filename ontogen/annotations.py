"""Metadata decorators for generated interfaces.

These only attach attributes; they have no RDF dependency, so interface
modules stay importable without rdflib.

    @rdf_class("http://example.org/Person")
    class Person(abc.ABC):

        @property
        @rdf_property("http://example.org/name")
        @cardinality(min_count=1, max_count=1)
        @abc.abstractmethod
        def name(self) -> str:
            ...
"""

from __future__ import annotations


def rdf_class(iri: str):
    """Record the class IRI as ``__rdf_class__``."""
    def decorate(cls):
        cls.__rdf_class__ = iri
        return cls
    return decorate


def rdf_property(iri: str):
    """Record the predicate IRI as ``__rdf_property__`` on the getter."""
    def decorate(func):
        func.__rdf_property__ = iri
        return func
    return decorate


def cardinality(min_count: int | None = None, max_count: int | None = None):
    def decorate(func):
        func.__cardinality__ = (min_count, max_count)
        return func
    return decorate


def property_iri(cls, name: str) -> str | None:
    """Predicate IRI of property ``name`` on a generated interface (or wrapper)."""
    for klass in cls.__mro__:
        member = klass.__dict__.get(name)
        if isinstance(member, property):
            return getattr(member.fget, "__rdf_property__", None)
    return None


def property_cardinality(cls, name: str) -> tuple[int | None, int | None] | None:
    for klass in cls.__mro__:
        member = klass.__dict__.get(name)
        if isinstance(member, property):
            return getattr(member.fget, "__cardinality__", None)
    return None
