"""Materialization registry — class IRI to wrapper factory.

Each generated wrapper module ends with

    registry.register("<class IRI>", <Class>Wrapper)

so importing the generated package fills the table. Lookup is by string key;
an interface class is accepted too and resolved through its ``__rdf_class__``
attribute (set by ``@rdf_class``).
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .handle import DefaultRdfHandle, RdfHandle, RdfRef
from .validation import ValidationContext

logger = logging.getLogger(__name__)

Factory = Callable[[RdfHandle], object]


def registry_key(type_or_iri) -> str:
    if isinstance(type_or_iri, str):
        return str(type_or_iri)
    iri = getattr(type_or_iri, "__rdf_class__", None)
    if iri is None:
        raise LookupError(f"{type_or_iri!r} has no __rdf_class__; is it a generated interface?")
    return iri


class Registry:
    """Explicit key -> factory table.

    Registration happens at import time; lookups may come from any thread.
    """

    def __init__(self):
        self._factories: dict[str, Factory] = {}
        self._lock = threading.Lock()

    def register(self, type_or_iri, factory: Factory) -> None:
        key = registry_key(type_or_iri)
        with self._lock:
            if key in self._factories and self._factories[key] is not factory:
                logger.debug("Replacing wrapper factory for %s", key)
            self._factories[key] = factory

    def unregister(self, type_or_iri) -> None:
        with self._lock:
            self._factories.pop(registry_key(type_or_iri), None)

    def factory_for(self, type_or_iri) -> Factory:
        key = registry_key(type_or_iri)
        factory = self._factories.get(key)
        if factory is None:
            raise LookupError(f"No wrapper factory registered for {key}")
        return factory

    def materialize(self, ref: RdfRef, type_or_iri):
        """Wrap ``ref.node`` as an instance of the registered wrapper."""
        factory = self.factory_for(type_or_iri)
        handle = DefaultRdfHandle(ref.node, ref.graph, validation_context=ref.validation_context)
        return factory(handle)

    def materialize_validated(self, ref: RdfRef, type_or_iri, validation: ValidationContext):
        """Materialize, then raise ValidationException if the node does not conform."""
        factory = self.factory_for(type_or_iri)
        handle = DefaultRdfHandle(ref.node, ref.graph, validation_context=validation)
        instance = factory(handle)
        handle.validate().or_throw()
        return instance

    def keys(self) -> list[str]:
        return sorted(self._factories)

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()

    def __contains__(self, type_or_iri) -> bool:
        try:
            return registry_key(type_or_iri) in self._factories
        except LookupError:
            return False

    def __len__(self) -> int:
        return len(self._factories)


registry = Registry()


def materialize(ref: RdfRef, type_or_iri):
    return registry.materialize(ref, type_or_iri)


def materialize_validated(ref: RdfRef, type_or_iri, validation: ValidationContext):
    return registry.materialize_validated(ref, type_or_iri, validation)
