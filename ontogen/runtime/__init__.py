"""Runtime support imported by generated code.

  handle      — RdfBacked, RdfHandle, DefaultRdfHandle, PropertyBag, RdfRef
  registry    — class IRI -> wrapper factory, materialize()
  lazy        — memoized accessors
  graph_ops   — literal/object reads, lexical conversion, reference nodes
  validation  — ValidationResult = Ok | Violations | NotConfigured
  errors      — MissingPropertyError, ConstraintViolationError, ValidationException

The pySHACL validation context lives in ``ontogen.runtime.pyshacl_validator``
and is imported on demand.
"""

from .errors import (
    ConstraintViolationError,
    MissingPropertyError,
    OntogenRuntimeError,
    ValidationException,
)
from .handle import DefaultRdfHandle, PropertyBag, RdfBacked, RdfHandle, RdfRef, as_rdf
from .lazy import memoized
from .registry import Registry, materialize, materialize_validated, registry
from .validation import (
    ConstraintKind,
    NotConfigured,
    Ok,
    ShaclViolation,
    ValidationContext,
    ValidationResult,
    Violations,
)

__all__ = [
    "ConstraintKind",
    "ConstraintViolationError",
    "DefaultRdfHandle",
    "MissingPropertyError",
    "NotConfigured",
    "Ok",
    "OntogenRuntimeError",
    "PropertyBag",
    "RdfBacked",
    "RdfHandle",
    "RdfRef",
    "Registry",
    "ShaclViolation",
    "ValidationContext",
    "ValidationException",
    "ValidationResult",
    "Violations",
    "as_rdf",
    "materialize",
    "materialize_validated",
    "memoized",
    "registry",
]
