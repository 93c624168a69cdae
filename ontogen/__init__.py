"""Ontogen — typed Python domain code generated from SHACL shapes.

Ontogen turns a schema model (SHACL shapes plus an optional JSON-LD context)
into three mutually-consistent artifacts per modeled class:

- Interface: an abstract domain class with typed, documented properties
- Wrapper: a graph-backed implementation that reads lazily from rdflib
- Instance DSL: builders whose setters check SHACL constraints before writing

The pipeline is a single deterministic pass:

  load_shapes / load_context -> OntologyModel
  generate(model, options)   -> GenerationResult (file name -> source)
  write(result, out_dir)     -> the generated package on disk

Generated code depends only on rdflib and ``ontogen.runtime`` (handles, the
wrapper registry, validation results). The SHACL bridge (ontogen.shacl_bridge)
also serialises the model back into a shapes graph so that instance data can
be validated with pySHACL.
"""

from .errors import GenerationError
from .generator import GenerationResult, generate, write
from .jsonld import load_context, parse_context
from .options import GenerationOptions, NamingStrategy, ValidationConfig, ValidationMode
from .shacl_bridge import load_model, load_shapes, model_to_shacl, parse_shapes
from .types import OntologyClass, OntologyModel, ShaclProperty, ShaclShape

__version__ = "0.1.0"

__all__ = [
    "GenerationError",
    "GenerationOptions",
    "GenerationResult",
    "NamingStrategy",
    "OntologyClass",
    "OntologyModel",
    "ShaclProperty",
    "ShaclShape",
    "ValidationConfig",
    "ValidationMode",
    "generate",
    "load_context",
    "load_model",
    "load_shapes",
    "model_to_shacl",
    "parse_context",
    "parse_shapes",
    "write",
]
