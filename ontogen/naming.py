"""Naming — IRIs to Python identifiers.

Pure functions. The same IRI always yields the same identifier, whichever
emitter asks; this is what keeps the interface, the wrapper and the builder
of a class in agreement.
"""

from __future__ import annotations

import keyword
import re

from .options import NamingStrategy


_SEPARATORS = re.compile(r"[-_\s.]+")
_INVALID = re.compile(r"[^0-9A-Za-z_]")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Members the generated wrappers and builders define themselves.
RESERVED_MEMBERS = frozenset({"rdf", "validate", "resource"})


def local_name(iri: str) -> str:
    """Fragment or last path segment of an IRI."""
    name = iri.rsplit("#", 1)[-1] if "#" in iri else iri
    name = name.rstrip("/").rsplit("/", 1)[-1]
    if ":" in name and "/" not in iri:
        # compact IRI such as ex:Person
        name = name.rsplit(":", 1)[-1]
    return name


def _segments(name: str) -> list[str]:
    cleaned = _INVALID.sub("_", name)
    return [s for s in _SEPARATORS.split(cleaned) if s]


def _upper_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def _lower_first(s: str) -> str:
    return s[:1].lower() + s[1:]


def to_pascal_case(name: str) -> str:
    return "".join(_upper_first(s) for s in _segments(name))


def to_camel_case(name: str) -> str:
    parts = _segments(name)
    if not parts:
        return ""
    return _lower_first(parts[0]) + "".join(_upper_first(s) for s in parts[1:])


def to_snake_case(name: str) -> str:
    words: list[str] = []
    for part in _segments(name):
        words.extend(w.lower() for w in _CAMEL_BOUNDARY.split(part) if w)
    return "_".join(words)


def _safe_identifier(name: str, fallback: str) -> str:
    if not name:
        name = fallback
    if name[0].isdigit():
        name = "_" + name
    return name


def class_name_of(iri: str) -> str:
    """PascalCase class name from the local name of an IRI."""
    return _safe_identifier(to_pascal_case(local_name(iri)), "Resource")


def property_name_of(name: str, strategy: NamingStrategy = NamingStrategy.CAMEL_CASE) -> str:
    """Identifier for a property name (or IRI), cased per ``strategy``.

    Python keywords and members reserved by the generated classes get a
    trailing underscore.
    """
    base = local_name(name) if ("/" in name or "#" in name) else name
    if strategy == NamingStrategy.SNAKE_CASE:
        ident = to_snake_case(base)
    elif strategy == NamingStrategy.PASCAL_CASE:
        ident = to_pascal_case(base)
    else:
        ident = to_camel_case(base)
    ident = _safe_identifier(ident, "value")
    if keyword.iskeyword(ident) or ident in RESERVED_MEMBERS:
        ident += "_"
    return ident


def variant_name(identifier: str, suffix: str, strategy: NamingStrategy) -> str:
    """Derived member name, e.g. ``knows`` + ``all`` -> ``knowsAll`` / ``knows_all``."""
    base = identifier.rstrip("_")
    if strategy == NamingStrategy.SNAKE_CASE:
        return f"{base}_{suffix}"
    return base + _upper_first(suffix)


def builder_name_of(class_name: str) -> str:
    """Factory method name on the DSL context, e.g. ``ConceptScheme`` -> ``conceptScheme``."""
    ident = _lower_first(class_name)
    if keyword.iskeyword(ident) or ident in {"build", "instances"}:
        ident += "_"
    return ident


def module_name_of(class_name: str) -> str:
    """Module name for a generated class, e.g. ``ConceptScheme`` -> ``concept_scheme``."""
    ident = to_snake_case(class_name)
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def wrapper_name_of(class_name: str) -> str:
    return f"{class_name}Wrapper"


def builder_class_name_of(class_name: str) -> str:
    return f"{class_name}Builder"


def dsl_class_name_of(dsl_name: str) -> str:
    return f"{_upper_first(dsl_name)}Dsl"


def dsl_module_name_of(dsl_name: str) -> str:
    return f"{to_snake_case(dsl_name)}_dsl"
