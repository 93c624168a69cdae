"""JSON-LD context reader — aliases for generated property names.

  parse_context(document) -> JsonLdContext
  load_context(path)      -> JsonLdContext

Only local contexts are read: ``@context`` must be an object or an array of
objects. Within a context

  "ex": "http://example.org/"          prefix (value ends in / or #)
  "Person": "ex:Person"                type mapping
  "name": {"@id": "ex:name", ...}      property mapping (@type, @container)
  "@base", "@vocab"                    expansion of unqualified terms

Later contexts in an array override earlier ones term by term.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ContextParseError
from .types import JsonLdContainer, JsonLdContext, JsonLdProperty, JsonLdType

logger = logging.getLogger(__name__)

_CONTAINERS = {
    "@list": JsonLdContainer.List,
    "@set": JsonLdContainer.Set,
    "@index": JsonLdContainer.Index,
    "@language": JsonLdContainer.Language,
}


def parse_context(document: Mapping[str, Any] | str) -> JsonLdContext:
    """Build a JsonLdContext from a JSON-LD document (or its JSON text)."""
    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as exc:
            raise ContextParseError(f"Invalid JSON: {exc}") from exc
    if not isinstance(document, Mapping):
        raise ContextParseError("JSON-LD document must be an object")

    contexts = _contexts(document.get("@context"))
    if not contexts:
        raise ContextParseError("No @context found")

    prefixes: dict[str, str] = {}
    type_mappings: dict[str, str] = {}
    property_mappings: dict[str, JsonLdProperty] = {}
    base_iri = None
    vocab_iri = None

    for context in contexts:
        prefixes.update(_prefixes(context))
        if isinstance(context.get("@base"), str):
            base_iri = context["@base"]
        if isinstance(context.get("@vocab"), str):
            vocab_iri = context["@vocab"]

        for key, value in context.items():
            if key.startswith("@"):
                continue
            expand = _Expander(prefixes, base_iri, vocab_iri)
            if isinstance(value, str) and ":" not in key:
                if _is_prefix(value):
                    continue
                type_mappings[key] = expand(value)
                logger.debug("Type mapping %s -> %s", key, type_mappings[key])
            elif isinstance(value, Mapping) and isinstance(value.get("@id"), str):
                property_mappings[key] = JsonLdProperty(
                    id=expand(value["@id"]),
                    type=_type_of(value.get("@type"), expand),
                    container=_container_of(value.get("@container")),
                )
                logger.debug("Property mapping %s -> %s", key, property_mappings[key].id)

    logger.info(
        "Read JSON-LD context: %d prefixes, %d types, %d properties",
        len(prefixes), len(type_mappings), len(property_mappings),
    )
    return JsonLdContext(
        prefixes=prefixes,
        base_iri=base_iri,
        vocab_iri=vocab_iri,
        type_mappings=type_mappings,
        property_mappings=property_mappings,
    )


def load_context(path: str | Path) -> JsonLdContext:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ContextParseError("Cannot read context file", {"path": str(path)}) from exc
    return parse_context(text)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _contexts(element: Any) -> list[Mapping[str, Any]]:
    if element is None:
        return []
    if isinstance(element, Mapping):
        return [element]
    if isinstance(element, list):
        return [c for c in element if isinstance(c, Mapping)]
    if isinstance(element, str):
        raise ContextParseError("External @context references are not supported", {"context": element})
    return []


def _is_prefix(iri: str) -> bool:
    return iri.endswith("#") or iri.endswith("/")


def _prefixes(context: Mapping[str, Any]) -> dict[str, str]:
    return {
        key: value
        for key, value in context.items()
        if not key.startswith("@") and ":" not in key and isinstance(value, str) and _is_prefix(value)
    }


def _is_absolute(term: str) -> bool:
    return "://" in term or term.startswith("urn:")


class _Expander:
    """Expands compact IRIs and unqualified terms against the current context."""

    def __init__(self, prefixes: Mapping[str, str], base_iri: str | None, vocab_iri: str | None):
        self.prefixes = prefixes
        self.base_iri = base_iri
        self.vocab_iri = vocab_iri

    def __call__(self, term: str) -> str:
        prefix, sep, local = term.partition(":")
        if sep and prefix:
            if prefix in self.prefixes:
                return self.prefixes[prefix] + local
            if _is_absolute(term):
                return term
            raise ContextParseError(f"Unknown prefix: {prefix}", {"term": term})
        if _is_absolute(term):
            return term
        if self.vocab_iri is not None:
            return self.vocab_iri + term
        if self.base_iri is not None:
            return self.base_iri + term
        raise ContextParseError(f"Unqualified term with no @base or @vocab: {term}")


def _type_of(raw: Any, expand: _Expander) -> JsonLdType | None:
    if not isinstance(raw, str):
        return None
    if raw == "@id":
        return JsonLdType.Id
    return JsonLdType.Iri(expand(raw))


def _container_of(raw: Any) -> JsonLdContainer | None:
    if not isinstance(raw, str):
        return None
    return _CONTAINERS.get(raw) or JsonLdContainer.Unknown(raw)
