"""Library Catalogue — End-to-end ontogen demonstration.

Run from the repository root:

    python -m case_studies.library.run

Walks through the generated code for the catalogue shapes:

  STEP 1 — Generation
    Shapes + JSON-LD context -> interfaces, wrappers and the instance DSL,
    written to a temporary directory and imported.

  STEP 2 — Building and reading instances
    The DSL writes typed triples; wrappers read them back through the
    registry, with unmapped triples kept as extras.

  STEP 3 — Setter checks and node validation
    Facets reject bad values before anything is written; validate_on_build
    rejects resources missing required properties.

  STEP 4 — pySHACL
    The same shapes validate the whole data graph, and serve as the
    validation context of a wrapper.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

import importlib
import tempfile

from rdflib import Literal, URIRef

from ontogen import GenerationOptions, generate, write
from ontogen.options import NamingConfig
from ontogen.runtime import (
    ConstraintViolationError,
    RdfRef,
    ValidationException,
    registry,
)
from ontogen.runtime.pyshacl_validator import PyShaclValidator
from ontogen.shacl_bridge import validate_data

from .domain import LIB, build_model


def print_header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def print_step(number: int, name: str) -> None:
    print(f"\n{'─' * 60}")
    print(f"  STEP {number}: {name}")
    print(f"{'─' * 60}")


# ===========================================================================
# STEP 1: Generation
# ===========================================================================

def run_generation(model, out_dir: str):
    print_step(1, "Generation")
    options = GenerationOptions(
        package_name="library_model",
        dsl_name="catalogue",
        naming=NamingConfig(use_jsonld_aliases=True),
    )
    result = generate(model, options)
    write(result, out_dir)
    for line in result.summary().split("\n"):
        print(f"    {line}")

    sys.path.insert(0, out_dir)
    importlib.invalidate_caches()
    return importlib.import_module(options.package_name)


# ===========================================================================
# STEP 2: Building and reading instances
# ===========================================================================

def _catalogue(d):
    woolf = d.author(LIB + "woolf", lambda a: a.name("Virginia Woolf").born(1882))
    forster = d.author(LIB + "forster", lambda a: a.name("E. M. Forster").born(1879))
    d.book(LIB + "orlando", lambda b: (
        b.title("Orlando", lang="en")
        .isbn("978-0-14-118427-2")
        .pages(333)
        .genre("fiction")
        .writtenBy(woolf)
    ))
    d.book(LIB + "letters", lambda b: (
        b.title("Selected Letters")
        .genre("reference")
        .writtenByAll(woolf, forster)
    ))


def run_building(pkg):
    print_step(2, "Building and reading instances")
    dsl = pkg.catalogue(_catalogue)
    graph = dsl.build()
    print(f"\n  Built {len(dsl.instances())} resources, {len(graph)} triples")

    graph.add((URIRef(LIB + "orlando"), URIRef(LIB + "shelfmark"), Literal("PR6045.O72")))

    for iri in (LIB + "orlando", LIB + "letters"):
        book = registry.materialize(RdfRef(URIRef(iri), graph), pkg.Book)
        authors = ", ".join(sorted(a.name for a in book.writtenBy))
        print(f"\n  {book!r}")
        print(f"    title:   {book.title}")
        print(f"    isbn:    {book.isbn}")
        print(f"    pages:   {book.pages}")
        print(f"    genre:   {book.genre}")
        print(f"    authors: {authors}")
        for predicate in book.rdf.extras.predicates():
            print(f"    extra:   {predicate} = {book.rdf.extras.strings(predicate)}")
    return graph


# ===========================================================================
# STEP 3: Setter checks and node validation
# ===========================================================================

def run_checks(pkg):
    print_step(3, "Setter checks and node validation")

    attempts = [
        ("isbn 'n/a'", lambda b: b.isbn("n/a")),
        ("pages 0", lambda b: b.pages(0)),
        ("genre 'cookery'", lambda b: b.genre("cookery")),
    ]
    for label, attempt in attempts:
        builder = pkg.BookBuilder(URIRef(LIB + "draft"), pkg.catalogue().build())
        try:
            attempt(builder)
            print(f"    {label}: accepted")
        except ConstraintViolationError as exc:
            print(f"    {label}: rejected ({exc.constraint.value}) {exc}")

    print("\n  Book without an author (validate_on_build):")
    try:
        pkg.catalogue(lambda d: d.book(LIB + "anonymous", lambda b: b.title("Beowulf")))
    except ValidationException as exc:
        for violation in exc.violations:
            print(f"    {violation.constraint.value}: {violation.message}")


# ===========================================================================
# STEP 4: pySHACL
# ===========================================================================

def run_shacl(pkg, model, graph):
    print_step(4, "pySHACL")

    graph.add((URIRef(LIB + "letters"), URIRef(LIB + "pages"), Literal(0)))
    report = validate_data(model, graph)
    for line in report.summary().split("\n"):
        print(f"    {line}")

    validator = PyShaclValidator.from_model(model)
    letters = registry.materialize(RdfRef(URIRef(LIB + "letters"), graph, validator), pkg.Book)
    result = letters.rdf.validate()
    print(f"\n  Wrapper validation of {letters!r}:")
    for line in result.summary().split("\n"):
        print(f"    {line}")


def main():
    print("=" * 60)
    print("  ontogen — Case Study")
    print("  Library Catalogue")
    print("=" * 60)

    model = build_model()
    print(f"\n  Model: {model!r}")

    with tempfile.TemporaryDirectory() as out_dir:
        pkg = run_generation(model, out_dir)
        graph = run_building(pkg)
        run_checks(pkg)
        run_shacl(pkg, model, graph)
        sys.path.remove(out_dir)

    print(f"\n{'=' * 60}")
    print("  Case Study Complete")
    print(f"{'=' * 60}")


if __name__ == "__main__":
    main()
