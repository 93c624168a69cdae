"""Shared fixtures: a small people/organization schema and a loader that
generates a package into tmp_path and imports it.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import importlib
import itertools

import pytest

from ontogen.generator import generate, write
from ontogen.options import GenerationOptions
from ontogen.runtime.registry import registry
from ontogen.types import (
    NumericConstraints,
    OntologyModel,
    ShaclProperty,
    ShaclShape,
    StringConstraints,
    ValueConstraints,
)

EX = "http://example.org/"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"

_package_ids = itertools.count()


def build_people_model() -> OntologyModel:
    """Person (name, age, email, nickname, active, score, knows) and
    Organization (legalName, status, member)."""
    person = ShaclShape(
        shape_iri=EX + "PersonShape",
        target_class=EX + "Person",
        properties=(
            ShaclProperty(
                path=EX + "name", name="name", description="Full name of the person.",
                datatype=XSD_NS + "string", min_count=1, max_count=1,
                string=StringConstraints(min_length=1, pattern="^[A-Z]"),
            ),
            ShaclProperty(
                path=EX + "age", name="age", datatype=XSD_NS + "integer", max_count=1,
                numeric=NumericConstraints(min_inclusive=0, max_inclusive=150),
            ),
            ShaclProperty(
                path=EX + "email", name="email", datatype=XSD_NS + "string", max_count=1,
                string=StringConstraints(pattern="@"),
            ),
            ShaclProperty(
                path=EX + "nickname", name="nickname", datatype=XSD_NS + "string",
                string=StringConstraints(max_length=20),
            ),
            ShaclProperty(path=EX + "active", name="active", datatype=XSD_NS + "boolean", max_count=1),
            ShaclProperty(path=EX + "score", name="score", datatype=XSD_NS + "double", max_count=1),
            ShaclProperty(path=EX + "knows", name="knows", target_class=EX + "Person"),
        ),
    )
    organization = ShaclShape(
        shape_iri=EX + "OrganizationShape",
        target_class=EX + "Organization",
        properties=(
            ShaclProperty(
                path=EX + "legalName", name="legalName", datatype=XSD_NS + "string",
                min_count=1, max_count=1,
            ),
            ShaclProperty(
                path=EX + "status", name="status", datatype=XSD_NS + "string", max_count=1,
                values=ValueConstraints(in_values=("active", "dissolved")),
            ),
            ShaclProperty(path=EX + "member", name="member", target_class=EX + "Person"),
        ),
    )
    return OntologyModel(shapes=(person, organization))


@pytest.fixture
def people_model() -> OntologyModel:
    return build_people_model()


@pytest.fixture
def load_generated(tmp_path):
    """Generate ``model`` into tmp_path under a fresh package name and import it.

    Usage: ``pkg = load_generated(model, options)``; ``options`` may be None.
    """
    loaded = []
    sys.path.insert(0, str(tmp_path))

    def _load(model, options=None):
        options = (options or GenerationOptions()).with_changes(
            package_name=f"generated_{next(_package_ids)}",
        )
        write(generate(model, options), tmp_path)
        importlib.invalidate_caches()
        loaded.append(options.package_name)
        return importlib.import_module(options.package_name)

    yield _load

    sys.path.remove(str(tmp_path))
    for name in list(sys.modules):
        if any(name == pkg or name.startswith(pkg + ".") for pkg in loaded):
            del sys.modules[name]
    registry.clear()
