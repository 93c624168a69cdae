"""Tests for the ast-based code model and renderer."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import ast

from ontogen import codemodel as cm


def _render(*stmts, header=()) -> str:
    return cm.render(cm.module(list(stmts)), header=header)


class TestRender:
    def test_header_lines(self):
        source = _render(cm.pass_(), header=["GENERATED FILE - DO NOT EDIT", "", "second"])
        assert source.splitlines()[:3] == ["# GENERATED FILE - DO NOT EDIT", "#", "# second"]

    def test_output_parses(self):
        fn = cm.function(
            "name",
            [cm.param("self")],
            [cm.ret(cm.attr("self", "_name"))],
            returns=cm.name("str"),
            decorators=[cm.name("property")],
        )
        source = _render(cm.cls("Person", [], [fn]))
        tree = ast.parse(source)
        assert isinstance(tree.body[0], ast.ClassDef)
        assert "@property" in source

    def test_empty_bodies(self):
        source = _render(cm.cls("Empty", [], []), cm.function("noop", [], []))
        assert "class Empty:\n    pass" in source
        assert "def noop():\n    ..." in source

    def test_multiline_docstrings_are_indented(self):
        fn = cm.function("f", [], [cm.pass_()], doc="Summary.\n\nDetails here.")
        source = _render(cm.cls("C", [], [fn], doc="Class.\n\nMore."))
        assert "        Details here.\n" in source
        assert "    More.\n" in source
        assert ast.get_docstring(ast.parse(source).body[0].body[1]) == "Summary.\n\nDetails here."

    def test_render_does_not_mutate_tree(self):
        tree = cm.module([cm.cls("C", [], [], doc="A.\nB.")])
        cm.render(tree)
        assert tree.body[0].body[0].value.value == "A.\nB."


class TestExpressions:
    def test_union_and_subscript(self):
        annotation = cm.union(cm.subscript("list", cm.name("str")), cm.const(None))
        assert ast.unparse(annotation) == "list[str] | None"

    def test_params_with_defaults(self):
        fn = cm.function(
            "f",
            [cm.param("a", cm.name("int")), cm.param("b", cm.name("str"), cm.const("x"))],
            [cm.pass_()],
            vararg=cm.param("rest", cm.name("int")),
        )
        assert ast.unparse(fn).splitlines()[0] == "def f(a: int, b: str='x', *rest: int):"

    def test_keyword_only_params(self):
        fn = cm.function(
            "f",
            [cm.param("self")],
            [cm.pass_()],
            vararg=cm.param("values", cm.name("str")),
            kwonly=[cm.param("lang", cm.union(cm.name("str"), cm.const(None)), cm.const(None)),
                    cm.param("strict")],
        )
        assert ast.unparse(fn).splitlines()[0] == (
            "def f(self, *values: str, lang: str | None=None, strict):"
        )

    def test_unparse_without_render(self):
        fn = cm.function("name", [cm.param("self")], [], decorators=[cm.name("property")])
        klass = cm.cls("Person", [cm.name("Base")], [fn], doc="Person.")
        source = ast.unparse(klass)
        assert source.startswith("class Person(Base):")
        assert "@property" in source
        assert fn.lineno == 0

    def test_fstring(self):
        expr = cm.fstring("Person(", cm.attr("self", "node"), ")")
        assert ast.unparse(expr) == "f'Person({self.node})'"

    def test_literal_value(self):
        assert ast.unparse(cm.literal_value(("a", 1))) == "('a', 1)"


class TestImports:
    def test_fixed_order(self):
        imports = cm.Imports()
        imports.add("rdflib", "URIRef", "Graph")
        imports.add("re")
        imports.add("person", "Person", level=1)
        imports.add("organization", "Organization", level=1, type_checking=True)
        imports.add("abc")
        imports.add("rdflib", "Literal")
        source = ast.unparse(ast.Module(body=imports.statements(), type_ignores=[]))
        assert source.splitlines() == [
            "from __future__ import annotations",
            "import abc",
            "import re",
            "from rdflib import Graph, Literal, URIRef",
            "from typing import TYPE_CHECKING",
            "from .person import Person",
            "if TYPE_CHECKING:",
            "    from .organization import Organization",
        ]
