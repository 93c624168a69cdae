"""Code model — small constructors over the ``ast`` node tree, and a renderer.

Emitters build ``ast.Module`` trees with these helpers and hand them to
``render()``; no emitter concatenates source text. The output is therefore
valid Python by construction and can be inspected structurally by parsing it
back with ``ast``.

    fn = function("name", [param("self")], [ret(attr("self", "_name"))],
                  returns=name("str"), decorators=[name("property")])
    render(module([cls("Person", [], [fn])]), header=["GENERATED FILE"])
"""

from __future__ import annotations

import ast
import copy
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

Expr = ast.expr
Stmt = ast.stmt


def _node(node_cls, **fields: Any):
    # type_params only exists on newer interpreters
    known = set(node_cls._fields) | set(node_cls._attributes)
    return node_cls(**{k: v for k, v in fields.items() if k in known})


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def name(ident: str) -> ast.Name:
    return ast.Name(id=ident, ctx=ast.Load())


def store(ident: str) -> ast.Name:
    return ast.Name(id=ident, ctx=ast.Store())


def const(value: Any) -> ast.Constant:
    return ast.Constant(value=value)


def attr(base: str | Expr, *path: str) -> Expr:
    """``attr("self", "_rdf", "graph")`` -> ``self._rdf.graph``."""
    node = name(base) if isinstance(base, str) else base
    for part in path:
        node = ast.Attribute(value=node, attr=part, ctx=ast.Load())
    return node


def store_attr(base: str | Expr, *path: str) -> ast.Attribute:
    node = attr(base, *path)
    node.ctx = ast.Store()
    return node


def call(func: str | Expr, *args: Expr, **kwargs: Expr) -> ast.Call:
    target = name(func) if isinstance(func, str) else func
    return ast.Call(
        func=target,
        args=list(args),
        keywords=[ast.keyword(arg=k, value=v) for k, v in kwargs.items()],
    )


def subscript(value: str | Expr, index: Expr) -> ast.Subscript:
    base = name(value) if isinstance(value, str) else value
    return ast.Subscript(value=base, slice=index, ctx=ast.Load())


def union(*types: Expr) -> Expr:
    """``a | b | ...`` as used in annotations."""
    node = types[0]
    for other in types[1:]:
        node = ast.BinOp(left=node, op=ast.BitOr(), right=other)
    return node


def list_of(items: Iterable[Expr]) -> ast.List:
    return ast.List(elts=list(items), ctx=ast.Load())


def tuple_of(items: Iterable[Expr]) -> ast.Tuple:
    return ast.Tuple(elts=list(items), ctx=ast.Load())


def set_of(items: Iterable[Expr]) -> Expr:
    elts = list(items)
    if not elts:
        return call("set")
    return ast.Set(elts=elts)


def dict_of(pairs: Iterable[tuple[Expr, Expr]]) -> ast.Dict:
    pairs = list(pairs)
    return ast.Dict(keys=[k for k, _ in pairs], values=[v for _, v in pairs])


def literal_value(value: Any) -> Expr:
    """Expression for a plain Python constant or a (nested) list/tuple of them."""
    if isinstance(value, (list, tuple)):
        return tuple_of(literal_value(v) for v in value)
    return const(value)


_COMPARE_OPS = {
    "==": ast.Eq, "!=": ast.NotEq,
    "<": ast.Lt, "<=": ast.LtE, ">": ast.Gt, ">=": ast.GtE,
    "in": ast.In, "not in": ast.NotIn,
    "is": ast.Is, "is not": ast.IsNot,
}


def compare(left: Expr, op: str, right: Expr) -> ast.Compare:
    return ast.Compare(left=left, ops=[_COMPARE_OPS[op]()], comparators=[right])


def not_(operand: Expr) -> ast.UnaryOp:
    return ast.UnaryOp(op=ast.Not(), operand=operand)


def if_exp(test: Expr, body: Expr, orelse: Expr) -> ast.IfExp:
    return ast.IfExp(test=test, body=body, orelse=orelse)


def index(value: Expr, i: int) -> ast.Subscript:
    return subscript(value, const(i))


def list_comp(element: Expr, target: str, iterable: Expr, conditions: Sequence[Expr] = ()) -> ast.ListComp:
    return ast.ListComp(
        elt=element,
        generators=[ast.comprehension(
            target=store(target), iter=iterable, ifs=list(conditions), is_async=0,
        )],
    )


def fstring(*parts: str | Expr) -> ast.JoinedStr:
    """f-string from literal text and expressions, in order."""
    values: list[Expr] = []
    for part in parts:
        if isinstance(part, str):
            values.append(const(part))
        else:
            values.append(ast.FormattedValue(value=part, conversion=-1, format_spec=None))
    return ast.JoinedStr(values=values)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------

def assign(target: str | Expr, value: Expr) -> ast.Assign:
    node = store(target) if isinstance(target, str) else target
    return ast.Assign(targets=[node], value=value, lineno=0)


def expr_stmt(value: Expr) -> ast.Expr:
    return ast.Expr(value=value)


def ret(value: Expr | None = None) -> ast.Return:
    return ast.Return(value=value)


def raise_(exc: Expr) -> ast.Raise:
    return ast.Raise(exc=exc, cause=None)


def if_(test: Expr, body: list[Stmt], orelse: list[Stmt] | None = None) -> ast.If:
    return ast.If(test=test, body=body, orelse=orelse or [])


def for_(target: str, iterable: Expr, body: list[Stmt]) -> ast.For:
    return ast.For(target=store(target), iter=iterable, body=body, orelse=[], lineno=0)


def pass_() -> ast.Pass:
    return ast.Pass()


def ellipsis() -> ast.Expr:
    return expr_stmt(const(...))


def docstring(text: str) -> ast.Expr:
    return expr_stmt(const(text))


def import_(module_name: str) -> ast.Import:
    return ast.Import(names=[ast.alias(name=module_name, asname=None)])


def import_from(module_name: str, names: Iterable[str], level: int = 0) -> ast.ImportFrom:
    return ast.ImportFrom(
        module=module_name,
        names=[ast.alias(name=n, asname=None) for n in names],
        level=level,
    )


def type_checking_block(imports: list[Stmt]) -> ast.If:
    """``if TYPE_CHECKING:`` guarding ``imports``."""
    return if_(name("TYPE_CHECKING"), imports)


# ---------------------------------------------------------------------------
# Functions and classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Param:
    name: str
    annotation: Expr | None = None
    default: Expr | None = None


def param(ident: str, annotation: Expr | None = None, default: Expr | None = None) -> Param:
    return Param(ident, annotation, default)


def function(
    ident: str,
    params: Sequence[Param],
    body: Sequence[Stmt],
    returns: Expr | None = None,
    decorators: Sequence[Expr] = (),
    doc: str | None = None,
    vararg: Param | None = None,
    kwonly: Sequence[Param] = (),
) -> ast.FunctionDef:
    """A ``def``. Parameters with defaults must come last, as in Python.

    ``kwonly`` parameters follow ``vararg`` and may each have a default.
    """
    statements = list(body)
    if doc:
        statements.insert(0, docstring(doc))
    if not statements:
        statements = [ellipsis()]
    args = ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=p.name, annotation=p.annotation) for p in params],
        vararg=ast.arg(arg=vararg.name, annotation=vararg.annotation) if vararg else None,
        kwonlyargs=[ast.arg(arg=p.name, annotation=p.annotation) for p in kwonly],
        kw_defaults=[p.default for p in kwonly],
        kwarg=None,
        defaults=[p.default for p in params if p.default is not None],
    )
    return _node(
        ast.FunctionDef,
        name=ident,
        args=args,
        body=statements,
        decorator_list=list(decorators),
        returns=returns,
        type_comment=None,
        type_params=[],
        lineno=0,
    )


def cls(
    ident: str,
    bases: Sequence[Expr],
    body: Sequence[Stmt],
    decorators: Sequence[Expr] = (),
    doc: str | None = None,
) -> ast.ClassDef:
    statements = list(body)
    if doc:
        statements.insert(0, docstring(doc))
    if not statements:
        statements = [pass_()]
    return _node(
        ast.ClassDef,
        name=ident,
        bases=list(bases),
        keywords=[],
        body=statements,
        decorator_list=list(decorators),
        type_params=[],
        lineno=0,
    )


def module(body: Sequence[Stmt], doc: str | None = None) -> ast.Module:
    statements = list(body)
    if doc:
        statements.insert(0, docstring(doc))
    return ast.Module(body=statements, type_ignores=[])


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render(tree: ast.Module, header: Sequence[str] = ()) -> str:
    """Source text for ``tree``, preceded by ``header`` as ``#`` comment lines."""
    tree = copy.deepcopy(tree)
    _indent_docstrings(tree, 0)
    ast.fix_missing_locations(tree)
    source = ast.unparse(tree)
    lines = [f"# {line}" if line else "#" for line in header]
    if lines:
        return "\n".join(lines) + "\n\n" + source + "\n"
    return source + "\n"


# ---------------------------------------------------------------------------
# Import collection
# ---------------------------------------------------------------------------

class Imports:
    """Collects the imports a generated module needs, rendered in a fixed order.

    Order: ``__future__``, plain imports, absolute ``from`` imports, relative
    ``from`` imports, then an ``if TYPE_CHECKING:`` block.
    """

    def __init__(self):
        self._plain: set[str] = set()
        self._from: dict[tuple[int, str], set[str]] = {}
        self._typing_only: dict[tuple[int, str], set[str]] = {}

    def add(self, module_name: str, *names: str, level: int = 0, type_checking: bool = False) -> Imports:
        if not names:
            self._plain.add(module_name)
            return self
        table = self._typing_only if type_checking else self._from
        table.setdefault((level, module_name), set()).update(names)
        if type_checking:
            self.add("typing", "TYPE_CHECKING")
        return self

    def statements(self) -> list[Stmt]:
        stmts: list[Stmt] = [import_from("__future__", ["annotations"])]
        stmts.extend(import_(m) for m in sorted(self._plain))
        stmts.extend(self._from_imports(self._from))
        guarded = self._from_imports(self._typing_only)
        if guarded:
            stmts.append(type_checking_block(guarded))
        return stmts

    @staticmethod
    def _from_imports(table: dict[tuple[int, str], set[str]]) -> list[Stmt]:
        return [
            import_from(module_name, sorted(names), level=level)
            for (level, module_name), names in sorted(table.items())
        ]


def _indent_docstrings(node: ast.AST, depth: int) -> None:
    # ast.unparse writes docstring continuation lines verbatim
    body = getattr(node, "body", None)
    if not isinstance(body, list):
        return
    if body and isinstance(body[0], ast.Expr) and isinstance(getattr(body[0].value, "value", None), str):
        text = body[0].value.value
        if "\n" in text:
            indent = "    " * depth
            lines = text.rstrip("\n").split("\n")
            rest = [indent + line if line.strip() else "" for line in lines[1:]]
            body[0].value.value = "\n".join([lines[0], *rest]) + "\n" + indent
    for child in body:
        if isinstance(child, (ast.ClassDef, ast.FunctionDef)):
            _indent_docstrings(child, depth + 1)
