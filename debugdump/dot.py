"""A small typed writer for the Graphviz DOT language.

Statements are built from validated `Identity` values so that anything that
reaches the output is lexically valid DOT. `DotGraph.build()` checks the
statement list as a whole (duplicate nodes, dangling edges) before the graph
is rendered with `str()`.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple, Union


class DebugDumpError(ValueError):
    """Base class for errors raised while dumping a graph as DOT."""


class MalformedAttributeError(DebugDumpError):
    """A string destined for a DOT identifier or attribute value is not valid DOT."""

    def __init__(self, text: object, reason: str = "not a valid DOT identifier"):
        self.text = text
        self.reason = reason
        super().__init__(f"{reason}: {text!r}")


class GraphBuildError(DebugDumpError):
    """Assembly of the DOT document failed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Failed to build graph: {message}")


_ID_RE = re.compile(r"^[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*$")
_KEYWORDS = {"node", "edge", "graph", "digraph", "subgraph", "strict"}


@dataclass(frozen=True)
class Identity:
    """A single DOT ID, stored in its rendered form.

    Use the constructors (`id`, `number`, `quoted`, `html`, `raw`) rather than
    instantiating directly; each of them validates its input.
    """

    text: str

    @classmethod
    def id(cls, value: str) -> "Identity":
        """A bare alphanumeric identifier (e.g. `plaintext`)."""
        if not isinstance(value, str) or not _ID_RE.match(value):
            raise MalformedAttributeError(value)
        if value.lower() in _KEYWORDS:
            raise MalformedAttributeError(value, "DOT keyword used as identifier")
        return cls(value)

    @classmethod
    def number(cls, value: int) -> "Identity":
        """A non-negative integer numeral."""
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise MalformedAttributeError(value, "not a non-negative integer")
        return cls(str(value))

    @classmethod
    def quoted(cls, value: str) -> "Identity":
        """A double-quoted string; embedded quotes are escaped."""
        if not isinstance(value, str):
            raise MalformedAttributeError(value, "not a string")
        if "\x00" in value:
            raise MalformedAttributeError(value, "NUL character in quoted string")
        trailing = len(value) - len(value.rstrip("\\"))
        if trailing % 2:
            raise MalformedAttributeError(value, "trailing backslash in quoted string")
        return cls('"' + value.replace('"', '\\"') + '"')

    @classmethod
    def html(cls, markup: str) -> "Identity":
        """An HTML string; `markup` is wrapped in the outer angle brackets."""
        if not isinstance(markup, str):
            raise MalformedAttributeError(markup, "not a string")
        depth = 0
        for ch in markup:
            if ch == "<":
                depth += 1
            elif ch == ">":
                depth -= 1
                if depth < 0:
                    break
        if depth != 0:
            raise MalformedAttributeError(markup, "unbalanced angle brackets in HTML string")
        return cls(f"<{markup}>")

    @classmethod
    def raw(cls, text: str) -> "Identity":
        """Text emitted verbatim. No validation is performed."""
        return cls(str(text))

    def __str__(self) -> str:
        return self.text


class Compass(enum.Enum):
    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"
    C = "c"


@dataclass(frozen=True)
class Port:
    id: Optional[Identity] = None
    compass: Optional[Compass] = None

    def __str__(self) -> str:
        parts = []
        if self.id is not None:
            parts.append(f":{self.id}")
        if self.compass is not None:
            parts.append(f":{self.compass.value}")
        return "".join(parts)


def _as_identity(value: Union[Identity, str]) -> Identity:
    if isinstance(value, Identity):
        return value
    return Identity.id(value)


@dataclass
class AttrList:
    """An ordered `[key=value, ...]` attribute list."""

    items: List[Tuple[Identity, Identity]] = field(default_factory=list)

    def add(self, key: Union[Identity, str], value: Union[Identity, str]) -> "AttrList":
        """Append a pair and return self, so calls can be chained.

        Plain strings are validated as bare identifiers.
        """
        self.items.append((_as_identity(key), _as_identity(value)))
        return self

    def __bool__(self) -> bool:
        return bool(self.items)

    def __str__(self) -> str:
        return "[" + ", ".join(f"{k}={v}" for k, v in self.items) + "]"


class AttrType(enum.Enum):
    GRAPH = "graph"
    NODE = "node"
    EDGE = "edge"


@dataclass
class AttrStmt:
    kind: AttrType
    attrs: AttrList

    def __str__(self) -> str:
        return f"{self.kind.value} {self.attrs};"


@dataclass
class NodeStmt:
    id: Identity
    attrs: AttrList = field(default_factory=AttrList)

    def __str__(self) -> str:
        if self.attrs:
            return f"{self.id} {self.attrs};"
        return f"{self.id};"


@dataclass
class EdgeStmt:
    tail: Identity
    head: Identity
    tail_port: Port = field(default_factory=Port)
    head_port: Port = field(default_factory=Port)
    attrs: AttrList = field(default_factory=AttrList)
    directed: bool = True

    def __str__(self) -> str:
        op = "->" if self.directed else "--"
        text = f"{self.tail}{self.tail_port} {op} {self.head}{self.head_port}"
        if self.attrs:
            text += f" {self.attrs}"
        return text + ";"


Stmt = Union[AttrStmt, NodeStmt, EdgeStmt]


@dataclass
class DotGraph:
    """A complete DOT graph: header flags, name and statement list."""

    name: Identity
    directed: bool = True
    strict: bool = False
    stmts: List[Stmt] = field(default_factory=list)

    def add(self, stmt: Stmt) -> "DotGraph":
        if isinstance(stmt, EdgeStmt):
            stmt.directed = self.directed
        self.stmts.append(stmt)
        return self

    def extend(self, stmts: Iterable[Stmt]) -> "DotGraph":
        for stmt in stmts:
            self.add(stmt)
        return self

    def node_ids(self) -> List[Identity]:
        return [s.id for s in self.stmts if isinstance(s, NodeStmt)]

    def edges(self) -> List[EdgeStmt]:
        return [s for s in self.stmts if isinstance(s, EdgeStmt)]

    def build(self) -> "DotGraph":
        """Validate the statement list and return self.

        Raises:
            GraphBuildError: on a repeated node statement or an edge whose
                endpoint has no node statement.
        """
        seen: Set[Identity] = set()
        for node_id in self.node_ids():
            if node_id in seen:
                raise GraphBuildError(f"duplicate node statement for {node_id}")
            seen.add(node_id)
        for edge in self.edges():
            for endpoint in (edge.tail, edge.head):
                if endpoint not in seen:
                    raise GraphBuildError(f"edge {edge} references undeclared node {endpoint}")
        return self

    def __str__(self) -> str:
        header = "strict " if self.strict else ""
        header += "digraph" if self.directed else "graph"
        lines = [f"{header} {self.name} {{"]
        lines.extend(f"  {stmt}" for stmt in self.stmts)
        lines.append("}")
        return "\n".join(lines) + "\n"


def font_tag(text: str, color: str, point_size: Union[int, float]) -> str:
    """Wrap already-escaped `text` in an HTML `<FONT>` tag."""
    return f'<FONT COLOR="{color}" POINT-SIZE="{point_size}">{text}</FONT>'
