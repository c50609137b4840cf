"""Translate a render graph into a Graphviz DOT document.

Every node becomes a plaintext node whose label is an HTML-like table: a title
row (name, UUID, short type name) followed by one row per slot index, with
input slots in the left column and output slots in the right column. Each slot
cell carries `PORT="<index>"` and the title cell carries `PORT="title"`, so
edges can attach to the exact row they belong to.

Edges always run from the producer to the consumer:

- slot edges leave the producer's output row on its east side and enter the
  consumer's input row on its west side;
- node (ordering) edges connect the two title cells and are drawn dashed.

The graph is only read. Any object with an `iter_nodes()` method yielding
nodes shaped like `debugdump.graph.NodeState` can be rendered.
"""
from __future__ import annotations

import enum
import logging
import uuid
from itertools import zip_longest
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .dot import (
    AttrList,
    AttrStmt,
    AttrType,
    Compass,
    DotGraph,
    EdgeStmt,
    GraphBuildError,
    Identity,
    MalformedAttributeError,
    NodeStmt,
    Port,
    font_tag,
)
from .escape import escape_html
from .graph import NodeEdge, SlotEdge
from .settings import RenderGraphSettings
from .utils import short_name

_logger = logging.getLogger(__name__)

_U128_LIMIT = 1 << 128
_TITLE_PORT = "title"
_SPACER_CELL = '<TD BORDER="0">&nbsp;</TD>'


def node_number(node_id: Any) -> int:
    """Return the 128-bit integer behind a node id.

    Accepts `NodeId`, `uuid.UUID` or a plain int.

    Raises:
        MalformedAttributeError: If the id is not an integer in [0, 2**128).
    """
    if isinstance(node_id, uuid.UUID):
        return node_id.int
    value = getattr(node_id, "value", node_id)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedAttributeError(node_id, "node id is not an integer")
    if not 0 <= value < _U128_LIMIT:
        raise MalformedAttributeError(node_id, "node id out of 128-bit range")
    return value


def debug_repr(value: Any) -> str:
    """Debug rendering of a slot resource type (e.g. `TextureView`)."""
    if isinstance(value, enum.Enum):
        if isinstance(value.value, str):
            return value.value
        return value.name
    return str(value)


def _slot_cell(index: int, slot: Any) -> str:
    text = f"{escape_html(slot.name)}: {escape_html(debug_repr(slot.resource_type))}"
    return f'<TD PORT="{index}">{text}</TD>'


def slot_rows(node: Any) -> str:
    """Table rows pairing the node's input and output slots by index.

    When one side has fewer slots, its missing cells are borderless spacers.
    """
    rows = []
    pairs = zip_longest(enumerate(node.input_slots), enumerate(node.output_slots))
    for inp, out in pairs:
        left = _slot_cell(*inp) if inp is not None else _SPACER_CELL
        right = _slot_cell(*out) if out is not None else _SPACER_CELL
        rows.append(f"<TR>{left}{right}</TR>")
    return "".join(rows)


def node_label(node: Any, settings: RenderGraphSettings) -> str:
    """The HTML-like `<TABLE>` markup used as the node label."""
    name = node.name if node.name is not None else "<node>"
    title = [escape_html(name)]
    if settings.show_node_id:
        title.append(escape_html(str(uuid.UUID(int=node_number(node.id)))))
    title.append(
        font_tag(
            escape_html(short_name(node.type_name)),
            escape_html(settings.type_name_color),
            settings.type_name_point_size,
        )
    )
    title_row = (
        f'<TR><TD PORT="{_TITLE_PORT}" BORDER="0" COLSPAN="2">'
        + "<BR/>".join(title)
        + "</TD></TR>"
    )
    return f"<TABLE>{title_row}{slot_rows(node)}</TABLE>"


def node_stmt(node: Any, settings: Optional[RenderGraphSettings] = None) -> NodeStmt:
    settings = settings or RenderGraphSettings()
    node_id = Identity.number(node_number(node.id))
    attrs = AttrList().add("label", Identity.html(node_label(node, settings)))
    return NodeStmt(node_id, attrs)


def map_nodes(nodes: Iterable[Any], settings: RenderGraphSettings) -> Iterator[NodeStmt]:
    """Yield one node statement per node; the first failure propagates."""
    if settings.sort_nodes:
        nodes = sorted(nodes, key=lambda n: n.type_name)
    for node in nodes:
        yield node_stmt(node, settings)


def edge_endpoints(edge: Any) -> Tuple[Tuple[Any, Any], Tuple[Any, Any]]:
    """Return `((tail_node, tail_port), (head_node, head_port))` for an edge.

    The tail is always the producer (`output_node`) and the head the consumer
    (`input_node`). Slot edges attach to slot indices, node edges to the
    title cells.
    """
    if isinstance(edge, SlotEdge):
        return (edge.output_node, edge.output_index), (edge.input_node, edge.input_index)
    if isinstance(edge, NodeEdge):
        return (edge.output_node, _TITLE_PORT), (edge.input_node, _TITLE_PORT)
    raise GraphBuildError(f"unsupported edge type {type(edge).__name__}")


def _port(port: Any, compass: Compass) -> Port:
    if port == _TITLE_PORT:
        return Port(Identity.raw(_TITLE_PORT), compass)
    return Port(Identity.number(port), compass)


def edge_stmt(edge: Any) -> EdgeStmt:
    (tail, tail_port), (head, head_port) = edge_endpoints(edge)
    attrs = AttrList()
    if isinstance(edge, NodeEdge):
        attrs.add("style", "dashed")
    return EdgeStmt(
        tail=Identity.number(node_number(tail)),
        head=Identity.number(node_number(head)),
        tail_port=_port(tail_port, Compass.E),
        head_port=_port(head_port, Compass.W),
        attrs=attrs,
    )


def _check_slot_edge(edge: SlotEdge, slot_counts: Dict[int, Tuple[int, int]]) -> None:
    producer = node_number(edge.output_node)
    consumer = node_number(edge.input_node)
    for number in (producer, consumer):
        if number not in slot_counts:
            raise GraphBuildError(f"edge {edge} references unknown node {number}")
    outputs = slot_counts[producer][1]
    inputs = slot_counts[consumer][0]
    if not isinstance(edge.output_index, int) or not 0 <= edge.output_index < outputs:
        raise GraphBuildError(f"output slot {edge.output_index!r} out of range on node {producer}")
    if not isinstance(edge.input_index, int) or not 0 <= edge.input_index < inputs:
        raise GraphBuildError(f"input slot {edge.input_index!r} out of range on node {consumer}")


def map_edges(nodes: Iterable[Any]) -> Iterator[EdgeStmt]:
    """Yield one edge statement per input edge of every node, in node order."""
    nodes = list(nodes)
    slot_counts = {
        node_number(n.id): (len(n.input_slots), len(n.output_slots)) for n in nodes
    }
    for node in nodes:
        for edge in node.input_edges:
            if isinstance(edge, SlotEdge):
                _check_slot_edge(edge, slot_counts)
            yield edge_stmt(edge)


def to_dot(render_graph: Any, settings: Optional[RenderGraphSettings] = None) -> DotGraph:
    """Build the validated `DotGraph` for `render_graph`.

    Raises:
        MalformedAttributeError: If an identifier or attribute is not valid DOT.
        GraphBuildError: If the statements do not form a consistent graph.
    """
    settings = settings or RenderGraphSettings()
    nodes: List[Any] = list(render_graph.iter_nodes())

    graph = DotGraph(name=Identity.id(settings.graph_name), directed=True, strict=settings.strict)
    graph.add(
        AttrStmt(
            AttrType.NODE,
            AttrList()
            .add("shape", Identity.id(settings.node_shape))
            .add("fontname", Identity.quoted(settings.fontname)),
        )
    )
    graph.add(AttrStmt(AttrType.GRAPH, AttrList().add("rankdir", Identity.quoted(settings.rankdir))))
    graph.extend(map_nodes(nodes, settings))
    graph.extend(map_edges(nodes))
    return graph.build()


def render_graph_dot(render_graph: Any, settings: Optional[RenderGraphSettings] = None) -> str:
    """Render `render_graph` as a DOT document string."""
    graph = to_dot(render_graph, settings)
    dot = str(graph)
    _logger.debug(
        "rendered %d node(s) and %d edge(s) into %d bytes of DOT",
        len(graph.node_ids()),
        len(graph.edges()),
        len(dot),
    )
    return dot
