"""debugdump package entry point"""

__all__ = [
    "render_graph_dot",
    "to_dot",
    "escape_html",
    "short_name",
    "RenderGraph",
    "NodeId",
    "NodeState",
    "SlotInfo",
    "SlotType",
    "SlotEdge",
    "NodeEdge",
    "RenderGraphSettings",
    "DebugDumpError",
    "MalformedAttributeError",
    "GraphBuildError",
]

from .dot import DebugDumpError, GraphBuildError, MalformedAttributeError
from .escape import escape_html
from .graph import NodeEdge, NodeId, NodeState, RenderGraph, SlotEdge, SlotInfo, SlotType
from .render_graph import render_graph_dot, to_dot
from .settings import RenderGraphSettings
from .utils import short_name

__version__ = "0.1.0"
