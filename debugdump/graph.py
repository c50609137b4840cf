"""Render graph data structures.

A `RenderGraph` is a registry of `NodeState` objects connected by two kinds of
edges:

- `SlotEdge`: carries a resource from an output slot of one node (the producer)
  to an input slot of another node (the consumer).
- `NodeEdge`: an ordering-only dependency between two whole nodes.

Edges are recorded on both endpoints: in the consumer's `input_edges` and in
the producer's `output_edges`.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

_logger = logging.getLogger(__name__)

_U128_LIMIT = 1 << 128


@dataclass(frozen=True)
class NodeId:
    """Identifier of a render graph node: a 128-bit unsigned integer."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"node id must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value < _U128_LIMIT:
            raise ValueError(f"node id out of 128-bit range: {self.value}")

    @classmethod
    def new(cls) -> "NodeId":
        return cls(uuid.uuid4().int)

    @classmethod
    def from_uuid(cls, value: Union[uuid.UUID, str]) -> "NodeId":
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(value)
        return cls(value.int)

    @property
    def uuid(self) -> uuid.UUID:
        return uuid.UUID(int=self.value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.uuid)


class SlotType(enum.Enum):
    """Kind of resource passed through a slot."""

    BUFFER = "Buffer"
    TEXTURE_VIEW = "TextureView"
    SAMPLER = "Sampler"
    ENTITY = "Entity"

    @classmethod
    def parse(cls, text: str) -> Optional["SlotType"]:
        """Match `text` against member values or names, ignoring case."""
        key = text.strip().lower()
        for member in cls:
            if key in (member.value.lower(), member.name.lower()):
                return member
        return None


@dataclass(frozen=True)
class SlotInfo:
    name: str
    resource_type: Any


@dataclass(frozen=True)
class SlotEdge:
    input_node: NodeId
    input_index: int
    output_node: NodeId
    output_index: int


@dataclass(frozen=True)
class NodeEdge:
    input_node: NodeId
    output_node: NodeId


Edge = Union[SlotEdge, NodeEdge]

NodeLabel = Union[NodeId, str]
SlotLabel = Union[int, str]


@dataclass
class NodeState:
    """A node of the render graph together with its slots and edges."""

    id: NodeId
    name: Optional[str]
    type_name: str
    input_slots: List[SlotInfo] = field(default_factory=list)
    output_slots: List[SlotInfo] = field(default_factory=list)
    input_edges: List[Edge] = field(default_factory=list)
    output_edges: List[Edge] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"NodeState(name={self.name!r}, id={self.id}, type_name={self.type_name!r})"


def _slot_index(slots: List[SlotInfo], label: SlotLabel, node: NodeState, side: str) -> int:
    if isinstance(label, bool):
        raise ValueError(f"invalid {side} slot label {label!r} on node {node.name or node.id}")
    if isinstance(label, int):
        if 0 <= label < len(slots):
            return label
    else:
        for index, slot in enumerate(slots):
            if slot.name == label:
                return index
    raise ValueError(f"node {node.name or node.id} has no {side} slot {label!r}")


def _coerce_slots(slots: Iterable[Any]) -> List[SlotInfo]:
    result = []
    for slot in slots:
        if isinstance(slot, SlotInfo):
            result.append(slot)
        else:
            name, resource_type = slot
            result.append(SlotInfo(name, resource_type))
    return result


class RenderGraph:
    """A registry of render graph nodes and the edges between them.

    Nodes can be looked up by `NodeId` or by name. Iteration order is the
    insertion order of nodes and is stable for the lifetime of the graph.
    """

    def __init__(self) -> None:
        self._nodes: Dict[NodeId, NodeState] = {}
        self._names: Dict[str, NodeId] = {}

    def add_node(
        self,
        name: Optional[str],
        type_name: str,
        inputs: Iterable[Any] = (),
        outputs: Iterable[Any] = (),
        node_id: Optional[Union[NodeId, int]] = None,
    ) -> NodeId:
        """Register a node and return its id.

        Args:
            name: Unique node name, or None for an anonymous node.
            type_name: Fully qualified type name of the node implementation.
            inputs: Input slots, as `SlotInfo` or `(name, resource_type)` pairs.
            outputs: Output slots, same format as `inputs`.
            node_id: Explicit id; a random one is generated when omitted.

        Raises:
            ValueError: If the name or the id is already registered.
        """
        if node_id is None:
            node_id = NodeId.new()
        elif not isinstance(node_id, NodeId):
            node_id = NodeId(node_id)
        if node_id in self._nodes:
            raise ValueError(f"node id {node_id} is already registered")
        if name is not None and not isinstance(name, str):
            raise ValueError(f"node name must be a string or None, got {name!r}")
        if name is not None and name in self._names:
            raise ValueError(f"node '{name}' is already registered")

        self._nodes[node_id] = NodeState(
            id=node_id,
            name=name,
            type_name=type_name,
            input_slots=_coerce_slots(inputs),
            output_slots=_coerce_slots(outputs),
        )
        if name is not None:
            self._names[name] = node_id
        return node_id

    def get_node(self, label: NodeLabel) -> NodeState:
        """Return the node identified by id or name.

        Raises:
            KeyError: If no such node exists.
        """
        if isinstance(label, NodeId):
            node = self._nodes.get(label)
        else:
            node_id = self._names.get(label)
            node = self._nodes.get(node_id) if node_id is not None else None
        if node is None:
            raise KeyError(label)
        return node

    def add_slot_edge(
        self,
        output_node: NodeLabel,
        output_slot: SlotLabel,
        input_node: NodeLabel,
        input_slot: SlotLabel,
    ) -> SlotEdge:
        """Connect an output slot of `output_node` to an input slot of `input_node`.

        Slots are given by index or by name. Each input slot accepts at most
        one incoming edge.
        """
        producer = self.get_node(output_node)
        consumer = self.get_node(input_node)
        output_index = _slot_index(producer.output_slots, output_slot, producer, "output")
        input_index = _slot_index(consumer.input_slots, input_slot, consumer, "input")

        for existing in consumer.input_edges:
            if isinstance(existing, SlotEdge) and existing.input_index == input_index:
                raise ValueError(
                    f"input slot {input_index} of node {consumer.name or consumer.id} is already connected"
                )

        edge = SlotEdge(
            input_node=consumer.id,
            input_index=input_index,
            output_node=producer.id,
            output_index=output_index,
        )
        consumer.input_edges.append(edge)
        producer.output_edges.append(edge)
        return edge

    def add_node_edge(self, output_node: NodeLabel, input_node: NodeLabel) -> NodeEdge:
        """Require `output_node` to run before `input_node`."""
        producer = self.get_node(output_node)
        consumer = self.get_node(input_node)
        edge = NodeEdge(input_node=consumer.id, output_node=producer.id)
        if edge in consumer.input_edges:
            raise ValueError(
                f"node edge {producer.name or producer.id} -> {consumer.name or consumer.id} already exists"
            )
        consumer.input_edges.append(edge)
        producer.output_edges.append(edge)
        return edge

    def iter_nodes(self) -> Iterator[NodeState]:
        return iter(list(self._nodes.values()))

    def edge_count(self) -> int:
        return sum(len(node.input_edges) for node in self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, label: object) -> bool:
        if isinstance(label, NodeId):
            return label in self._nodes
        return label in self._names

    def __repr__(self) -> str:
        return f"RenderGraph(nodes={len(self._nodes)}, edges={self.edge_count()})"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderGraph":
        """Build a graph from a snapshot mapping.

        Expected layout:

        nodes:
          - name: main_pass
            type: bevy_core_pipeline::MainPass3dNode
            id: 12                     # optional: int or UUID string
            inputs:
              - {name: view, type: Entity}
            outputs: []
        edges:
          - {output: camera, output_slot: view, input: main_pass, input_slot: 0}
          - {output: camera, input: main_pass}

        Nodes without an `id` get a UUID derived from their name so that
        repeated loads produce identical graphs.
        """
        if not isinstance(data, dict):
            raise ValueError("render graph snapshot must be a mapping")
        graph = cls()

        for index, entry in enumerate(_as_list(data.get("nodes"), "nodes")):
            if not isinstance(entry, dict):
                raise ValueError(f"node entry #{index} must be a mapping")
            name = entry.get("name")
            if name is not None and not isinstance(name, str):
                raise ValueError(f"node entry #{index} has a non-string name {name!r}")
            type_name = entry.get("type") or entry.get("type_name")
            if not type_name:
                raise ValueError(f"node entry #{index} ({name or 'anonymous'}) is missing 'type'")
            node_id = _parse_node_id(entry.get("id"), name, index)
            inputs = [_parse_slot(s, name, "inputs") for s in _as_list(entry.get("inputs"), f"inputs of node entry #{index}")]
            outputs = [_parse_slot(s, name, "outputs") for s in _as_list(entry.get("outputs"), f"outputs of node entry #{index}")]
            graph.add_node(name, str(type_name), inputs, outputs, node_id=node_id)

        for index, entry in enumerate(_as_list(data.get("edges"), "edges")):
            if not isinstance(entry, dict):
                raise ValueError(f"edge entry #{index} must be a mapping")
            output = _parse_node_label(entry.get("output"))
            input_ = _parse_node_label(entry.get("input"))
            if output is None or input_ is None:
                raise ValueError(f"edge entry #{index} needs both 'output' and 'input'")
            has_output_slot = "output_slot" in entry
            has_input_slot = "input_slot" in entry
            if has_output_slot != has_input_slot:
                raise ValueError(f"edge entry #{index} must give both slots or neither")
            try:
                if has_output_slot:
                    graph.add_slot_edge(output, entry["output_slot"], input_, entry["input_slot"])
                else:
                    graph.add_node_edge(output, input_)
            except KeyError as exc:
                raise ValueError(f"edge entry #{index} references unknown node {exc.args[0]!r}") from exc

        _logger.debug("loaded %r", graph)
        return graph

    @classmethod
    def from_yaml(cls, filepath: Union[str, Path]) -> "RenderGraph":
        """Load a render graph snapshot from a YAML file (see `from_dict`)."""
        import yaml

        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(f"Render graph YAML not found: {filepath}")
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return cls.from_dict(data)


def _as_list(value: Any, what: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _parse_node_id(raw: Any, name: Optional[str], index: int) -> NodeId:
    if raw is None:
        if name is None:
            raise ValueError(f"anonymous node entry #{index} needs an explicit 'id'")
        return NodeId.from_uuid(uuid.uuid5(uuid.NAMESPACE_OID, name))
    if isinstance(raw, int) and not isinstance(raw, bool):
        return NodeId(raw)
    if isinstance(raw, str):
        try:
            return NodeId.from_uuid(raw)
        except ValueError as exc:
            raise ValueError(f"node entry #{index} has an invalid id {raw!r}") from exc
    raise ValueError(f"node entry #{index} has an invalid id {raw!r}")


def _parse_node_label(raw: Any) -> Optional[NodeLabel]:
    if raw is None:
        return None
    if isinstance(raw, int) and not isinstance(raw, bool):
        return NodeId(raw)
    return str(raw)


def _parse_slot(entry: Any, node_name: Optional[str], side: str) -> SlotInfo:
    if not isinstance(entry, dict) or "name" not in entry:
        raise ValueError(f"{side} of node {node_name or 'anonymous'} must be mappings with a 'name'")
    raw_type = entry.get("type", "")
    resource_type = SlotType.parse(str(raw_type)) or str(raw_type)
    return SlotInfo(name=str(entry["name"]), resource_type=resource_type)


__all__ = [
    "NodeId",
    "SlotType",
    "SlotInfo",
    "SlotEdge",
    "NodeEdge",
    "Edge",
    "NodeState",
    "RenderGraph",
]
