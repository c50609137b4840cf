"""Graph-wide presentation settings for the render graph dump."""
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

_RANKDIRS = ("TB", "LR", "BT", "RL")


@dataclass
class RenderGraphSettings:
    """Presentation options; the defaults produce the standard dump."""

    graph_name: str = "RenderGraph"
    strict: bool = False
    rankdir: str = "LR"
    node_shape: str = "plaintext"
    fontname: str = "Roboto"
    type_name_color: str = "red"
    type_name_point_size: Union[int, float] = 10
    # Show the node UUID below the node name in the title cell.
    show_node_id: bool = True
    # Order node statements by type name instead of graph iteration order.
    sort_nodes: bool = False

    def __post_init__(self) -> None:
        self.rankdir = str(self.rankdir).upper()
        if self.rankdir not in _RANKDIRS:
            raise ValueError(f"rankdir must be one of {', '.join(_RANKDIRS)}, got {self.rankdir!r}")
        size = self.type_name_point_size
        if isinstance(size, bool) or not isinstance(size, (int, float)) or size <= 0:
            raise ValueError(f"type_name_point_size must be a positive number, got {size!r}")
        for name in ("strict", "show_node_id", "sort_nodes"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderGraphSettings":
        if not isinstance(data, dict):
            raise ValueError("settings must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown settings key(s): {', '.join(map(str, unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, filepath: Union[str, Path]) -> "RenderGraphSettings":
        """Load settings from a YAML mapping; an empty file yields the defaults."""
        import yaml

        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(f"Settings YAML not found: {filepath}")
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return cls.from_dict(data)
