# src/dcsim_core/parser/raw_data.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# The classes in this module are the Intermediate Representation (IR) passed
# from the NetlistParser to the CircuitBuilder. They hold structurally valid
# but not yet semantically checked netlist data: parameter values are still
# raw (numbers or unit strings) and component types are unresolved strings.

@dataclass(frozen=True)
class ParsedComponentData:
    """IR for one entry of the netlist's `components` list."""
    instance_id: str
    component_type: str
    nodes: Tuple[str, ...]
    raw_parameters_dict: Dict[str, Any] = field(default_factory=dict)
    name: Optional[str] = None
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class ParsedCircuitDocument:
    """IR for a whole netlist document."""
    circuit_name: str
    ground_node_id: str
    components: Tuple[ParsedComponentData, ...]
    circuit_id: Optional[str] = None
    description: Optional[str] = None
    source_path: Optional[Path] = None
