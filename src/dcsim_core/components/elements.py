# src/dcsim_core/components/elements.py
"""
Concrete circuit elements.

Each element is an immutable value object. All per-field validation happens
in `__post_init__`, so an element that exists is valid: ids and node ids are
trimmed and non-empty, numeric values are finite, two-terminal elements
connect two distinct nodes and resistances lie within the supported range.
Nothing downstream re-checks these properties.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from ..constants import MAX_RESISTANCE_OHMS, MIN_RESISTANCE_OHMS
from ..errors import DCSimError, ErrorCode
from .base import ComponentBase, register_component
from .base_enums import ComponentType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Terminal:
    """A named connection point of a component, bound to a node id."""
    name: str
    node_id: str


class TwoTerminalComponent(ComponentBase):
    """Mixin for elements with a `pos` and a `neg` terminal."""

    def _validate_terminals(self) -> None:
        self._require_identifier("id", "Component ID")
        if self.name is None:
            self._set("name", self.id)
        pos = self._require_node("pos_node")
        neg = self._require_node("neg_node")
        if pos == neg:
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=f"{type(self).__name__} '{self.id}' cannot be connected to the same node '{pos}' on both terminals.",
                component_id=self.id,
                node_id=pos,
            )

    def _require_node(self, attr: str) -> str:
        raw = getattr(self, attr)
        if not isinstance(raw, str) or not raw.strip():
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=f"Node IDs of component '{self.id}' cannot be empty.",
                component_id=self.id,
            )
        trimmed = raw.strip()
        self._set(attr, trimmed)
        return trimmed

    @property
    def terminals(self) -> Tuple[Terminal, Terminal]:
        return (Terminal("pos", self.pos_node), Terminal("neg", self.neg_node))

    @property
    def node_ids(self) -> Tuple[str, str]:
        return (self.pos_node, self.neg_node)


@register_component(ComponentType.RESISTOR)
@dataclass(frozen=True)
class Resistor(TwoTerminalComponent):
    """
    A linear resistor between `pos_node` and `neg_node`.

    The resistance is in ohms and must lie within
    [MIN_RESISTANCE_OHMS, MAX_RESISTANCE_OHMS].
    """
    id: str
    pos_node: str
    neg_node: str
    resistance: float
    name: Optional[str] = None

    def __post_init__(self):
        self._validate_terminals()
        value = self._require_finite("resistance", "Resistance")
        if value <= 0.0:
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"Resistance must be positive, got {value} Ω.",
                component_id=self.id,
            )
        if value < MIN_RESISTANCE_OHMS:
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"Resistance {value} Ω is below the minimum {MIN_RESISTANCE_OHMS} Ω.",
                component_id=self.id,
            )
        if value > MAX_RESISTANCE_OHMS:
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"Resistance {value} Ω exceeds the maximum {MAX_RESISTANCE_OHMS} Ω.",
                component_id=self.id,
            )

    @property
    def conductance(self) -> float:
        return 1.0 / self.resistance

    @classmethod
    def declare_parameters(cls) -> Dict[str, str]:
        return {"resistance": "ohm"}


@register_component(ComponentType.VOLTAGE_SOURCE)
@dataclass(frozen=True)
class VoltageSource(TwoTerminalComponent):
    """
    An ideal DC voltage source enforcing V(pos) - V(neg) = voltage.

    Each voltage source adds one auxiliary unknown (its branch current) to
    the MNA system.
    """
    id: str
    pos_node: str
    neg_node: str
    voltage: float
    name: Optional[str] = None

    def __post_init__(self):
        self._validate_terminals()
        self._require_finite("voltage", "Voltage")

    @classmethod
    def declare_parameters(cls) -> Dict[str, str]:
        return {"voltage": "volt"}


@register_component(ComponentType.CURRENT_SOURCE)
@dataclass(frozen=True)
class CurrentSource(TwoTerminalComponent):
    """
    An ideal DC current source. Positive current flows from `pos_node`
    through the source to `neg_node`.
    """
    id: str
    pos_node: str
    neg_node: str
    current: float
    name: Optional[str] = None

    def __post_init__(self):
        self._validate_terminals()
        self._require_finite("current", "Current")

    @classmethod
    def declare_parameters(cls) -> Dict[str, str]:
        return {"current": "ampere"}


@register_component(ComponentType.GROUND)
@dataclass(frozen=True)
class Ground(ComponentBase):
    """Marks `node_id` as a reference connection. Contributes no equations."""
    id: str
    node_id: str
    name: Optional[str] = None

    def __post_init__(self):
        self._require_identifier("id", "Component ID")
        if self.name is None:
            self._set("name", self.id)
        if not isinstance(self.node_id, str) or not self.node_id.strip():
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=f"Ground component '{self.id}' must reference a node.",
                component_id=self.id,
            )
        self._set("node_id", self.node_id.strip())

    @classmethod
    def declare_node_fields(cls) -> Tuple[str, ...]:
        return ("node_id",)

    @property
    def terminals(self) -> Tuple[Terminal]:
        return (Terminal("gnd", self.node_id),)

    @property
    def node_ids(self) -> Tuple[str]:
        return (self.node_id,)


Component = Union[Resistor, VoltageSource, CurrentSource, Ground]

SOURCE_TYPES = (VoltageSource, CurrentSource)
