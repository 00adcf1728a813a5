# src/dcsim_core/data_structures.py
# Required for forward references in type hints (e.g., 'Component')
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

from .components.base import ComponentBase
from .components.elements import Ground
from .constants import DEFAULT_GROUND_NODE_ID
from .errors import DCSimError, ErrorCode

logger = logging.getLogger(__name__)

# Use TYPE_CHECKING to avoid circular imports for type hints at runtime.
if TYPE_CHECKING:
    from .components.elements import Component


@dataclass(frozen=True)
class Node:
    """
    An electrical node of a built circuit.

    `component_ids` lists the components touching the node in the order they
    were first encountered. The MNA unknown index is deliberately not stored
    here; it lives in `Circuit.node_index`.
    """
    id: str
    is_ground: bool = False
    component_ids: Tuple[str, ...] = ()

    @property
    def connection_count(self) -> int:
        return len(self.component_ids)


@dataclass(frozen=True)
class Circuit:
    """
    The immutable, simulation-ready circuit graph.

    A Circuit is produced once by `Circuit.build` and never modified. The node
    list and the `node_index` map are derived from the component list in a
    single scan (components in input order, terminals in declared order), so
    the unknown ordering of the MNA system is fully determined by the input.
    Assembly and solving only read from it.
    """
    id: str
    name: str
    components: Tuple[Component, ...]
    ground_node_id: str
    nodes: Tuple[Node, ...]

    # Non-ground node id -> zero-based MNA unknown index, in first-seen order.
    # Read-only view; derived from `components`, so it takes no part in eq/hash.
    node_index: Mapping[str, int] = field(compare=False)

    description: Optional[str] = None

    @classmethod
    def build(
        cls,
        components: Sequence[Component],
        ground_node_id: str = DEFAULT_GROUND_NODE_ID,
        name: str = "circuit",
        circuit_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> "Circuit":
        """
        Validates the circuit-level structure and derives the node graph.

        Raises:
            DCSimError: INVALID_CIRCUIT for an empty component list or a blank
                name/id/ground id, INVALID_COMPONENT for a non-component entry,
                duplicate component ids or a ground element placed on a node
                other than the circuit ground.
        """
        if not isinstance(name, str) or not name.strip():
            raise DCSimError(code=ErrorCode.INVALID_CIRCUIT, message="Circuit name cannot be empty.")
        name = name.strip()
        circuit_id = name if circuit_id is None else circuit_id
        if not isinstance(circuit_id, str) or not circuit_id.strip():
            raise DCSimError(code=ErrorCode.INVALID_CIRCUIT, message="Circuit ID cannot be empty.")
        circuit_id = circuit_id.strip()
        if not isinstance(ground_node_id, str) or not ground_node_id.strip():
            raise DCSimError(code=ErrorCode.INVALID_CIRCUIT, message="Ground node ID cannot be empty.")
        ground_node_id = ground_node_id.strip()

        components = tuple(components) if components is not None else ()
        if not components:
            raise DCSimError(
                code=ErrorCode.INVALID_CIRCUIT,
                message=f"Circuit '{name}' must contain at least one component.",
            )

        seen_ids = set()
        for comp in components:
            if not isinstance(comp, ComponentBase):
                raise DCSimError(
                    code=ErrorCode.INVALID_COMPONENT,
                    message=f"Circuit '{name}' received a non-component entry of type {type(comp).__name__}.",
                )
            if comp.id in seen_ids:
                raise DCSimError(
                    code=ErrorCode.INVALID_COMPONENT,
                    message=f"Duplicate component ID '{comp.id}'.",
                    component_id=comp.id,
                )
            seen_ids.add(comp.id)
            if isinstance(comp, Ground) and comp.node_id != ground_node_id:
                raise DCSimError(
                    code=ErrorCode.INVALID_COMPONENT,
                    message=(
                        f"Ground component '{comp.id}' is attached to node '{comp.node_id}', "
                        f"but the circuit ground is '{ground_node_id}'."
                    ),
                    component_id=comp.id,
                    node_id=comp.node_id,
                )

        nodes, node_index = _derive_nodes(components, ground_node_id)

        logger.debug(
            f"Built circuit '{name}': {len(components)} components, {len(nodes)} nodes, "
            f"{len(node_index)} non-ground unknowns."
        )
        return cls(
            id=circuit_id,
            name=name,
            components=components,
            ground_node_id=ground_node_id,
            nodes=nodes,
            node_index=MappingProxyType(node_index),
            description=description,
        )

    # --- Read-only queries ---

    @property
    def num_unknowns(self) -> int:
        """Number of non-ground node voltage unknowns."""
        return len(self.node_index)

    @property
    def has_ground_reference(self) -> bool:
        """True when at least one component references the ground node."""
        return any(node.is_ground for node in self.nodes)

    def index_of(self, node_id: str) -> Optional[int]:
        """The MNA unknown index of a node, or None for ground and unknown ids."""
        return self.node_index.get(node_id)

    def get_component(self, component_id: str) -> Optional[Component]:
        for comp in self.components:
            if comp.id == component_id:
                return comp
        return None

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def components_of_type(self, component_class) -> List[Component]:
        return [c for c in self.components if isinstance(c, component_class)]

    @property
    def is_linear(self) -> bool:
        return all(c.is_linear for c in self.components)


def _derive_nodes(
    components: Iterable[Component], ground_node_id: str
) -> Tuple[Tuple[Node, ...], Dict[str, int]]:
    """Single scan producing nodes and the unknown index map in first-seen order."""
    connections: Dict[str, List[str]] = {}
    for comp in components:
        for node_id in comp.node_ids:
            touching = connections.setdefault(node_id, [])
            if comp.id not in touching:
                touching.append(comp.id)

    nodes = tuple(
        Node(id=node_id, is_ground=(node_id == ground_node_id), component_ids=tuple(comp_ids))
        for node_id, comp_ids in connections.items()
    )
    node_index: Dict[str, int] = {}
    for node in nodes:
        if not node.is_ground:
            node_index[node.id] = len(node_index)
    return nodes, node_index
