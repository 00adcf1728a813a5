# src/dcsim_core/validation/topology_validator.py
import logging
from typing import Dict, List

import networkx as nx

from ..components.elements import Resistor, VoltageSource
from ..data_structures import Circuit
from ..errors import DCSimError, ErrorCode
from .exceptions import FloatingNodeError
from .issue_codes import TopologyIssueCode
from .issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


class TopologyValidator:
    """
    Checks the connectivity of a built circuit before any matrix is assembled.

    The check works on the DC conductive graph: circuit nodes are graph
    vertices, and every resistor or voltage source adds an edge between its
    two nodes. Current sources add no edge, since they do not fix a node's
    potential. Any connected component of this graph that does not contain
    the ground node is an island whose voltages are undetermined; each such
    island produces one NODE_FLOAT_001 error. Nodes with a single
    connection produce a NODE_CONN_001 warning.
    """

    def __init__(self, circuit: Circuit):
        if not isinstance(circuit, Circuit):
            raise TypeError("TopologyValidator requires a built Circuit object.")
        self.circuit = circuit
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs all checks and returns every issue found, without raising.
        """
        self.issues = []
        circuit = self.circuit

        if not circuit.has_ground_reference:
            self._add_issue(
                TopologyIssueCode.GND_CONN_001,
                ValidationIssueLevel.ERROR,
                node_id=circuit.ground_node_id,
            )
            # Every node would be reported as floating without a ground reference.
            return self.issues

        graph = self.build_conductive_graph()
        for island in nx.connected_components(graph):
            if circuit.ground_node_id in island:
                continue
            ordered = [node.id for node in circuit.nodes if node.id in island]
            self._add_issue(
                TopologyIssueCode.NODE_FLOAT_001,
                ValidationIssueLevel.ERROR,
                node_id=ordered[0],
                details={"node_ids": ordered},
                node_ids=ordered,
                ground_node_id=circuit.ground_node_id,
            )

        for node in circuit.nodes:
            if not node.is_ground and node.connection_count == 1:
                self._add_issue(
                    TopologyIssueCode.NODE_CONN_001,
                    ValidationIssueLevel.WARNING,
                    node_id=node.id,
                    component_id=node.component_ids[0],
                )

        for issue in self.issues:
            log = logger.error if issue.level == ValidationIssueLevel.ERROR else logger.warning
            log(str(issue))
        return self.issues

    def check(self) -> List[ValidationIssue]:
        """
        Validates and raises on the first category of error found.

        Returns:
            The non-error issues (warnings, info) when the topology is valid.

        Raises:
            DCSimError: NO_GROUND when the ground node is never referenced.
            FloatingNodeError: FLOATING_NODE when any island lacks a path to ground.
        """
        issues = self.validate()
        errors = [i for i in issues if i.level == ValidationIssueLevel.ERROR]
        if any(i.code == TopologyIssueCode.GND_CONN_001.code for i in errors):
            raise DCSimError(
                code=ErrorCode.NO_GROUND,
                message=TopologyIssueCode.GND_CONN_001.format_message(node_id=self.circuit.ground_node_id),
                node_id=self.circuit.ground_node_id,
            )
        if errors:
            raise FloatingNodeError(issues)
        logger.debug(f"Topology of circuit '{self.circuit.name}' is valid ({len(issues)} non-error issue(s)).")
        return issues

    def build_conductive_graph(self) -> nx.Graph:
        """The DC conductive graph described in the class docstring."""
        graph = nx.Graph()
        graph.add_nodes_from(node.id for node in self.circuit.nodes)
        for comp in self.circuit.components:
            if isinstance(comp, (Resistor, VoltageSource)):
                graph.add_edge(comp.pos_node, comp.neg_node)
        return graph

    def _add_issue(self, code: TopologyIssueCode, level: ValidationIssueLevel,
                   node_id: str = None, component_id: str = None, details: Dict = None, **kwargs):
        fmt_args = {"node_id": node_id, "component_id": component_id}
        fmt_args.update(kwargs)
        self.issues.append(ValidationIssue(
            level=level,
            code=code.code,
            message=code.format_message(**fmt_args),
            node_id=node_id,
            component_id=component_id,
            details=details or {},
        ))
