# src/dcsim_core/simulation/mna.py

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

import numpy as np

from ..components.base_enums import ComponentType
from ..components.elements import Component, CurrentSource, Resistor, VoltageSource
from ..data_structures import Circuit
from ..errors import DCSimError, ErrorCode
from .matrix import Matrix, Vector, mat_vec, zeros_matrix, zeros_vector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MnaSystem:
    """
    The assembled DC system A·x = b.

    Unknown layout: node voltages first (indices from `node_index`), then one
    branch current per voltage source (indices from `voltage_source_index`,
    assigned in component order).

    Attributes:
        matrix: size x size MNA matrix.
        rhs: Length-size right-hand side vector.
        node_index: Non-ground node id -> unknown index.
        voltage_source_index: Voltage source id -> unknown index of its branch current.
        size: Number of unknowns.
    """
    matrix: Matrix
    rhs: Vector
    node_index: Dict[str, int]
    voltage_source_index: Dict[str, int]
    size: int


class MnaAssembler:
    """
    Builds the Modified Nodal Analysis system for a DC operating point.

    Stamps are additive and looked up in a table keyed on `ComponentType`, so
    several components touching the same matrix entry simply accumulate. Any
    entry whose row or column would belong to the ground node is dropped;
    ground has no unknown. The assembler reads the circuit only; every call
    to `assemble()` or `assemble_rhs()` allocates new arrays.
    """

    def __init__(self, circuit: Circuit):
        if not isinstance(circuit, Circuit):
            raise DCSimError(
                code=ErrorCode.INVALID_CIRCUIT,
                message=f"MnaAssembler requires a built Circuit, got {type(circuit).__name__}.",
            )
        self.circuit = circuit
        self.node_index: Dict[str, int] = dict(circuit.node_index)
        self.num_nodes: int = circuit.num_unknowns

        self.voltage_source_index: Dict[str, int] = {}
        for comp in circuit.components:
            if isinstance(comp, VoltageSource):
                self.voltage_source_index[comp.id] = self.num_nodes + len(self.voltage_source_index)

        self.size: int = self.num_nodes + len(self.voltage_source_index)

        self._matrix_stamps: Dict[ComponentType, Optional[Callable]] = {
            ComponentType.RESISTOR: self._stamp_resistor,
            ComponentType.VOLTAGE_SOURCE: self._stamp_voltage_source_matrix,
            ComponentType.CURRENT_SOURCE: None,
            ComponentType.GROUND: None,
        }
        self._rhs_stamps: Dict[ComponentType, Optional[Callable]] = {
            ComponentType.RESISTOR: None,
            ComponentType.VOLTAGE_SOURCE: self._stamp_voltage_source_rhs,
            ComponentType.CURRENT_SOURCE: self._stamp_current_source_rhs,
            ComponentType.GROUND: None,
        }

        logger.debug(
            f"MNA assembler for circuit '{circuit.name}': {self.num_nodes} node unknowns, "
            f"{len(self.voltage_source_index)} voltage-source currents, size {self.size}."
        )

    # --- Public API ---

    def assemble(self) -> MnaSystem:
        """
        Stamps every component into a fresh matrix and right-hand side.

        Raises:
            DCSimError: NO_GROUND if no component references the circuit's
                designated ground node.
        """
        self._check_ground()
        matrix = self.assemble_matrix()
        rhs = self.assemble_rhs()
        logger.info(f"Assembled {self.size}x{self.size} MNA system for circuit '{self.circuit.name}'.")
        return MnaSystem(
            matrix=matrix,
            rhs=rhs,
            node_index=dict(self.node_index),
            voltage_source_index=dict(self.voltage_source_index),
            size=self.size,
        )

    def assemble_matrix(self) -> Matrix:
        """The MNA matrix alone. It depends only on topology and resistances."""
        self._check_ground()
        matrix = zeros_matrix(self.size, self.size)
        for comp in self.circuit.components:
            stamp = self._matrix_stamps[comp.type_tag]
            if stamp is not None:
                stamp(matrix, comp)
        return matrix

    def assemble_rhs(self, overrides: Optional[Mapping[str, float]] = None) -> Vector:
        """
        The right-hand side alone, with the value of any source listed in
        `overrides` (source id -> volts or amperes) substituted.

        Raises:
            DCSimError: INVALID_PARAMETER if an override names no independent
                source of this circuit or carries a non-finite value.
        """
        self._check_ground()
        overrides = dict(overrides or {})
        for source_id, value in overrides.items():
            comp = self.circuit.get_component(source_id)
            if not isinstance(comp, (VoltageSource, CurrentSource)):
                raise DCSimError(
                    code=ErrorCode.INVALID_PARAMETER,
                    message=f"'{source_id}' is not an independent source of circuit '{self.circuit.name}'.",
                    component_id=source_id,
                )
            if isinstance(value, bool) or not np.isfinite(value):
                raise DCSimError(
                    code=ErrorCode.INVALID_PARAMETER,
                    message=f"Override value for source '{source_id}' must be finite, got {value!r}.",
                    component_id=source_id,
                )

        rhs = zeros_vector(self.size)
        for comp in self.circuit.components:
            stamp = self._rhs_stamps[comp.type_tag]
            if stamp is not None:
                stamp(rhs, comp, float(overrides.get(comp.id, self._source_value(comp))))
        return rhs

    # --- Stamps ---

    def _stamp_resistor(self, matrix: Matrix, comp: Resistor) -> None:
        g = comp.conductance
        a = self.node_index.get(comp.pos_node)
        b = self.node_index.get(comp.neg_node)
        if a is not None:
            matrix[a, a] += g
        if b is not None:
            matrix[b, b] += g
        if a is not None and b is not None:
            matrix[a, b] -= g
            matrix[b, a] -= g

    def _stamp_voltage_source_matrix(self, matrix: Matrix, comp: VoltageSource) -> None:
        k = self.voltage_source_index[comp.id]
        pos = self.node_index.get(comp.pos_node)
        neg = self.node_index.get(comp.neg_node)
        if pos is not None:
            matrix[pos, k] += 1.0
            matrix[k, pos] += 1.0
        if neg is not None:
            matrix[neg, k] -= 1.0
            matrix[k, neg] -= 1.0

    def _stamp_voltage_source_rhs(self, rhs: Vector, comp: VoltageSource, voltage: float) -> None:
        rhs[self.voltage_source_index[comp.id]] = voltage

    def _stamp_current_source_rhs(self, rhs: Vector, comp: CurrentSource, current: float) -> None:
        pos = self.node_index.get(comp.pos_node)
        neg = self.node_index.get(comp.neg_node)
        if pos is not None:
            rhs[pos] -= current
        if neg is not None:
            rhs[neg] += current

    # --- Helpers ---

    @staticmethod
    def _source_value(comp: Component) -> float:
        if isinstance(comp, VoltageSource):
            return comp.voltage
        return comp.current

    def _check_ground(self) -> None:
        if not self.circuit.has_ground_reference:
            logger.error(f"Circuit '{self.circuit.name}' never references ground node '{self.circuit.ground_node_id}'.")
            raise DCSimError(
                code=ErrorCode.NO_GROUND,
                message=(
                    f"Ground node '{self.circuit.ground_node_id}' is not referenced by any component "
                    f"of circuit '{self.circuit.name}'."
                ),
                node_id=self.circuit.ground_node_id,
            )


class MnaNonlinearSystem:
    """
    Presents an assembled linear MNA system as F(x) = A·x - b with constant
    Jacobian A, so it can be driven by the generic Newton-Raphson solver.
    """

    def __init__(self, mna_system: MnaSystem):
        self._matrix = mna_system.matrix
        self._rhs = mna_system.rhs
        self.size = mna_system.size

    def residual(self, x: Vector) -> Vector:
        return mat_vec(self._matrix, x) - self._rhs

    def jacobian(self, x: Vector) -> Matrix:
        return self._matrix.copy()
