# src/dcsim_core/simulation/results.py
"""
Immutable result contracts of the DC analysis.

All mappings are keyed by node id or component id and iterate in circuit
order (nodes in first-seen order, components in input order).
"""
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np


@dataclass(frozen=True)
class ConvergenceInfo:
    """
    How a solution was obtained.

    Attributes:
        converged: Always True for a returned result; failures raise instead.
        iterations: 1 for a direct solve, the Newton-Raphson round count otherwise.
        max_iterations: The iteration limit in force (1 for a direct solve).
        final_residual_norm: ‖A·x - b‖∞ at the returned solution.
        final_update_norm: ‖Δx‖∞ of the last Newton step (0.0 for a direct solve).
        strategy: "direct", "newton" or "trivial" (no unknowns to solve for).
    """
    converged: bool
    iterations: int
    max_iterations: int
    final_residual_norm: float
    final_update_norm: float
    strategy: str


@dataclass(frozen=True)
class DCAnalysisResult:
    """
    The DC operating point of a circuit.

    Attributes:
        node_voltages: Node id -> voltage (V). Ground is always present at 0.0.
        source_currents: Voltage source id -> current supplied by the source (A),
            i.e. flowing out of its `pos` terminal into the circuit.
        branch_currents: Component id -> current (A) for every non-ground
            component: resistors (pos -> neg through the resistor), voltage
            sources (as in `source_currents`), current sources (their value).
        component_powers: Component id -> absorbed power (W), passive sign
            convention. Resistors are positive; a source delivering energy is
            negative, so the values sum to zero.
        solution: The raw MNA unknown vector.
        convergence: Solve metadata.
    """
    node_voltages: Dict[str, float]
    source_currents: Dict[str, float]
    branch_currents: Dict[str, float]
    component_powers: Dict[str, float]
    solution: np.ndarray
    convergence: ConvergenceInfo

    def voltage(self, node_id: str) -> float:
        return self.node_voltages[node_id]

    def voltage_between(self, node_a: str, node_b: str) -> float:
        return self.node_voltages[node_a] - self.node_voltages[node_b]

    def current(self, component_id: str) -> float:
        return self.branch_currents[component_id]

    def power_balance(self) -> float:
        """Sum of all absorbed powers; zero up to rounding for a valid solution."""
        return float(sum(self.component_powers.values()))


@dataclass(frozen=True)
class DCSweepResult:
    """
    A DC sweep: one operating point per swept source value.

    Attributes:
        source_id: The swept voltage or current source.
        values: The source values, in sweep order.
        operating_points: One DCAnalysisResult per value.
    """
    source_id: str
    values: np.ndarray
    operating_points: Tuple[DCAnalysisResult, ...]

    def node_voltage_trace(self, node_id: str) -> np.ndarray:
        """The voltage of `node_id` across the sweep."""
        return np.array([op.node_voltages[node_id] for op in self.operating_points], dtype=np.float64)

    def current_trace(self, component_id: str) -> np.ndarray:
        """The branch current of `component_id` across the sweep."""
        return np.array([op.branch_currents[component_id] for op in self.operating_points], dtype=np.float64)

    def __len__(self) -> int:
        return len(self.operating_points)


def empty_convergence(strategy: str = "trivial") -> ConvergenceInfo:
    return ConvergenceInfo(
        converged=True,
        iterations=1,
        max_iterations=1,
        final_residual_norm=0.0,
        final_update_norm=0.0,
        strategy=strategy,
    )
