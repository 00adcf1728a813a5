# src/dcsim_core/simulation/engine.py
"""
The DC operating-point pipeline behind the public functions in `execution.py`.

    topology check -> MNA assembly -> strategy choice -> solve -> packaging

The engine is created per call and holds no state beyond the circuit, the
options and the assembler it builds; nothing is cached between runs, so
solving the same circuit twice repeats exactly the same arithmetic.
"""
import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..components.elements import CurrentSource, Ground, Resistor, VoltageSource
from ..data_structures import Circuit
from ..errors import DCSimError, ErrorCode
from ..validation import TopologyValidator
from .config import DCAnalysisOptions
from .exceptions import ConvergenceError, SingularMatrixError
from .matrix import Vector, mat_vec, norm_infinity, zeros_vector
from .mna import MnaAssembler, MnaNonlinearSystem, MnaSystem
from .newton import newton_raphson
from .results import ConvergenceInfo, DCAnalysisResult, DCSweepResult, empty_convergence
from .solver import LUFactorization, factorize_matrix, solve_factorized

logger = logging.getLogger(__name__)


class DCAnalysisEngine:
    """
    Runs DC operating-point analyses of one circuit with one set of options.

    Strategy selection:
        "direct": one LU factorization and solve of A·x = b.
        "newton": the generic Newton-Raphson solver applied to
            F(x) = A·x - b (Jacobian A). For a linear circuit it starts from
            the direct LU solution, so both strategies report identical
            node voltages; otherwise it starts from zero.
        "auto": "direct" when every component is linear, else "newton".
    """

    def __init__(self, circuit: Circuit, options: Optional[DCAnalysisOptions] = None):
        if not isinstance(circuit, Circuit):
            raise DCSimError(
                code=ErrorCode.INVALID_CIRCUIT,
                message=f"DC analysis requires a built Circuit, got {type(circuit).__name__}.",
            )
        if options is not None and not isinstance(options, DCAnalysisOptions):
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"options must be DCAnalysisOptions, got {type(options).__name__}.",
            )
        self.circuit = circuit
        self.options = options if options is not None else DCAnalysisOptions()
        self.assembler = MnaAssembler(circuit)

    @property
    def strategy(self) -> str:
        if self.options.strategy != "auto":
            return self.options.strategy
        return "direct" if self.circuit.is_linear else "newton"

    # --- Public entry points ---

    def run(self) -> DCAnalysisResult:
        """Computes the operating point. Raises exactly one DCSimError on failure."""
        logger.info(f"--- Starting DC analysis for '{self.circuit.name}' ---")
        self._check_topology()
        system = self.assembler.assemble()

        if system.size == 0:
            logger.info("Circuit has no unknowns; returning the trivial operating point.")
            return self._package(zeros_vector(0), system, empty_convergence())

        if self.strategy == "direct":
            factorization = self._factorize(system)
            solution, convergence = self._solve_direct(factorization, system)
        else:
            solution, convergence = self._solve_newton(system)

        result = self._package(solution, system, convergence)
        logger.info(
            f"DC analysis of '{self.circuit.name}' finished ({convergence.strategy}, "
            f"{convergence.iterations} iteration(s), ‖F‖∞ = {convergence.final_residual_norm:.3e})."
        )
        return result

    def sweep(self, source_id: str, values: Sequence[float]) -> DCSweepResult:
        """
        Solves the operating point for each value of one independent source.

        The MNA matrix does not depend on source values, so on the direct path
        it is factorized once and only the right-hand side is rebuilt per point.
        """
        source = self.circuit.get_component(source_id)
        if not isinstance(source, (VoltageSource, CurrentSource)):
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"Sweep source '{source_id}' is not a voltage or current source of circuit '{self.circuit.name}'.",
                component_id=source_id,
            )
        sweep_values = np.asarray(values, dtype=np.float64).reshape(-1)
        if sweep_values.size == 0 or not np.all(np.isfinite(sweep_values)):
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"Sweep values for '{source_id}' must be a non-empty sequence of finite numbers.",
                component_id=source_id,
            )

        logger.info(f"--- Starting DC sweep of '{source_id}' over {sweep_values.size} point(s) ---")
        self._check_topology()
        base = self.assembler.assemble()
        factorization = self._factorize(base) if self.strategy == "direct" else None

        points: List[DCAnalysisResult] = []
        for value in sweep_values:
            system = MnaSystem(
                matrix=base.matrix,
                rhs=self.assembler.assemble_rhs({source_id: float(value)}),
                node_index=base.node_index,
                voltage_source_index=base.voltage_source_index,
                size=base.size,
            )
            if factorization is not None:
                solution, convergence = self._solve_direct(factorization, system)
            else:
                solution, convergence = self._solve_newton(system)
            points.append(self._package(solution, system, convergence, {source_id: float(value)}))

        logger.info(f"DC sweep of '{source_id}' finished.")
        return DCSweepResult(source_id=source.id, values=sweep_values, operating_points=tuple(points))

    # --- Pipeline steps ---

    def _check_topology(self) -> None:
        if self.options.detect_floating_nodes:
            TopologyValidator(self.circuit).check()

    def _factorize(self, system: MnaSystem) -> LUFactorization:
        try:
            return factorize_matrix(system.matrix, pivot_tolerance=self.options.pivot_tolerance)
        except SingularMatrixError as e:
            raise SingularMatrixError(
                message=(
                    f"The MNA system of circuit '{self.circuit.name}' is singular: {e.message} "
                    "The circuit has no unique DC solution."
                ),
                pivot_index=e.pivot_index,
                pivot_magnitude=e.pivot_magnitude,
            ) from e

    def _solve_direct(self, factorization: LUFactorization, system: MnaSystem) -> Tuple[Vector, ConvergenceInfo]:
        solution = solve_factorized(factorization, system.rhs)
        residual_norm = norm_infinity(mat_vec(system.matrix, solution) - system.rhs)
        convergence = ConvergenceInfo(
            converged=True,
            iterations=1,
            max_iterations=1,
            final_residual_norm=residual_norm,
            final_update_norm=0.0,
            strategy="direct",
        )
        return solution, convergence

    def _solve_newton(self, system: MnaSystem) -> Tuple[Vector, ConvergenceInfo]:
        nr_result = newton_raphson(
            MnaNonlinearSystem(system),
            self._initial_guess(system),
            self.options.newton,
        )
        convergence = ConvergenceInfo(
            converged=nr_result.converged,
            iterations=nr_result.iterations,
            max_iterations=self.options.newton.max_iterations,
            final_residual_norm=nr_result.final_residual_norm,
            final_update_norm=nr_result.final_update_norm,
            strategy="newton",
        )
        return nr_result.solution, convergence

    def _initial_guess(self, system: MnaSystem) -> Vector:
        if not self.circuit.is_linear:
            return zeros_vector(system.size)
        # F is affine here, so the direct LU solution is already its root and
        # Newton returns it unchanged whenever ‖A·x - b‖∞ is within tolerance.
        try:
            factorization = factorize_matrix(system.matrix, pivot_tolerance=self.options.pivot_tolerance)
            return solve_factorized(factorization, system.rhs)
        except SingularMatrixError as e:
            logger.error(f"Newton-Raphson: singular Jacobian for the linear system of '{self.circuit.name}'.")
            raise ConvergenceError(
                message=f"Singular Jacobian while computing the initial guess: {e.message}",
                iterations=0,
                final_residual_norm=norm_infinity(system.rhs),
                final_update_norm=0.0,
            ) from e

    def _package(
        self,
        solution: Vector,
        system: MnaSystem,
        convergence: ConvergenceInfo,
        overrides: Optional[Mapping[str, float]] = None,
    ) -> DCAnalysisResult:
        circuit = self.circuit
        overrides = overrides or {}
        node_voltages: Dict[str, float] = {}
        for node in circuit.nodes:
            index = system.node_index.get(node.id)
            node_voltages[node.id] = 0.0 if index is None else float(solution[index])
        node_voltages.setdefault(circuit.ground_node_id, 0.0)

        source_currents: Dict[str, float] = {}
        branch_currents: Dict[str, float] = {}
        component_powers: Dict[str, float] = {}
        for comp in circuit.components:
            if isinstance(comp, Ground):
                continue
            v_drop = node_voltages[comp.pos_node] - node_voltages[comp.neg_node]
            if isinstance(comp, Resistor):
                current = v_drop / comp.resistance
                power = v_drop * current
            elif isinstance(comp, VoltageSource):
                # The MNA unknown is the current entering the pos terminal; report the supplied current.
                current = -float(solution[system.voltage_source_index[comp.id]])
                power = -overrides.get(comp.id, comp.voltage) * current
                source_currents[comp.id] = current
            else:
                current = overrides.get(comp.id, comp.current)
                power = v_drop * current
            branch_currents[comp.id] = float(current)
            component_powers[comp.id] = float(power)

        return DCAnalysisResult(
            node_voltages=node_voltages,
            source_currents=source_currents,
            branch_currents=branch_currents,
            component_powers=component_powers,
            solution=solution,
            convergence=convergence,
        )
