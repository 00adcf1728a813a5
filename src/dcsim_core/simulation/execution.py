# src/dcsim_core/simulation/execution.py
"""
Public entry points for DC analysis.

`run_dc_analysis` and `run_dc_sweep` operate on an already-built `Circuit`
and raise `DCSimError` (or one of its subclasses) on failure, so programmatic
callers can branch on `error.code`.

`analyze_netlist` is the end-to-end facade: netlist file or mapping in,
operating point out. Like the other facades of the package it converts any
diagnosable failure into a user-facing `CircuitBuildError` (netlist could
not be turned into a circuit) or `SimulationRunError` (circuit could not be
solved) whose message is the formatted diagnostic report; the original
error is chained as `__cause__`.
"""
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from ..data_structures import Circuit
from ..errors import CircuitBuildError, DiagnosableError, SimulationRunError, format_diagnostic_report
from .config import DCAnalysisOptions, parse_solver_config
from .engine import DCAnalysisEngine
from .results import DCAnalysisResult, DCSweepResult

logger = logging.getLogger(__name__)


def run_dc_analysis(circuit: Circuit, options: Optional[DCAnalysisOptions] = None) -> DCAnalysisResult:
    """
    Computes the DC operating point of `circuit`.

    Args:
        circuit: A circuit produced by `Circuit.build` or the `CircuitBuilder`.
        options: Analysis options; defaults when omitted.

    Returns:
        The DCAnalysisResult.

    Raises:
        DCSimError: NO_GROUND, FLOATING_NODE, SINGULAR_MATRIX,
            CONVERGENCE_FAILED or INVALID_PARAMETER. Exactly one error, no
            partial result.
    """
    return DCAnalysisEngine(circuit, options).run()


def run_dc_sweep(
    circuit: Circuit,
    source_id: str,
    values: Sequence[float],
    options: Optional[DCAnalysisOptions] = None,
) -> DCSweepResult:
    """
    Computes one operating point per value of the independent source
    `source_id` (volts for a voltage source, amperes for a current source).

    Raises:
        DCSimError: INVALID_PARAMETER for an unknown or non-source id or
            non-finite values, plus every error of `run_dc_analysis`.
    """
    return DCAnalysisEngine(circuit, options).sweep(source_id, values)


def analyze_netlist(
    netlist: Union[str, Path, Mapping[str, Any]],
    options: Union[DCAnalysisOptions, Mapping[str, Any], None] = None,
) -> DCAnalysisResult:
    """
    Parses, builds and solves a netlist in one call.

    Args:
        netlist: Path to a YAML/JSON netlist file, or an already-loaded mapping.
        options: DCAnalysisOptions, or a raw solver-options mapping
            (camelCase or snake_case keys).

    Raises:
        CircuitBuildError: The netlist could not be loaded, validated or built.
        SimulationRunError: The built circuit could not be solved, or the
            solver options are invalid.
    """
    # Imported here: the parser/builder layer sits above the simulation package.
    from ..circuit_builder import CircuitBuilder
    from ..parser import NetlistParser

    try:
        document = NetlistParser().parse(netlist)
        circuit = CircuitBuilder().build_circuit(document)
    except DiagnosableError as e:
        logger.error(f"Failed to build circuit from netlist: {e}")
        raise CircuitBuildError(e.get_diagnostic_report()) from e

    try:
        if not isinstance(options, DCAnalysisOptions):
            options = parse_solver_config(options)
        return run_dc_analysis(circuit, options)
    except DiagnosableError as e:
        logger.error(f"A diagnosable error occurred during DC analysis: {e}")
        raise SimulationRunError(e.get_diagnostic_report()) from e
    except Exception as e:
        logger.critical(f"An unexpected internal error occurred during DC analysis: {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Simulation Error Occurred ({type(e).__name__})",
            details=f"The simulator encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={},
        )
        raise SimulationRunError(report) from e
