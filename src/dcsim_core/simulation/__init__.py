# src/dcsim_core/simulation/__init__.py
from .exceptions import SingularMatrixError, ConvergenceError
from .matrix import zeros_matrix, zeros_vector, as_vector, negate, norm_infinity, mat_vec
from .solver import (
    LUFactorization,
    factorize_matrix,
    solve_factorized,
    solve_linear_system,
    solve_multiple,
    determinant,
)
from .config import NewtonRaphsonOptions, DCAnalysisOptions, parse_solver_config
from .newton import NonlinearSystem, NewtonRaphsonResult, newton_raphson
from .mna import MnaAssembler, MnaSystem, MnaNonlinearSystem
from .results import ConvergenceInfo, DCAnalysisResult, DCSweepResult
from .engine import DCAnalysisEngine
from .execution import run_dc_analysis, run_dc_sweep, analyze_netlist

__all__ = [
    # Exceptions
    "SingularMatrixError",
    "ConvergenceError",
    # Primitives
    "zeros_matrix", "zeros_vector", "as_vector", "negate", "norm_infinity", "mat_vec",
    # LU
    "LUFactorization",
    "factorize_matrix",
    "solve_factorized",
    "solve_linear_system",
    "solve_multiple",
    "determinant",
    # Newton-Raphson
    "NonlinearSystem",
    "NewtonRaphsonResult",
    "NewtonRaphsonOptions",
    "newton_raphson",
    # Assembly & analysis
    "MnaAssembler",
    "MnaSystem",
    "MnaNonlinearSystem",
    "DCAnalysisOptions",
    "parse_solver_config",
    "DCAnalysisEngine",
    "ConvergenceInfo",
    "DCAnalysisResult",
    "DCSweepResult",
    "run_dc_analysis",
    "run_dc_sweep",
    "analyze_netlist",
]
