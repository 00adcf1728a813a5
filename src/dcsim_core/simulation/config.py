# src/dcsim_core/simulation/config.py
import logging
import math
from dataclasses import dataclass, field, fields, replace
from numbers import Integral, Real
from typing import Any, Dict, Mapping, Optional

from ..constants import (
    DEFAULT_ABSOLUTE_TOLERANCE,
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PIVOT_TOLERANCE,
    DEFAULT_RELATIVE_TOLERANCE,
)
from ..errors import DCSimError, ErrorCode

logger = logging.getLogger(__name__)

STRATEGIES = ("auto", "direct", "newton")


def _invalid(message: str) -> DCSimError:
    return DCSimError(code=ErrorCode.INVALID_PARAMETER, message=message)


def _require_real(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(float(value)):
        raise _invalid(f"{name} must be a finite number, got {value!r}.")
    return float(value)


@dataclass(frozen=True)
class NewtonRaphsonOptions:
    """
    Tuning knobs of the damped Newton-Raphson solver.

    Attributes:
        max_iterations: Positive iteration limit.
        absolute_tolerance: >= 0; bound on both the residual infinity-norm and
            the absolute part of the per-element update check.
        relative_tolerance: >= 0; relative part of the per-element update check.
        damping_factor: In (0, 1]; scales every Newton step.
    """
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    absolute_tolerance: float = DEFAULT_ABSOLUTE_TOLERANCE
    relative_tolerance: float = DEFAULT_RELATIVE_TOLERANCE
    damping_factor: float = DEFAULT_DAMPING_FACTOR

    def __post_init__(self):
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, Integral) or self.max_iterations < 1:
            raise _invalid(f"max_iterations must be a positive integer, got {self.max_iterations!r}.")
        atol = _require_real("absolute_tolerance", self.absolute_tolerance)
        if atol < 0.0:
            raise _invalid(f"absolute_tolerance must be >= 0, got {atol}.")
        rtol = _require_real("relative_tolerance", self.relative_tolerance)
        if rtol < 0.0:
            raise _invalid(f"relative_tolerance must be >= 0, got {rtol}.")
        damping = _require_real("damping_factor", self.damping_factor)
        if not 0.0 < damping <= 1.0:
            raise _invalid(f"damping_factor must be in (0, 1], got {damping}.")


@dataclass(frozen=True)
class DCAnalysisOptions:
    """
    Options of a DC operating-point run.

    `strategy` selects the solve path: "direct" (one LU solve), "newton"
    (Newton-Raphson on the MNA residual) or "auto" (direct when every
    component is linear).
    """
    strategy: str = "auto"
    pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE
    detect_floating_nodes: bool = True
    newton: NewtonRaphsonOptions = field(default_factory=NewtonRaphsonOptions)

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise _invalid(f"strategy must be one of {STRATEGIES}, got {self.strategy!r}.")
        tol = _require_real("pivot_tolerance", self.pivot_tolerance)
        if tol < 0.0:
            raise _invalid(f"pivot_tolerance must be >= 0, got {tol}.")
        if not isinstance(self.detect_floating_nodes, bool):
            raise _invalid(f"detect_floating_nodes must be a boolean, got {self.detect_floating_nodes!r}.")
        if not isinstance(self.newton, NewtonRaphsonOptions):
            raise _invalid(f"newton must be NewtonRaphsonOptions, got {type(self.newton).__name__}.")


# Wire-format (camelCase) key -> field name. snake_case field names are accepted as-is.
_NEWTON_KEYS = {
    "maxIterations": "max_iterations",
    "absoluteTolerance": "absolute_tolerance",
    "relativeTolerance": "relative_tolerance",
    "dampingFactor": "damping_factor",
}
_ANALYSIS_KEYS = {
    "strategy": "strategy",
    "pivotTolerance": "pivot_tolerance",
    "detectFloatingNodes": "detect_floating_nodes",
}


def parse_solver_config(raw_config: Optional[Mapping[str, Any]]) -> DCAnalysisOptions:
    """
    Parses a flat solver-options mapping into `DCAnalysisOptions`.

    Keys may be camelCase (`maxIterations`) or snake_case (`max_iterations`).
    A missing or empty mapping yields the defaults.

    Raises:
        DCSimError: INVALID_PARAMETER on unknown keys or out-of-range values.
    """
    if not raw_config:
        return DCAnalysisOptions()
    if not isinstance(raw_config, Mapping):
        raise _invalid(f"Solver configuration must be a mapping, got {type(raw_config).__name__}.")

    newton_fields = {f.name for f in fields(NewtonRaphsonOptions)}
    analysis_fields = {f.name for f in fields(DCAnalysisOptions)} - {"newton"}

    newton_kwargs: Dict[str, Any] = {}
    analysis_kwargs: Dict[str, Any] = {}
    for key, value in raw_config.items():
        if key in _NEWTON_KEYS or key in newton_fields:
            newton_kwargs[_NEWTON_KEYS.get(key, key)] = value
        elif key in _ANALYSIS_KEYS or key in analysis_fields:
            analysis_kwargs[_ANALYSIS_KEYS.get(key, key)] = value
        else:
            raise _invalid(f"Unknown solver option '{key}'.")

    options = DCAnalysisOptions(newton=NewtonRaphsonOptions(**newton_kwargs), **analysis_kwargs)
    logger.debug(f"Parsed solver configuration: {options}")
    return options


def with_newton_overrides(options: Optional[NewtonRaphsonOptions], **overrides) -> NewtonRaphsonOptions:
    """Returns `options` (or the defaults) with the given fields replaced and re-validated."""
    base = options if options is not None else NewtonRaphsonOptions()
    if not overrides:
        return base
    known = {f.name for f in fields(NewtonRaphsonOptions)}
    unknown = set(overrides) - known
    if unknown:
        raise _invalid(f"Unknown Newton-Raphson option(s): {sorted(unknown)}.")
    return replace(base, **overrides)
