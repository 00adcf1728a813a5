# src/dcsim_core/simulation/newton.py
"""
Generic damped Newton-Raphson solver for F(x) = 0.

The solver knows nothing about circuits: it drives any object satisfying the
`NonlinearSystem` protocol and delegates every linear step J·Δ = -F to the
LU direct solver.

Convergence requires BOTH conditions after an update:
  * every element's step satisfies |step_i| < atol + rtol·|x_i(before update)|
  * ‖F(x_new)‖∞ < atol
The residual evaluated at the new x is reused as the starting residual of the
next round, so F is computed exactly once per iterate.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np

from ..errors import DCSimError, ErrorCode
from .config import NewtonRaphsonOptions, with_newton_overrides
from .exceptions import ConvergenceError, SingularMatrixError
from .matrix import Matrix, Vector, copy_vector, negate, norm_infinity
from .solver import solve_linear_system

logger = logging.getLogger(__name__)


@runtime_checkable
class NonlinearSystem(Protocol):
    """A square system of equations F(x) = 0 with its Jacobian."""
    size: int

    def residual(self, x: Vector) -> Vector:
        ...

    def jacobian(self, x: Vector) -> Matrix:
        ...


@dataclass(frozen=True)
class NewtonRaphsonResult:
    solution: Vector
    converged: bool
    iterations: int
    final_residual_norm: float
    final_update_norm: float


def newton_raphson(
    system: NonlinearSystem,
    initial_guess: Vector,
    options: Optional[NewtonRaphsonOptions] = None,
    **overrides,
) -> NewtonRaphsonResult:
    """
    Solves `system` starting from `initial_guess`.

    Args:
        system: The NonlinearSystem to solve.
        initial_guess: Starting point; copied, never modified.
        options: Solver options; defaults apply when omitted.
        **overrides: Individual option fields replacing those in `options`.

    Returns:
        A converged NewtonRaphsonResult. Zero iterations means the initial
        guess already satisfied the residual tolerance.

    Raises:
        DCSimError: INVALID_PARAMETER before any iteration for a missing
            system/guess, a size mismatch or an out-of-range option.
        ConvergenceError: CONVERGENCE_FAILED on a singular Jacobian or when
            the iteration limit is exhausted.
    """
    if system is None:
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Nonlinear system cannot be None.")
    if initial_guess is None:
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Initial guess cannot be None.")
    opts = with_newton_overrides(options, **overrides)

    x = copy_vector(initial_guess)
    if x.ndim != 1 or x.shape[0] != system.size:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Initial guess length {x.size} does not match system size {system.size}.",
        )

    atol = float(opts.absolute_tolerance)
    rtol = float(opts.relative_tolerance)
    damping = float(opts.damping_factor)

    f = np.asarray(system.residual(x), dtype=np.float64)
    residual_norm = norm_infinity(f)
    if residual_norm < atol:
        logger.debug(f"Initial guess satisfies ‖F‖∞ = {residual_norm:.3e} < {atol:.3e}; no iterations needed.")
        return NewtonRaphsonResult(
            solution=x,
            converged=True,
            iterations=0,
            final_residual_norm=residual_norm,
            final_update_norm=0.0,
        )

    update_norm = 0.0
    for iteration in range(1, opts.max_iterations + 1):
        jacobian = system.jacobian(x)
        try:
            delta = solve_linear_system(jacobian, negate(f))
        except SingularMatrixError as e:
            logger.error(f"Newton-Raphson: singular Jacobian at iteration {iteration}.")
            raise ConvergenceError(
                message=f"Singular Jacobian at iteration {iteration}: {e.message}",
                iterations=iteration,
                final_residual_norm=residual_norm,
                final_update_norm=update_norm,
            ) from e

        step = damping * delta
        x_before = x
        x = x_before + step
        update_norm = norm_infinity(step)
        updates_converged = bool(np.all(np.abs(step) < atol + rtol * np.abs(x_before)))

        f = np.asarray(system.residual(x), dtype=np.float64)
        residual_norm = norm_infinity(f)
        logger.debug(
            f"Newton-Raphson iteration {iteration}: ‖Δx‖∞ = {update_norm:.3e}, ‖F‖∞ = {residual_norm:.3e}"
        )

        if updates_converged and residual_norm < atol:
            logger.info(f"Newton-Raphson converged in {iteration} iteration(s).")
            return NewtonRaphsonResult(
                solution=x,
                converged=True,
                iterations=iteration,
                final_residual_norm=residual_norm,
                final_update_norm=update_norm,
            )

    logger.error(
        f"Newton-Raphson did not converge in {opts.max_iterations} iterations "
        f"(‖F‖∞ = {residual_norm:.3e}, ‖Δx‖∞ = {update_norm:.3e})."
    )
    raise ConvergenceError(
        message=(
            f"Newton-Raphson did not converge after {opts.max_iterations} iterations. "
            f"Final residual norm {residual_norm:.3e}, final update norm {update_norm:.3e}."
        ),
        iterations=opts.max_iterations,
        final_residual_norm=residual_norm,
        final_update_norm=update_norm,
    )
