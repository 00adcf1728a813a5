# src/dcsim_core/simulation/solver.py
"""
Dense LU direct solver with partial pivoting.

`factorize_matrix` computes PA = LU in a single compact array (strict lower
triangle holds the unit-lower L multipliers, upper triangle including the
diagonal holds U). A pivot in column k whose magnitude is at or below
`pivot_tolerance * max_i |A_ik|` aborts the factorization with
`SingularMatrixError`; no partial factorization is ever returned, so every
`LUFactorization` in existence is usable for solving.
"""
import logging
from dataclasses import dataclass

import numpy as np

from ..constants import DEFAULT_PIVOT_TOLERANCE
from ..errors import DCSimError, ErrorCode
from .exceptions import SingularMatrixError
from .matrix import Matrix, Vector, column_max_abs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LUFactorization:
    """
    The result of a successful factorization.

    Attributes:
        lu: n x n compact L\\U factor (row-permuted).
        permutation: `permutation[i]` is the original row now at position i.
        swap_count: Number of row interchanges performed.
        size: n.
    """
    lu: Matrix
    permutation: np.ndarray
    swap_count: int
    size: int


def _validate_square(a) -> Matrix:
    if a is None:
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Matrix cannot be None.")
    a = np.asarray(a, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Matrix must be square: got shape {a.shape}.",
        )
    if a.shape[0] == 0:
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Matrix cannot be empty (0x0).")
    if not np.all(np.isfinite(a)):
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Matrix contains NaN or Infinity.")
    return a


def factorize_matrix(a: Matrix, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> LUFactorization:
    """
    Factorizes a square matrix using Gaussian elimination with partial pivoting.

    Args:
        a: The n x n matrix. It is not modified.
        pivot_tolerance: Relative singularity threshold; a pivot is rejected
            when |pivot| <= pivot_tolerance * max_i |A_ik| for its column k of
            the original matrix.

    Returns:
        The LUFactorization.

    Raises:
        SingularMatrixError: If a chosen pivot falls at or below the threshold.
        DCSimError: INVALID_PARAMETER for a non-square, empty or non-finite
            matrix, or a negative/non-finite tolerance.
    """
    a = _validate_square(a)
    if not np.isfinite(pivot_tolerance) or pivot_tolerance < 0.0:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"pivot_tolerance must be a finite non-negative number, got {pivot_tolerance!r}.",
        )

    n = a.shape[0]
    lu = np.array(a, dtype=np.float64, order="C", copy=True)
    permutation = np.arange(n, dtype=np.intp)
    swap_count = 0

    # Row swaps never move entries between columns, so column k of the original
    # matrix is the reference scale for the pivot chosen in column k.
    column_scale = column_max_abs(a)
    logger.debug(
        f"Factorizing {n}x{n} matrix (column scales {column_scale.min():.3e} .. {column_scale.max():.3e})."
    )

    for k in range(n):
        # Largest |entry| at or below the diagonal; first occurrence wins ties.
        pivot_row = k + int(np.argmax(np.abs(lu[k:, k])))
        pivot_magnitude = abs(lu[pivot_row, k])
        threshold = pivot_tolerance * column_scale[k]

        if pivot_magnitude <= threshold:
            logger.error(
                f"Singular matrix: pivot {pivot_magnitude:.3e} at column {k} is at or below threshold {threshold:.3e}."
            )
            raise SingularMatrixError(
                message=(
                    f"Matrix is singular or near-singular: pivot magnitude {pivot_magnitude:.3e} "
                    f"in column {k} is at or below the threshold {threshold:.3e}. "
                    "The linear system has no unique solution."
                ),
                pivot_index=k,
                pivot_magnitude=float(pivot_magnitude),
            )

        if pivot_row != k:
            lu[[k, pivot_row], :] = lu[[pivot_row, k], :]
            permutation[[k, pivot_row]] = permutation[[pivot_row, k]]
            swap_count += 1

        if k + 1 < n:
            multipliers = lu[k + 1:, k] / lu[k, k]
            lu[k + 1:, k] = multipliers
            lu[k + 1:, k + 1:] -= np.outer(multipliers, lu[k, k + 1:])

    logger.debug(f"LU factorization successful ({swap_count} row swaps).")
    return LUFactorization(lu=lu, permutation=permutation, swap_count=swap_count, size=n)


def solve_factorized(factorization: LUFactorization, b: Vector) -> Vector:
    """
    Solves A·x = b with a precomputed factorization: permute b, forward
    substitution through unit-lower L, back substitution through U.

    Raises:
        SingularMatrixError: If the solution contains NaN or Inf.
        DCSimError: INVALID_PARAMETER for a missing input or a length mismatch.
    """
    if factorization is None or b is None:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message="Factorization and right-hand side cannot be None.",
        )
    b = np.asarray(b, dtype=np.float64)
    n = factorization.size
    if b.ndim != 1 or b.shape[0] != n:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Vector length must match matrix size: {b.shape[0] if b.ndim == 1 else b.shape} vs {n}.",
        )

    lu = factorization.lu
    y = b[factorization.permutation].copy()
    for i in range(n):
        y[i] -= lu[i, :i] @ y[:i]

    x = np.empty(n, dtype=np.float64)
    for i in range(n - 1, -1, -1):
        x[i] = (y[i] - lu[i, i + 1:] @ x[i + 1:]) / lu[i, i]

    if not np.all(np.isfinite(x)):
        logger.error("NaN or Inf detected in LU solution vector.")
        raise SingularMatrixError(message="Linear solve produced NaN/Inf values; the matrix is numerically singular.")
    return x


def solve_linear_system(a: Matrix, b: Vector, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> Vector:
    """Factorizes `a` and solves A·x = b. Neither input is modified."""
    factorization = factorize_matrix(a, pivot_tolerance=pivot_tolerance)
    return solve_factorized(factorization, b)


def solve_multiple(factorization: LUFactorization, b_columns: Matrix) -> Matrix:
    """
    Solves A·X = B column by column, reusing one factorization.

    Args:
        b_columns: n x m matrix whose columns are right-hand sides.

    Returns:
        The n x m solution matrix.
    """
    if factorization is None or b_columns is None:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message="Factorization and right-hand sides cannot be None.",
        )
    b_columns = np.asarray(b_columns, dtype=np.float64)
    if b_columns.ndim != 2 or b_columns.shape[0] != factorization.size:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Right-hand side rows must match system size: {b_columns.shape} vs {factorization.size}.",
        )
    result = np.empty_like(b_columns, order="C")
    for col in range(b_columns.shape[1]):
        result[:, col] = solve_factorized(factorization, b_columns[:, col])
    return result


def determinant(factorization: LUFactorization) -> float:
    """det(A) = (-1)^swap_count * prod(diag(U))."""
    if factorization is None:
        raise DCSimError(code=ErrorCode.INVALID_PARAMETER, message="Factorization cannot be None.")
    sign = -1.0 if factorization.swap_count % 2 else 1.0
    return sign * float(np.prod(np.diag(factorization.lu)))
