# src/dcsim_core/simulation/matrix.py
"""
Dense matrix and vector primitives used by the assembler and the solvers.

Matrices are row-major (C-ordered) `float64` arrays of shape (rows, cols);
vectors are `float64` arrays of shape (n,). Every function returns a freshly
allocated array and never aliases or mutates its input. No NaN/Inf checking
happens here; that is the solvers' responsibility.
"""
import logging
from typing import Iterable

import numpy as np

logger = logging.getLogger(__name__)

Matrix = np.ndarray
Vector = np.ndarray


def zeros_matrix(rows: int, cols: int) -> Matrix:
    """A new rows x cols matrix of zeros."""
    return np.zeros((rows, cols), dtype=np.float64, order="C")


def zeros_vector(n: int) -> Vector:
    """A new length-n vector of zeros."""
    return np.zeros(n, dtype=np.float64)


def as_matrix(values) -> Matrix:
    """A C-ordered float64 copy of `values` (array or nested sequence)."""
    return np.array(values, dtype=np.float64, order="C", copy=True)


def as_vector(values: Iterable[float]) -> Vector:
    """A float64 copy of `values` flattened to shape (n,)."""
    return np.array(values, dtype=np.float64, copy=True).reshape(-1)


def copy_vector(v: Vector) -> Vector:
    return np.array(v, dtype=np.float64, copy=True)


def negate(v: Vector) -> Vector:
    """A new vector with every element sign-flipped."""
    return np.negative(v, dtype=np.float64)


def norm_infinity(v: Vector) -> float:
    """max |v_i|, or 0.0 for an empty vector."""
    if v.size == 0:
        return 0.0
    return float(np.max(np.abs(v)))


def mat_vec(a: Matrix, x: Vector) -> Vector:
    """The matrix-vector product A·x as a new vector."""
    return np.asarray(a @ x, dtype=np.float64)


def column_max_abs(a: Matrix) -> Vector:
    """max_i |A_ij| for every column j, or an empty vector for an empty matrix."""
    if a.size == 0:
        return np.zeros(a.shape[1] if a.ndim == 2 else 0, dtype=np.float64)
    return np.max(np.abs(a), axis=0)
