# src/dcsim_core/simulation/exceptions.py
"""
Diagnosable exceptions raised by the numeric layer (LU, Newton-Raphson) and
the DC analysis pipeline.

Both classes are specialisations of `DCSimError`: they keep its `code`
discriminant, so callers that branch on `error.code` need not know about
them, while callers that want the numeric context (pivot index, final norms)
can catch the subclass.
"""
from typing import Optional

import numpy as np

from ..errors import DCSimError, ErrorCode


class SingularMatrixError(DCSimError, np.linalg.LinAlgError):
    """
    Raised when LU factorization meets a pivot at or below the singularity
    threshold, or when a solve produces non-finite values.

    Also catchable as `numpy.linalg.LinAlgError`.
    """

    def __init__(
        self,
        message: str,
        pivot_index: Optional[int] = None,
        pivot_magnitude: Optional[float] = None,
        component_id: Optional[str] = None,
    ):
        details = {}
        if pivot_index is not None:
            details["pivot_index"] = pivot_index
        if pivot_magnitude is not None:
            details["pivot_magnitude"] = pivot_magnitude
        super().__init__(
            code=ErrorCode.SINGULAR_MATRIX,
            message=message,
            component_id=component_id,
            details=details,
        )
        self.pivot_index = pivot_index
        self.pivot_magnitude = pivot_magnitude


class ConvergenceError(DCSimError):
    """Raised when Newton-Raphson fails to converge, carrying the final norms."""

    def __init__(
        self,
        message: str,
        iterations: int,
        final_residual_norm: float,
        final_update_norm: float,
    ):
        super().__init__(
            code=ErrorCode.CONVERGENCE_FAILED,
            message=message,
            details={
                "iterations": iterations,
                "final_residual_norm": final_residual_norm,
                "final_update_norm": final_update_norm,
            },
        )
        self.iterations = iterations
        self.final_residual_norm = final_residual_norm
        self.final_update_norm = final_update_norm
