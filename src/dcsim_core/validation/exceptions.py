# src/dcsim_core/validation/exceptions.py
"""
The diagnosable exception raised when topology validation finds nodes with no
conductive path to ground.

`FloatingNodeError` is a `DCSimError` with code FLOATING_NODE, so callers can
branch on `error.code` like everywhere else; it additionally carries every
error-level `ValidationIssue` found in the pass.
"""
from typing import List

from ..errors import DCSimError, ErrorCode, format_diagnostic_report
from .issues import ValidationIssue, ValidationIssueLevel


class FloatingNodeError(DCSimError):
    """Raised when one or more nodes form an island not connected to ground."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.level == ValidationIssueLevel.ERROR
        ]
        floating = [node for issue in self.issues for node in issue.details.get("node_ids", [])]
        if self.issues:
            summary_message = (
                f"Topology validation failed with {len(self.issues)} error(s):\n"
                + "\n".join(f"  - {issue}" for issue in self.issues)
            )
        else:
            summary_message = "FloatingNodeError was raised with no error-level issues."
        super().__init__(
            code=ErrorCode.FLOATING_NODE,
            message=summary_message,
            node_id=floating[0] if floating else None,
            details={"floating_nodes": floating},
        )

    def get_diagnostic_report(self) -> str:
        details = (
            f"Found {len(self.issues)} isolated node group(s). See details below:\n\n"
            + "\n".join(f"  - {issue}" for issue in self.issues)
        )
        return format_diagnostic_report(
            error_type=f"{self.code.value}: Circuit Topology Error",
            details=details,
            suggestion="Every node needs a resistive or voltage-source path to ground. Connect or remove the isolated part of the circuit.",
            context=self.context,
        )
