# src/dcsim_core/errors.py
"""
The single error taxonomy shared by the parser, the circuit model and the solvers.

Every failure the library reports carries an `ErrorCode` discriminant, a
human-readable message and optional `component_id` / `node_id` context. Callers
are expected to branch on `error.code`; the few subclasses that exist only add
extra diagnostic fields and never change the code they were raised with.
"""
import logging
from abc import abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Discriminant carried by every `DCSimError`."""
    INVALID_COMPONENT = "INVALID_COMPONENT"
    INVALID_CIRCUIT = "INVALID_CIRCUIT"
    NO_GROUND = "NO_GROUND"
    FLOATING_NODE = "FLOATING_NODE"
    SINGULAR_MATRIX = "SINGULAR_MATRIX"
    CONVERGENCE_FAILED = "CONVERGENCE_FAILED"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    UNSUPPORTED_ANALYSIS = "UNSUPPORTED_ANALYSIS"

    def __str__(self):
        return self.value


# --- User-Facing Exception Hierarchy ---

class DCSimUserError(Exception):
    """Base class for the pre-formatted, user-facing facade errors."""
    pass

class CircuitBuildError(DCSimUserError):
    """
    Raised when turning a netlist document into a `Circuit` fails, from file
    loading through component construction. The message is a formatted
    diagnostic report; the original `DCSimError` is chained as `__cause__`.
    """
    pass

class SimulationRunError(DCSimUserError):
    """
    Raised when a DC analysis of an already-built circuit fails (topology,
    singular system, non-convergence). The message is a formatted diagnostic
    report; the original `DCSimError` is chained as `__cause__`.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """Anything that can render its own multi-line diagnostic report."""
    def get_diagnostic_report(self) -> str:
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    Concrete, catchable base for internal exceptions. Subclasses must provide
    `get_diagnostic_report`.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        raise NotImplementedError


_SUGGESTIONS: Dict[ErrorCode, str] = {
    ErrorCode.INVALID_COMPONENT: "Check the component's type, id and node list in the netlist.",
    ErrorCode.INVALID_CIRCUIT: "Make sure the circuit has a name and at least one component.",
    ErrorCode.NO_GROUND: "Connect at least one component to the ground node, or set 'ground' to a node that is used.",
    ErrorCode.FLOATING_NODE: "Every node needs a resistive or voltage-source path to ground. Connect or remove the isolated part of the circuit.",
    ErrorCode.SINGULAR_MATRIX: "This is usually a floating sub-circuit, parallel voltage sources, or a loop made only of voltage sources.",
    ErrorCode.CONVERGENCE_FAILED: "Try a better initial guess, a smaller damping factor or more iterations.",
    ErrorCode.INVALID_PARAMETER: "Check the parameter value and its allowed range.",
    ErrorCode.UNSUPPORTED_ANALYSIS: "Only DC operating-point analysis of R, V and I elements is supported.",
}


@dataclass(eq=False)
class DCSimError(DiagnosableError):
    """
    The canonical error for everything the core reports.

    Attributes:
        code: The `ErrorCode` discriminant callers branch on.
        message: A human-readable description.
        component_id: Optional id of the component at fault.
        node_id: Optional id of the node at fault.
        details: Extra machine-readable diagnostics (norms, iteration counts, ...).
    """
    code: ErrorCode
    message: str
    component_id: Optional[str] = None
    node_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Exception.__init__ is bypassed by the generated __init__; keep `args` populated.
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.code}] {self.message}"

    @property
    def context(self) -> Dict[str, str]:
        ctx = {}
        if self.component_id is not None:
            ctx["componentId"] = self.component_id
        if self.node_id is not None:
            ctx["nodeId"] = self.node_id
        return ctx

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type=self.code.value,
            details=self.message,
            suggestion=_SUGGESTIONS.get(self.code, ""),
            context=self.context,
        )


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats the multi-line report shown to users, so every diagnostic has the
    same look regardless of which layer raised it.

    Args:
        error_type: The error code or high-level category.
        details: Description of the problem, possibly multi-line.
        suggestion: Actionable advice; omitted when empty.
        context: Optional keys `componentId`, `nodeId`, `source_file`.

    Returns:
        The formatted report string.
    """
    lines = [
        "\n",
        "================ DCSim Core: Diagnostic Report ================",
        f"Error Type:     {error_type}",
    ]
    if component_id := context.get('componentId'):
        lines.append(f"Component:      {component_id}")
    if node_id := context.get('nodeId'):
        lines.append(f"Node:           {node_id}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("===============================================================")
    return "\n".join(lines)
