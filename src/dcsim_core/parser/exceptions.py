# src/dcsim_core/parser/exceptions.py
"""
Diagnosable exceptions of the netlist loading and schema validation stage.

Both are `DCSimError`s with code INVALID_CIRCUIT: the document as a whole
could not be read or does not have the required structure. Problems with an
individual, structurally valid component entry are reported later by the
CircuitBuilder as INVALID_COMPONENT or INVALID_PARAMETER.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import DCSimError, ErrorCode, format_diagnostic_report


class ParsingError(DCSimError):
    """
    Raised for file-system problems or YAML/JSON syntax that prevents the
    document from loading at all.
    """

    def __init__(self, details: str, file_path: Optional[Path] = None):
        super().__init__(code=ErrorCode.INVALID_CIRCUIT, message=details)
        self.file_path = file_path

    def __str__(self):
        where = f" in file '{self.file_path}'" if self.file_path else ""
        return f"[{self.code}] Parsing error{where}: {self.message}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type=f"{self.code.value}: Netlist Parsing or File Error",
            details=self.message,
            suggestion="Ensure the file exists, is readable, and contains valid YAML or JSON.",
            context={'source_file': self.file_path} if self.file_path else {},
        )


class SchemaValidationError(DCSimError):
    """
    Raised when the document loads but does not conform to the netlist
    schema (missing `name` or `components`, wrong field types, unknown keys).
    """

    def __init__(self, errors: Dict[str, Any], file_path: Optional[Path] = None):
        self.errors = errors
        self.file_path = file_path
        error_lines = [f"  - In field '{k}': {v}" for k, v in sorted(errors.items())]
        super().__init__(
            code=ErrorCode.INVALID_CIRCUIT,
            message="Netlist schema validation failed:\n" + "\n".join(error_lines),
            details={"schema_errors": errors},
        )

    def get_diagnostic_report(self) -> str:
        error_list_str = "\n".join(f"  - Field '{k}': {v}" for k, v in sorted(self.errors.items()))
        details = (
            "The structure of the netlist does not conform to the required schema.\n"
            f"See details for {len(self.errors)} issue(s) below:\n\n{error_list_str}"
        )
        return format_diagnostic_report(
            error_type=f"{self.code.value}: Netlist Schema Validation Error",
            details=details,
            suggestion="Every netlist needs a non-empty 'name' and a non-empty 'components' list; each component needs 'id', 'type' and 'nodes'.",
            context={'source_file': self.file_path} if self.file_path else {},
        )
