# src/dcsim_core/parser/parser.py
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import cerberus
import yaml

from ..constants import DEFAULT_GROUND_NODE_ID
from .exceptions import ParsingError, SchemaValidationError
from .raw_data import ParsedCircuitDocument, ParsedComponentData

logger = logging.getLogger(__name__)


def _coerce_node_id(value: Any) -> Any:
    # YAML loads `nodes: [in, 0]` with an integer 0.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator adding the netlist's identifier rules."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['not_blank'] = {'schema': {'type': 'boolean'}}

    def _validate_not_blank(self, constraint: bool, field: str, value: Any):
        """
        Rejects strings that are empty after trimming whitespace.
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if constraint and isinstance(value, str) and not value.strip():
            self._error(field, "must not be blank.")


class NetlistParser:
    """
    Loads a netlist document (YAML or JSON file, or an in-memory mapping) and
    validates its structure against the netlist schema.

    Its sole responsibility is producing a `ParsedCircuitDocument`. It does not
    check component types, node counts or parameter values; that is the
    CircuitBuilder's job, so those problems are reported with the component
    they concern.
    """
    _node_rule = {"type": "string", "empty": False, "coerce": _coerce_node_id}
    _param_value_schema = {"type": ["string", "number", "boolean"], "nullable": True}

    _component_schema = {
        "id": {"type": "string", "required": True, "empty": False},
        "type": {"type": "string", "required": True, "empty": False},
        "name": {"type": "string", "required": False, "nullable": True},
        "nodes": {"type": "list", "required": True, "schema": _node_rule},
        "parameters": {"type": "dict", "required": False, "nullable": True, "keysrules": {"type": "string"}, "valuesrules": _param_value_schema},
    }

    _schema = {
        "name": {"type": "string", "required": True, "empty": False, "not_blank": True},
        "id": {"type": "string", "required": False, "empty": False, "not_blank": True},
        "description": {"type": "string", "required": False, "nullable": True},
        "ground": {"type": "string", "required": False, "empty": False, "not_blank": True, "coerce": _coerce_node_id, "default": DEFAULT_GROUND_NODE_ID},
        "components": {"type": "list", "required": True, "minlength": 1, "schema": {"type": "dict", "schema": _component_schema}},
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("NetlistParser initialized with strict structural validation rules.")

    def parse(self, source: Union[str, Path, Mapping[str, Any]]) -> ParsedCircuitDocument:
        """
        Parses a netlist from a file path or an already-loaded mapping.

        Raises:
            ParsingError: The file is missing, unreadable or not valid YAML/JSON.
            SchemaValidationError: The document does not match the schema.
        """
        if isinstance(source, Mapping):
            return self.parse_mapping(source)
        if isinstance(source, (str, Path)):
            return self.parse_file(source)
        raise ParsingError(details=f"Unsupported netlist source of type {type(source).__name__}.")

    def parse_file(self, path: Union[str, Path]) -> ParsedCircuitDocument:
        resolved_path = Path(path).resolve()
        logger.info(f"Parsing netlist file: {resolved_path}")
        content = self._load_yaml(resolved_path)
        return self.parse_mapping(content, source_path=resolved_path)

    def parse_text(self, text: str) -> ParsedCircuitDocument:
        """Parses netlist YAML/JSON given as a string."""
        try:
            content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML/JSON syntax: {e}") from e
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the netlist must be a mapping.")
        return self.parse_mapping(content)

    def parse_mapping(self, content: Mapping[str, Any], source_path: Optional[Path] = None) -> ParsedCircuitDocument:
        if not self._validator.validate(dict(content)):
            logger.error(f"Netlist schema validation failed: {self._validator.errors}")
            raise SchemaValidationError(self._validator.errors, source_path)

        validated_data = self._validator.document
        components = tuple(
            ParsedComponentData(
                instance_id=comp_data_raw["id"],
                component_type=comp_data_raw["type"],
                nodes=tuple(comp_data_raw["nodes"]),
                raw_parameters_dict=dict(comp_data_raw.get("parameters") or {}),
                name=comp_data_raw.get("name"),
                source_path=source_path,
            )
            for comp_data_raw in validated_data["components"]
        )

        document = ParsedCircuitDocument(
            circuit_name=validated_data["name"],
            ground_node_id=validated_data["ground"],
            components=components,
            circuit_id=validated_data.get("id"),
            description=validated_data.get("description"),
            source_path=source_path,
        )
        logger.debug(f"Parsed netlist '{document.circuit_name}' with {len(components)} component entries.")
        return document

    def _load_yaml(self, source: Path) -> Dict[str, Any]:
        """Loads and performs basic sanity checks on a YAML or JSON file."""
        if not source.is_file():
            raise ParsingError(details=f"Netlist file not found at path: {source}", file_path=source)
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except PermissionError as e:
            raise ParsingError(details=f"Permission denied when trying to read file: {e}", file_path=source) from e
        except yaml.YAMLError as e:
            raise ParsingError(details=f"Invalid YAML/JSON syntax: {e}", file_path=source) from e
        if content is None:
            raise ParsingError(details="The netlist file is empty or contains no valid content.", file_path=source)
        if not isinstance(content, dict):
            raise ParsingError(details="The root of the netlist file must be a mapping.", file_path=source)
        return content
