# tests/test_parser.py
import json
from pathlib import Path

import pytest
import yaml

from dcsim_core.parser import (
    NetlistParser,
    ParsedCircuitDocument,
    ParsedComponentData,
    ParsingError,
    SchemaValidationError,
)
from dcsim_core.errors import ErrorCode


DIVIDER_YAML = """
name: Divider
description: 10 V across two equal resistors
components:
  - id: V1
    type: voltage_source
    nodes: [in, 0]
    parameters: {voltage: "10 V", sourceType: dc}
  - id: R1
    type: resistor
    nodes: [in, mid]
    parameters: {resistance: "1 kohm"}
  - id: R2
    type: resistor
    nodes: [mid, 0]
    parameters: {resistance: 1000}
"""


def write_netlist(tmp_path: Path, text: str, filename: str = "netlist.yaml") -> Path:
    path = tmp_path / filename
    path.write_text(text)
    return path


class TestNetlistParserValid:

    def test_parse_yaml_file(self, tmp_path, netlist_parser):
        path = write_netlist(tmp_path, DIVIDER_YAML)
        document = netlist_parser.parse(path)
        assert isinstance(document, ParsedCircuitDocument)
        assert document.circuit_name == "Divider"
        assert document.ground_node_id == "0"
        assert document.source_path == path.resolve()
        assert [c.instance_id for c in document.components] == ["V1", "R1", "R2"]

    def test_integer_node_ids_become_strings(self, tmp_path, netlist_parser):
        document = netlist_parser.parse(write_netlist(tmp_path, DIVIDER_YAML))
        assert document.components[0].nodes == ("in", "0")

    def test_component_entry_fields(self, tmp_path, netlist_parser):
        document = netlist_parser.parse(str(write_netlist(tmp_path, DIVIDER_YAML)))
        v1 = document.components[0]
        assert isinstance(v1, ParsedComponentData)
        assert v1.component_type == "voltage_source"
        assert v1.raw_parameters_dict == {"voltage": "10 V", "sourceType": "dc"}
        assert v1.name is None

    def test_parse_json_file(self, tmp_path, netlist_parser, divider_netlist):
        path = write_netlist(tmp_path, json.dumps(divider_netlist), "divider.json")
        document = netlist_parser.parse(path)
        assert document.description == "10 V across two equal resistors"
        assert document.components[3].component_type == "ground"

    def test_parse_mapping(self, netlist_parser, divider_netlist):
        document = netlist_parser.parse(divider_netlist)
        assert document.source_path is None
        assert document.components[1].name == "Top"

    def test_parse_text(self, netlist_parser):
        document = netlist_parser.parse_text(DIVIDER_YAML)
        assert len(document.components) == 3

    def test_custom_ground_and_id(self, netlist_parser):
        document = netlist_parser.parse({
            "name": "C",
            "id": "circuit-7",
            "ground": "gnd",
            "components": [{"id": "R1", "type": "resistor", "nodes": ["a", "gnd"], "parameters": {"resistance": 1}}],
        })
        assert document.circuit_id == "circuit-7"
        assert document.ground_node_id == "gnd"

    def test_missing_parameters_section(self, netlist_parser):
        document = netlist_parser.parse({
            "name": "C",
            "components": [{"id": "G", "type": "ground", "nodes": ["0"]}],
        })
        assert document.components[0].raw_parameters_dict == {}


class TestNetlistParserErrors:

    def test_missing_file(self, tmp_path, netlist_parser):
        with pytest.raises(ParsingError) as exc_info:
            netlist_parser.parse(tmp_path / "nope.yaml")
        assert exc_info.value.code == ErrorCode.INVALID_CIRCUIT
        assert "not found" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path, netlist_parser):
        with pytest.raises(ParsingError):
            netlist_parser.parse(write_netlist(tmp_path, "name: [unclosed\n"))

    def test_empty_file(self, tmp_path, netlist_parser):
        with pytest.raises(ParsingError) as exc_info:
            netlist_parser.parse(write_netlist(tmp_path, ""))
        assert "empty" in exc_info.value.message

    def test_non_mapping_root(self, tmp_path, netlist_parser):
        with pytest.raises(ParsingError):
            netlist_parser.parse(write_netlist(tmp_path, "- just\n- a list\n"))

    def test_unsupported_source_type(self, netlist_parser):
        with pytest.raises(ParsingError):
            netlist_parser.parse(42)

    @pytest.mark.parametrize("mutate, field", [
        (lambda d: d.pop("name"), "name"),
        (lambda d: d.update(name="   "), "name"),
        (lambda d: d.update(components=[]), "components"),
        (lambda d: d.pop("components"), "components"),
        (lambda d: d.update(extra_key=True), "extra_key"),
        (lambda d: d["components"][0].pop("type"), "components"),
        (lambda d: d["components"][0].update(nodes="in"), "components"),
        (lambda d: d["components"][1]["parameters"].update(resistance=[1, 2]), "components"),
    ])
    def test_schema_violations(self, netlist_parser, divider_netlist, mutate, field):
        mutate(divider_netlist)
        with pytest.raises(SchemaValidationError) as exc_info:
            netlist_parser.parse(divider_netlist)
        assert exc_info.value.code == ErrorCode.INVALID_CIRCUIT
        assert field in exc_info.value.errors

    def test_schema_error_report_names_file(self, tmp_path, netlist_parser):
        path = write_netlist(tmp_path, yaml.safe_dump({"name": "NoComponents"}))
        with pytest.raises(SchemaValidationError) as exc_info:
            netlist_parser.parse(path)
        report = exc_info.value.get_diagnostic_report()
        assert "Netlist Schema Validation Error" in report
        assert str(path.resolve()) in report
