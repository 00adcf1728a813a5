# tests/test_errors.py
import io
import logging

import pytest

from dcsim_core.errors import (
    CircuitBuildError,
    DCSimError,
    DCSimUserError,
    Diagnosable,
    DiagnosableError,
    ErrorCode,
    SimulationRunError,
    format_diagnostic_report,
)
from dcsim_core.log_config import setup_logging
from dcsim_core.simulation.exceptions import ConvergenceError, SingularMatrixError
from dcsim_core.units import to_base_magnitude


class TestErrorTaxonomy:

    def test_codes(self):
        assert {c.value for c in ErrorCode} == {
            "INVALID_COMPONENT", "INVALID_CIRCUIT", "NO_GROUND", "FLOATING_NODE",
            "SINGULAR_MATRIX", "CONVERGENCE_FAILED", "INVALID_PARAMETER", "UNSUPPORTED_ANALYSIS",
        }

    def test_dcsim_error_fields(self):
        err = DCSimError(ErrorCode.NO_GROUND, "no ground", node_id="0")
        assert str(err) == "[NO_GROUND] no ground"
        assert err.args == ("no ground",)
        assert err.context == {"nodeId": "0"}
        assert err.details == {}
        assert isinstance(err, DiagnosableError)
        assert isinstance(err, Diagnosable)

    def test_diagnostic_report(self):
        err = DCSimError(ErrorCode.INVALID_PARAMETER, "bad value", component_id="R1")
        report = err.get_diagnostic_report()
        assert "Error Type:     INVALID_PARAMETER" in report
        assert "Component:      R1" in report
        assert "  bad value" in report
        assert "Suggestion:" in report

    def test_report_without_suggestion(self):
        report = format_diagnostic_report("X", "line one\nline two", "", {"source_file": "a.yaml"})
        assert "Suggestion:" not in report
        assert "Source File:    a.yaml" in report
        assert "  line two" in report

    def test_subclasses_keep_code(self):
        singular = SingularMatrixError("singular", pivot_index=3, pivot_magnitude=0.0)
        assert singular.code == ErrorCode.SINGULAR_MATRIX
        assert singular.details == {"pivot_index": 3, "pivot_magnitude": 0.0}
        diverged = ConvergenceError("no", iterations=4, final_residual_norm=1.0, final_update_norm=0.5)
        assert diverged.code == ErrorCode.CONVERGENCE_FAILED
        assert diverged.details["final_update_norm"] == 0.5

    def test_user_facing_errors(self):
        assert issubclass(CircuitBuildError, DCSimUserError)
        assert issubclass(SimulationRunError, DCSimUserError)
        assert not issubclass(CircuitBuildError, DCSimError)

    def test_error_can_be_raised_and_caught_by_code(self):
        with pytest.raises(DCSimError) as exc_info:
            raise SingularMatrixError("singular")
        assert exc_info.value.code == ErrorCode.SINGULAR_MATRIX


class TestUnits:

    @pytest.mark.parametrize("value, unit, expected", [
        (10, "ohm", 10.0),
        ("1 kohm", "ohm", 1000.0),
        ("3.3 V", "volt", 3.3),
        ("250 uA", "ampere", 250e-6),
        ("42", "volt", 42.0),
    ])
    def test_conversion(self, value, unit, expected):
        assert to_base_magnitude(value, unit, "p") == pytest.approx(expected)

    @pytest.mark.parametrize("value", [True, [1], "1 kg", "seven ohm", "  "])
    def test_invalid(self, value):
        with pytest.raises(DCSimError) as exc_info:
            to_base_magnitude(value, "ohm", "resistance", component_id="R1")
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER
        assert exc_info.value.component_id == "R1"


class TestLogging:

    def test_setup_logging_installs_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            stream = io.StringIO()
            setup_logging("debug", stream=stream)
            setup_logging(logging.DEBUG, stream=stream)
            own = [h for h in root.handlers if getattr(h, "stream", None) is stream]
            assert len(own) == 1
            logging.getLogger("dcsim_core.test").info("hello solver")
            assert "[INFO ] [dcsim_core.test] hello solver" in stream.getvalue()
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
