# tests/test_sweep.py
import numpy as np
import pytest

from dcsim_core.errors import DCSimError, ErrorCode
from dcsim_core.simulation import DCAnalysisOptions, DCSweepResult, run_dc_analysis, run_dc_sweep

from tests.conftest import make_current_source_circuit, make_voltage_divider


class TestDCSweep:

    def test_voltage_source_sweep(self, voltage_divider):
        values = [0.0, 2.5, 10.0, -4.0]
        sweep = run_dc_sweep(voltage_divider, "V1", values)
        assert isinstance(sweep, DCSweepResult)
        assert len(sweep) == 4
        assert sweep.source_id == "V1"
        np.testing.assert_array_equal(sweep.values, values)
        np.testing.assert_allclose(sweep.node_voltage_trace("mid"), np.array(values) / 2.0, atol=1e-12)
        np.testing.assert_allclose(sweep.current_trace("R2"), np.array(values) / 2000.0, atol=1e-15)

    def test_current_source_sweep(self, current_source_circuit):
        sweep = run_dc_sweep(current_source_circuit, "I1", np.linspace(-1e-3, 1e-3, 5))
        np.testing.assert_allclose(sweep.node_voltage_trace("n1"), np.linspace(-1.0, 1.0, 5), atol=1e-12)
        np.testing.assert_allclose(sweep.current_trace("I1"), np.linspace(-1e-3, 1e-3, 5))

    def test_points_match_individual_analyses(self):
        sweep = run_dc_sweep(make_voltage_divider(), "V1", [3.0, 7.0])
        for value, point in zip(sweep.values, sweep.operating_points):
            single = run_dc_analysis(make_voltage_divider(v=value))
            np.testing.assert_allclose(point.solution, single.solution, rtol=1e-14, atol=0.0)

    def test_powers_use_swept_value(self, voltage_divider):
        point = run_dc_sweep(voltage_divider, "V1", [4.0]).operating_points[0]
        assert point.component_powers["V1"] == pytest.approx(-4.0 * 4.0 / 2000.0)
        assert point.power_balance() == pytest.approx(0.0, abs=1e-15)

    def test_swept_current_source_reports_swept_value(self):
        point = run_dc_sweep(make_current_source_circuit(), "I1", [5e-3]).operating_points[0]
        assert point.current("I1") == 5e-3
        assert point.power_balance() == pytest.approx(0.0, abs=1e-15)

    def test_newton_strategy_sweep(self, voltage_divider):
        sweep = run_dc_sweep(voltage_divider, "V1", [0.0, 6.0], DCAnalysisOptions(strategy="newton"))
        assert sweep.operating_points[0].convergence.iterations == 0
        assert sweep.operating_points[1].voltage("mid") == pytest.approx(3.0)
        direct = run_dc_sweep(voltage_divider, "V1", [0.0, 6.0], DCAnalysisOptions(strategy="direct"))
        np.testing.assert_array_equal(sweep.node_voltage_trace("mid"), direct.node_voltage_trace("mid"))

    def test_circuit_is_unchanged(self, voltage_divider):
        run_dc_sweep(voltage_divider, "V1", [1.0, 2.0])
        assert voltage_divider.get_component("V1").voltage == 10.0

    @pytest.mark.parametrize("source_id, values", [
        ("R1", [1.0]),
        ("missing", [1.0]),
        ("V1", []),
        ("V1", [1.0, float("inf")]),
    ])
    def test_invalid_sweeps(self, voltage_divider, source_id, values):
        with pytest.raises(DCSimError) as exc_info:
            run_dc_sweep(voltage_divider, source_id, values)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER

    def test_topology_errors_still_apply(self, floating_island_circuit):
        with pytest.raises(DCSimError) as exc_info:
            run_dc_sweep(floating_island_circuit, "V1", [1.0])
        assert exc_info.value.code == ErrorCode.FLOATING_NODE
