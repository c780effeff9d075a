"""
Tests for sensitivity adjustments.
"""

import pytest

from investpro.calculations.appraisal import run_appraisal
from investpro.calculations.sensitivity import (
    SENSITIVITY_LEVELS,
    SENSITIVITY_OPTIONS,
    apply_sensitivity,
    investment_factor,
    return_factor,
    sensitivity_matrix,
)


class TestApplySensitivity:
    """Test the return/investment stress transform."""

    def test_identity(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, 0, 0)
        assert adjusted == base_inputs
        assert run_appraisal(adjusted) == run_appraisal(base_inputs)

    def test_return_boost(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, return_sensitivity=10)
        assert adjusted.yearly_data[1].return_ == pytest.approx(44000)
        assert adjusted.yearly_data[5].return_ == pytest.approx(66000)
        assert adjusted.yearly_data[0].investment == pytest.approx(100000)

    def test_return_lower(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, return_sensitivity=-20)
        assert adjusted.yearly_data[1].return_ == pytest.approx(32000)

    def test_positive_investment_sensitivity_reduces_investment(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, investment_sensitivity=10)
        assert adjusted.yearly_data[0].investment == pytest.approx(90000)

    def test_negative_investment_sensitivity_raises_investment(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, investment_sensitivity=-15)
        assert adjusted.yearly_data[0].investment == pytest.approx(115000)

    def test_write_offs_and_rates_unchanged(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, 20, 20)
        assert [y.write_off for y in adjusted.yearly_data] == [
            y.write_off for y in base_inputs.yearly_data
        ]
        assert adjusted.cost_of_capital == base_inputs.cost_of_capital
        assert adjusted.tax_rate == base_inputs.tax_rate
        assert adjusted.inflation_rate == base_inputs.inflation_rate

    def test_year_labels_unchanged(self, base_inputs):
        adjusted = apply_sensitivity(base_inputs, 5, -5)
        assert [y.year for y in adjusted.yearly_data] == [0, 1, 2, 3, 4, 5]

    def test_base_not_modified(self, base_inputs):
        apply_sensitivity(base_inputs, 20, 20)
        assert base_inputs.yearly_data[0].investment == 100000
        assert base_inputs.yearly_data[1].return_ == 40000

    def test_both_knobs_improve_npv(self, base_inputs):
        base_npv = run_appraisal(base_inputs).npv
        assert run_appraisal(apply_sensitivity(base_inputs, 10, 0)).npv > base_npv
        assert run_appraisal(apply_sensitivity(base_inputs, 0, 10)).npv > base_npv

    def test_investment_saving_npv(self, base_inputs):
        """A 10% saving on a year-0 investment adds exactly 10,000 to NPV."""
        base_npv = run_appraisal(base_inputs).npv
        saving_npv = run_appraisal(apply_sensitivity(base_inputs, 0, 10)).npv
        assert saving_npv - base_npv == pytest.approx(10000)

    @pytest.mark.parametrize("level", [7, -25, 25, 1])
    def test_invalid_level(self, base_inputs, level):
        with pytest.raises(ValueError):
            apply_sensitivity(base_inputs, return_sensitivity=level)
        with pytest.raises(ValueError):
            apply_sensitivity(base_inputs, investment_sensitivity=level)

    def test_factors(self):
        assert return_factor(15) == pytest.approx(1.15)
        assert investment_factor(15) == pytest.approx(0.85)
        assert return_factor(-5) == pytest.approx(0.95)
        assert investment_factor(-5) == pytest.approx(1.05)


class TestSensitivityOptions:
    """Test the selectable sensitivity levels."""

    def test_levels(self):
        assert SENSITIVITY_LEVELS == (-20, -15, -10, -5, 0, 5, 10, 15, 20)

    def test_labels(self):
        labels = [o.label for o in SENSITIVITY_OPTIONS]
        assert labels[0] == "20% Lower"
        assert labels[4] == "Base Case"
        assert labels[-1] == "20% Boost"

    def test_kinds(self):
        kinds = {o.value: o.kind for o in SENSITIVITY_OPTIONS}
        assert kinds[-10] == "lower"
        assert kinds[0] == "base"
        assert kinds[10] == "boost"


class TestSensitivityMatrix:
    """Test the full grid of sensitivity pairs."""

    @pytest.mark.slow
    def test_matrix_size(self, base_inputs):
        rows = sensitivity_matrix(base_inputs)
        assert len(rows) == len(SENSITIVITY_LEVELS) ** 2

    @pytest.mark.slow
    def test_matrix_base_cell(self, base_inputs):
        rows = sensitivity_matrix(base_inputs)
        base_row = next(
            r for r in rows
            if r["return_sensitivity"] == 0 and r["investment_sensitivity"] == 0
        )
        results = run_appraisal(base_inputs)
        assert base_row["npv"] == results.npv
        assert base_row["irr"] == results.irr
        assert base_row["cash_payback"] == results.cash_payback

    def test_matrix_order(self, base_inputs):
        rows = sensitivity_matrix(base_inputs, levels=(-5, 0, 5))
        pairs = [(r["return_sensitivity"], r["investment_sensitivity"]) for r in rows]
        assert pairs == [
            (-5, -5), (-5, 0), (-5, 5),
            (0, -5), (0, 0), (0, 5),
            (5, -5), (5, 0), (5, 5),
        ]

    def test_npv_increases_along_both_axes(self, base_inputs):
        rows = sensitivity_matrix(base_inputs, levels=(-10, 0, 10))
        npv = {(r["return_sensitivity"], r["investment_sensitivity"]): r["npv"] for r in rows}
        assert npv[(-10, 0)] < npv[(0, 0)] < npv[(10, 0)]
        assert npv[(0, -10)] < npv[(0, 0)] < npv[(0, 10)]
