"""Tests for the FaaS ROI calculation engine."""

import pytest

from core.roi_calculator import (
    CalculatorInput,
    DEFAULT_ASSUMPTIONS,
    InvalidInput,
    ROIAssumptions,
    UndefinedResult,
    compute,
    feasibility_cost,
    meets_min_digits,
    quick_roi,
    volume_discount_rate,
    volume_multiplier,
)


def make_input(**overrides) -> CalculatorInput:
    values = dict(
        currency="INR",
        num_process_steps=1,
        reaction_types=["L-L"],
        monthly_volume_tons=10,
        ksm_cost_per_kg_inr=5000,
        faas_fee_percent=50,
    )
    values.update(overrides)
    return CalculatorInput(**values)


class TestReferenceScenario:
    """1 step, L-L, 10 tons/month, 5000 INR/kg KSM, 50% FaaS fee."""

    @pytest.fixture
    def output(self):
        return compute(make_input())

    def test_per_kg_figures(self, output):
        assert output.annual_volume_tons == 120
        assert output.flownetics_cost_per_kg_inr == pytest.approx(3500)
        assert output.savings_per_kg_inr == pytest.approx(1500)
        assert output.faas_fee_per_kg_inr == pytest.approx(750)

    def test_annual_figures(self, output):
        assert output.annual_savings_inr == pytest.approx(180_000_000)
        assert output.annual_faas_fees_inr == pytest.approx(90_000_000)
        assert output.net_annual_savings_after_faas_inr == pytest.approx(90_000_000)

    def test_investment_figures(self, output):
        assert output.total_feasibility_cost_inr == 400_000
        assert output.volume_discount_rate == 0
        assert output.part_a_inr == pytest.approx(400_000)
        assert output.part_bc_inr == pytest.approx(800_000)
        assert output.volume_multiplier == 2
        assert output.refundable_deposit_inr == pytest.approx(1_600_000)
        assert output.interest_on_deposit_inr == pytest.approx(647_884.8)
        assert output.total_client_cost_inr == pytest.approx(1_847_884.8)

    def test_roi_months(self, output):
        assert output.roi_months == pytest.approx(1_847_884.8 / 90_000_000 * 12)
        assert output.roi_months == pytest.approx(0.2464, abs=1e-4)
        assert output.has_roi
        assert output.payback_months() == output.roi_months

    def test_no_warnings(self, output):
        assert output.warnings == []

    def test_quick_roi_matches(self, output):
        assert quick_roi(monthly_volume_tons=10, ksm_cost_per_kg_inr=5000) == output


class TestInvariants:

    @pytest.mark.parametrize("steps,reactions,volume,ksm,fee", [
        (1, ["L-L"], 10, 5000, 50),
        (2, ["L-G", "G-G"], 15.5, 12345.67, 40),
        (3, ["L-L+C", "L-L", "G-G"], 33, 1000, 60),
        (4, ["G-G", "G-G", "L-G", "L-L"], 99, 87654, 55),
        (2, ["", "L-L"], 0.5, 2500, 45),
    ])
    def test_consistency_and_non_negativity(self, steps, reactions, volume, ksm, fee):
        output = compute(make_input(
            num_process_steps=steps,
            reaction_types=reactions,
            monthly_volume_tons=volume,
            ksm_cost_per_kg_inr=ksm,
            faas_fee_percent=fee,
        ))
        assert output.net_annual_savings_after_faas_inr == (
            output.annual_savings_inr - output.annual_faas_fees_inr
        )
        for value in (
            output.annual_savings_inr,
            output.part_a_inr,
            output.part_bc_inr,
            output.refundable_deposit_inr,
            output.total_client_cost_inr,
        ):
            assert value >= 0

    def test_deterministic(self):
        inputs = make_input(num_process_steps=3, reaction_types=["L-G", "L-L", "G-G"], monthly_volume_tons=27)
        assert compute(inputs) == compute(inputs)

    def test_savings_per_kg_monotonic_in_ksm_cost(self):
        costs = [1000, 1500, 4999.99, 5000, 20000, 1_000_000]
        savings = [compute(make_input(ksm_cost_per_kg_inr=c)).savings_per_kg_inr for c in costs]
        assert savings == sorted(savings)

    def test_input_not_mutated(self):
        inputs = make_input(num_process_steps=2, reaction_types=["L-L", "L-G", "G-G"])
        compute(inputs)
        assert inputs.reaction_types == ["L-L", "L-G", "G-G"]


class TestVolumeMultiplier:

    @pytest.mark.parametrize("volume,expected", [
        (1, 2.0),
        (10, 2.0),
        (10.0001, 2.5),
        (20, 2.5),
        (20.5, 3.0),
        (30, 3.0),
        (31, 4.0),
        (40, 4.0),
        (40.01, 5.0),
        (100, 5.0),
    ])
    def test_tiers_are_inclusive(self, volume, expected):
        assert volume_multiplier(volume) == expected

    def test_non_positive_volume_uses_lowest_tier(self):
        assert volume_multiplier(0) == 2.0
        assert volume_multiplier(-5) == 2.0

    def test_boundary_flows_into_deposit(self):
        at_ten = compute(make_input(monthly_volume_tons=10))
        above_ten = compute(make_input(monthly_volume_tons=10.0001))
        assert at_ten.refundable_deposit_inr == pytest.approx(800_000 * 2)
        assert above_ten.refundable_deposit_inr == pytest.approx(800_000 * 2.5)


class TestFeasibilityAndDiscount:

    @pytest.mark.parametrize("steps,rate", [(1, 0.0), (2, 0.07), (3, 0.11), (4, 0.15)])
    def test_discount_by_steps(self, steps, rate):
        assert volume_discount_rate(steps) == rate

    def test_unknown_step_count_has_no_discount(self):
        assert volume_discount_rate(7) == 0.0

    def test_four_gas_gas_steps_discounted_before_part_a(self):
        output = compute(make_input(num_process_steps=4, reaction_types=["G-G"] * 4))
        assert output.total_feasibility_cost_inr == 3_600_000
        assert output.part_a_inr == pytest.approx(3_600_000 * 0.85)
        assert output.part_bc_inr == pytest.approx(3_600_000 * 0.85 * 2)

    def test_unrecognized_reaction_costs_nothing(self):
        assert feasibility_cost(["L-L", "bogus", "", "G-G"]) == 1_300_000

    def test_reactions_beyond_step_count_ignored(self):
        output = compute(make_input(num_process_steps=2, reaction_types=["L-L", "L-G", "G-G", "G-G"]))
        assert output.total_feasibility_cost_inr == 1_150_000
        assert any("ignored" in w for w in output.warnings)

    def test_missing_reaction_warns(self):
        output = compute(make_input(num_process_steps=2, reaction_types=["L-L"]))
        assert output.total_feasibility_cost_inr == 400_000
        assert any("step(s) 2" in w for w in output.warnings)


class TestUndefinedRoi:

    def test_no_net_savings_gives_zero_roi(self):
        assumptions = ROIAssumptions(flow_cost_ratio=1.0)
        output = compute(make_input(), assumptions)
        assert output.net_annual_savings_after_faas_inr == 0
        assert output.roi_months == 0
        assert not output.has_roi
        with pytest.raises(UndefinedResult):
            output.payback_months()

    def test_negative_net_savings_gives_zero_roi(self):
        output = compute(make_input(), ROIAssumptions(flow_cost_ratio=1.2))
        assert output.net_annual_savings_after_faas_inr < 0
        assert output.roi_months == 0
        assert any("undefined" in w for w in output.warnings)

    def test_no_reactions_selected_gives_zero_roi(self):
        output = compute(make_input(reaction_types=[""]))
        assert output.total_client_cost_inr == 0
        assert output.roi_months == 0
        assert output.annual_roi_pct == 0


class TestValidation:

    @pytest.mark.parametrize("overrides,field", [
        ({"currency": "GBP"}, "currency"),
        ({"num_process_steps": 0}, "num_process_steps"),
        ({"num_process_steps": 5}, "num_process_steps"),
        ({"num_process_steps": 2.5}, "num_process_steps"),
        ({"monthly_volume_tons": 0}, "monthly_volume_tons"),
        ({"monthly_volume_tons": -1}, "monthly_volume_tons"),
        ({"ksm_cost_per_kg_inr": 0}, "ksm_cost_per_kg_inr"),
        ({"faas_fee_percent": 39}, "faas_fee_percent"),
        ({"faas_fee_percent": 61}, "faas_fee_percent"),
        ({"reaction_types": ["L-L"] * 5}, "reaction_types"),
        ({"reaction_types": None}, "reaction_types"),
        ({"reaction_types": "L-L"}, "reaction_types"),
        ({"reaction_types": [None]}, "reaction_types"),
        ({"monthly_volume_tons": float("nan")}, "monthly_volume_tons"),
        ({"monthly_volume_tons": float("inf")}, "monthly_volume_tons"),
        ({"monthly_volume_tons": "10"}, "monthly_volume_tons"),
        ({"monthly_volume_tons": True}, "monthly_volume_tons"),
        ({"monthly_volume_tons": None}, "monthly_volume_tons"),
        ({"ksm_cost_per_kg_inr": float("nan")}, "ksm_cost_per_kg_inr"),
        ({"ksm_cost_per_kg_inr": float("inf")}, "ksm_cost_per_kg_inr"),
        ({"ksm_cost_per_kg_inr": "5000"}, "ksm_cost_per_kg_inr"),
        ({"faas_fee_percent": float("nan")}, "faas_fee_percent"),
        ({"faas_fee_percent": "50"}, "faas_fee_percent"),
    ])
    def test_invalid_input_raised(self, overrides, field):
        with pytest.raises(InvalidInput) as exc_info:
            compute(make_input(**overrides))
        assert exc_info.value.field == field
        assert isinstance(exc_info.value, ValueError)

    def test_validate_collects_every_error(self):
        errors = make_input(monthly_volume_tons=0, ksm_cost_per_kg_inr=-1).validate()
        assert [e.field for e in errors] == ["monthly_volume_tons", "ksm_cost_per_kg_inr"]

    def test_non_finite_reason(self):
        errors = make_input(ksm_cost_per_kg_inr=float("nan")).validate()
        assert [e.reason for e in errors] == ["must be a finite number"]

    def test_wrong_types_do_not_raise_type_error(self):
        errors = make_input(
            reaction_types=None, monthly_volume_tons="10", faas_fee_percent="50"
        ).validate()
        assert [e.field for e in errors] == [
            "reaction_types", "monthly_volume_tons", "faas_fee_percent",
        ]

    def test_fee_bounds_inclusive(self):
        compute(make_input(faas_fee_percent=40))
        compute(make_input(faas_fee_percent=60))


class TestMinDigits:

    @pytest.mark.parametrize("value,expected", [
        (5000, True),
        (5000.0, True),
        (999, False),
        (999.0, False),
        (99.99, True),
        ("1234", True),
        (None, False),
    ])
    def test_digit_rule(self, value, expected):
        assert meets_min_digits(value) is expected

    def test_short_ksm_cost_warns(self):
        output = compute(make_input(ksm_cost_per_kg_inr=500))
        assert any("fewer than 4 digits" in w for w in output.warnings)


def test_assumptions_defaults():
    assert DEFAULT_ASSUMPTIONS.deposit_interest_factor == pytest.approx(0.404928)
    assert DEFAULT_ASSUMPTIONS.reaction_costs_inr["L-L+C"] == 550_000


def test_format_summary_mentions_key_figures():
    summary = compute(make_input()).format_summary()
    assert "FLOWNETICS FAAS ROI ANALYSIS" in summary
    assert "₹1,847,884.80" in summary
    assert "0.2 months" in summary
