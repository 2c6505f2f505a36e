"""Tests for wizard gating and state-to-input mapping."""

import pytest

import app


def wizard_state(**overrides):
    state = {
        "currency": "INR",
        "num_steps": 2,
        "reactions": ["L-L", "G-G", "", ""],
        "volume_tons": 10.0,
        "ksm_cost_inr": 5000.0,
        "faas_percent": 50,
    }
    state.update(overrides)
    return state


def test_basics_gate():
    assert app.can_advance(1, wizard_state())
    assert not app.can_advance(1, wizard_state(volume_tons=0))


def test_reactions_gate_requires_every_active_step():
    assert app.can_advance(2, wizard_state())
    assert not app.can_advance(2, wizard_state(reactions=["L-L", "", "", ""]))
    # Steps beyond the selected count don't matter
    assert app.can_advance(2, wizard_state(num_steps=1, reactions=["L-L", "", "", ""]))


@pytest.mark.parametrize("ksm,expected", [
    (5000.0, True),
    (1000.0, True),
    (999.0, False),
    (0.0, False),
])
def test_economics_gate(ksm, expected):
    assert app.can_advance(3, wizard_state(ksm_cost_inr=ksm)) is expected


def test_results_step_always_open():
    assert app.can_advance(4, wizard_state())


def test_current_output_recomputes_from_state():
    output = app.current_output(wizard_state())
    assert output.total_feasibility_cost_inr == 1_300_000
    assert output.volume_discount_rate == 0.07


def test_current_output_none_while_incomplete():
    assert app.current_output(wizard_state(ksm_cost_inr=0.0)) is None
