"""
Flownetics FaaS ROI Calculator (Streamlit)

Wizard flow:
- Basic Info: currency, process steps, monthly volume
- Process Details: reaction type per step
- Economics: current KSM cost and FaaS fee
- Results & ROI: dashboard, charts, report download

All calculations go through core.roi_calculator.compute; the output is
recomputed from the session inputs on every rerun.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import streamlit as st

from config import flownetics as config
from core import currency as fx
from core import exports, report
from core.roi_calculator import (
    CalculatorInput,
    CalculatorOutput,
    compute,
    feasibility_cost,
    meets_min_digits,
)
from visualization.roi_charts import render_roi_charts

logger = logging.getLogger(__name__)

APP_TITLE = "Flownetics FaaS ROI Calculator"
APP_TAGLINE = "Step-by-step analysis of Factory-as-a-Service savings and payback."

WIZARD_STEPS = {
    1: "Basic Info",
    2: "Process Details",
    3: "Economics",
    4: "Results & ROI",
}

REACTION_OPTIONS = [config.NO_REACTION] + list(config.REACTION_COSTS_INR)


# ===========================
# Session State Management
# ===========================

def init_session_state():
    """Initialize session state with calculator defaults."""
    defaults = {
        "wizard_step": 1,
        "currency": config.DEFAULT_CURRENCY,
        "num_steps": config.DEFAULT_PROCESS_STEPS,
        "reactions": [config.NO_REACTION] * config.MAX_PROCESS_STEPS,
        "volume_tons": config.DEFAULT_VOLUME_TONS,
        "ksm_cost_inr": config.DEFAULT_KSM_COST_INR,
        "faas_percent": config.DEFAULT_FAAS_FEE_PERCENT,
        "download_name": "",
        "download_email": "",
        "download_record": None,
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def discard_changes_and_home():
    """Reset session to defaults and return to Basic Info."""
    st.session_state.clear()
    init_session_state()
    st.session_state["wizard_step"] = 1


def inputs_from_state(state: Mapping) -> CalculatorInput:
    return CalculatorInput(
        currency=state["currency"],
        num_process_steps=int(state["num_steps"]),
        reaction_types=list(state["reactions"]),
        monthly_volume_tons=float(state["volume_tons"]),
        ksm_cost_per_kg_inr=float(state["ksm_cost_inr"]),
        faas_fee_percent=int(state["faas_percent"]),
    )


def current_output(state: Mapping) -> Optional[CalculatorOutput]:
    """Compute results from scratch; None while the inputs are incomplete."""
    try:
        return compute(inputs_from_state(state))
    except ValueError as e:
        logger.debug("Inputs not ready for calculation: %s", e)
        return None


# ===========================
# Navigation
# ===========================

def render_stepper():
    """Show wizard progress."""
    current = st.session_state["wizard_step"]
    total_steps = len(WIZARD_STEPS)
    progress_pct = int((current - 1) / (total_steps - 1) * 100) if total_steps > 1 else 0

    top_cols = st.columns([3, 1])
    with top_cols[0]:
        st.markdown(
            f"<div style='font-size:20px;font-weight:700;'>Step {current} of {total_steps}</div>",
            unsafe_allow_html=True,
        )
    with top_cols[1]:
        st.progress(progress_pct / 100)

    cols = st.columns(total_steps)
    for idx, (step, label) in enumerate(WIZARD_STEPS.items()):
        state = "current" if step == current else "done" if step < current else "pending"
        color = {"current": "#e07742", "done": "#6ec97a", "pending": "#9ca3af"}[state]
        weight = "700" if state == "current" else "500"
        cols[idx].markdown(
            f"<div style='text-align:center;color:{color};font-weight:{weight};'>"
            f"{step}. {label}</div>",
            unsafe_allow_html=True,
        )


def go_to_step(step: int):
    """Update wizard step within bounds."""
    step = max(1, min(step, len(WIZARD_STEPS)))
    st.session_state["wizard_step"] = step


def can_advance(step: int, state: Optional[Mapping] = None) -> bool:
    """Gate Next navigation so steps aren't skipped."""
    state = st.session_state if state is None else state
    if step == 1:
        return state.get("volume_tons", 0) > 0 and state.get("num_steps", 0) > 0
    if step == 2:
        num_steps = int(state.get("num_steps", 0))
        reactions = list(state.get("reactions", []))[:num_steps]
        return len(reactions) == num_steps and all(r != config.NO_REACTION for r in reactions)
    if step == 3:
        ksm_cost = state.get("ksm_cost_inr", 0) or 0
        return ksm_cost > 0 and meets_min_digits(ksm_cost)
    return True


# ===========================
# Step 1: Basic Info
# ===========================

def render_step_basics():
    st.subheader("Step 1 — Basic Information")
    st.caption("Let's start with your production requirements.")

    cols = st.columns(2)
    with cols[0]:
        currencies = list(config.FX_RATES)
        st.session_state["currency"] = st.selectbox(
            "Currency",
            currencies,
            index=currencies.index(st.session_state["currency"]),
            format_func=lambda c: f"{c} ({config.CURRENCY_SYMBOLS[c]})",
        )
    with cols[1]:
        step_options = list(range(config.MIN_PROCESS_STEPS, config.MAX_PROCESS_STEPS + 1))
        st.session_state["num_steps"] = st.selectbox(
            "Number of process steps",
            step_options,
            index=step_options.index(int(st.session_state["num_steps"])),
            format_func=lambda n: f"{n} Step{'s' if n > 1 else ''}",
        )

    st.session_state["volume_tons"] = st.slider(
        "Monthly production volume (tons)",
        min_value=float(config.MIN_VOLUME_TONS),
        max_value=float(config.MAX_VOLUME_TONS),
        value=float(st.session_state["volume_tons"]),
        step=1.0,
    )
    st.info(
        f"**Annual production:** {st.session_state['volume_tons'] * 12:,.0f} tons/year "
        f"(based on {st.session_state['volume_tons']:,.0f} tons per month)"
    )


# ===========================
# Step 2: Process Details
# ===========================

def render_step_reactions():
    st.subheader("Step 2 — Process Configuration")
    st.caption("Select the reaction type for each step of your process.")

    currency = st.session_state["currency"]
    num_steps = int(st.session_state["num_steps"])
    reactions = list(st.session_state["reactions"])

    cols = st.columns(2)
    for idx in range(config.MAX_PROCESS_STEPS):
        with cols[idx % 2]:
            current = reactions[idx] if reactions[idx] in REACTION_OPTIONS else config.NO_REACTION
            reactions[idx] = st.selectbox(
                f"Step {idx + 1} reaction type",
                REACTION_OPTIONS,
                index=REACTION_OPTIONS.index(current),
                format_func=lambda r: config.REACTION_LABELS.get(r, "Select reaction type..."),
                disabled=idx >= num_steps,
                key=f"reaction_{idx}",
            )
            if idx < num_steps and reactions[idx]:
                st.caption(
                    "Feasibility cost: "
                    + fx.format_money_approx(config.REACTION_COSTS_INR[reactions[idx]], currency)
                )
    st.session_state["reactions"] = reactions

    selected_cost = feasibility_cost(reactions[:num_steps])
    if selected_cost:
        st.info(
            f"**Total feasibility cost:** {fx.format_money_approx(selected_cost, currency)}  \n"
            f"Volume-based discount: {fx.discount_label(num_steps)}"
        )


# ===========================
# Step 3: Economics
# ===========================

def render_step_economics():
    st.subheader("Step 3 — Economic Parameters")
    st.caption("Configure your cost structure and fee parameters.")

    currency = st.session_state["currency"]
    ksm_cost = st.number_input(
        f"Current batch KSM cost per kg ({config.CURRENCY_SYMBOLS[currency]})",
        min_value=0.0,
        value=float(st.session_state["ksm_cost_inr"]),
        step=100.0,
        help=f"Enter your current cost (min {config.MIN_KSM_COST_DIGITS} digits)",
    )
    st.session_state["ksm_cost_inr"] = ksm_cost
    if ksm_cost > 0 and not meets_min_digits(ksm_cost):
        st.error(f"Please enter a minimum of {config.MIN_KSM_COST_DIGITS} digits")

    st.session_state["faas_percent"] = st.slider(
        "FaaS fee percentage",
        min_value=config.MIN_FAAS_FEE_PERCENT,
        max_value=config.MAX_FAAS_FEE_PERCENT,
        value=int(st.session_state["faas_percent"]),
        step=1,
    )

    output = current_output(st.session_state)
    if output:
        cols = st.columns(2)
        cols[0].metric("Savings per kg", fx.format_money_approx(output.savings_per_kg_inr, currency))
        cols[1].metric("FaaS fee per kg", fx.format_money_approx(output.faas_fee_per_kg_inr, currency))


# ===========================
# Step 4: Results & ROI
# ===========================

def render_download_section(inputs: CalculatorInput, output: CalculatorOutput):
    st.markdown("### Download Report")
    cols = st.columns(2)
    name = cols[0].text_input("Name", value=st.session_state["download_name"])
    email = cols[1].text_input("Email", value=st.session_state["download_email"])
    st.session_state["download_name"] = name
    st.session_state["download_email"] = email

    if not name or not email:
        st.button("Download Report", disabled=True, help="Enter your name and email first")
        return

    try:
        report.validate_contact(name, email)
    except ValueError as e:
        st.error(f"Input validation error: {e}")
        return

    workbook = exports.build_roi_workbook(inputs, output, inputs.currency)
    if st.download_button(
        label="Download Report",
        data=workbook,
        file_name="flownetics_roi_report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        type="primary",
    ):
        st.session_state["download_record"] = report.build_download_record(
            name, email, inputs, output
        )
        logger.info(
            "ROI report downloaded (%s steps, %s, ROI %s months)",
            inputs.num_process_steps, inputs.currency, fx.format_roi_months(output.roi_months),
        )
        st.success("Report downloaded.")


def render_step_results():
    st.subheader("Step 4 — Your ROI Analysis")
    st.caption("Comprehensive breakdown of your investment return.")

    try:
        inputs = inputs_from_state(st.session_state)
        output = compute(inputs)
    except ValueError as e:
        st.error(f"Input validation error: {e}")
        return

    currency = inputs.currency
    metrics = report.dashboard_metrics(output)

    metric_cols = st.columns(4)
    metric_cols[0].metric(
        "ROI Period",
        f"{fx.format_roi_months(metrics['roi_months'])} months",
        help=f"{metrics['roi_years']:.1f} years to break even",
    )
    metric_cols[1].metric(
        "Annual Savings",
        fx.format_money_approx(metrics["net_annual_savings_inr"], currency) or "0",
        help="Net of FaaS fees",
    )
    metric_cols[2].metric(
        "Total Investment",
        fx.format_money_approx(metrics["total_client_cost_inr"], currency) or "0",
        help="Part A + Part B+C + deposit interest",
    )
    metric_cols[3].metric("Annual ROI", f"{metrics['annual_roi_pct']:.1f}%")

    render_roi_charts(inputs, output, currency)

    with st.expander("Full summary (INR)", expanded=False):
        st.code(output.format_summary(), language=None)

    if output.warnings:
        with st.expander("Warnings", expanded=True):
            for warning in output.warnings:
                st.warning(warning)

    st.markdown("---")
    render_download_section(inputs, output)


# ===========================
# Main
# ===========================

def main():
    st.set_page_config(page_title=APP_TITLE, layout="wide")
    init_session_state()

    st.title(APP_TITLE)
    st.caption(APP_TAGLINE)
    render_stepper()

    step = st.session_state["wizard_step"]
    with st.container():
        if step == 1:
            render_step_basics()
        elif step == 2:
            render_step_reactions()
        elif step == 3:
            render_step_economics()
        elif step == 4:
            render_step_results()
        else:
            render_step_basics()

    st.markdown("---")
    nav_cols = st.columns([1, 1, 1])
    with nav_cols[0]:
        st.button(
            "Previous",
            key="nav_prev",
            disabled=step == 1,
            on_click=lambda: go_to_step(step - 1),
            use_container_width=True,
        )
    with nav_cols[1]:
        st.button("Start Over", key="nav_home_discard", on_click=discard_changes_and_home, use_container_width=True)
    with nav_cols[2]:
        if step < len(WIZARD_STEPS):
            st.button(
                "Continue",
                key="nav_next",
                disabled=not can_advance(step),
                type="primary",
                on_click=lambda: go_to_step(step + 1),
                use_container_width=True,
            )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
