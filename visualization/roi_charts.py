"""Plotly charts for the ROI results step, rendered in Streamlit."""
from typing import Dict

import plotly.graph_objects as go
import streamlit as st

from config import flownetics as config
from core import report
from core.currency import currency_symbol, format_money_short
from core.roi_calculator import CalculatorInput, CalculatorOutput


def _apply_layout(fig: go.Figure, title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        template="plotly_dark",
        height=320,
        margin=dict(l=10, r=10, t=50, b=10),
    )
    return fig


def cost_comparison_figure(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> go.Figure:
    df = report.cost_comparison_frame(inputs, output, currency)
    symbol = currency_symbol(currency)
    fig = go.Figure(go.Bar(
        x=df["name"],
        y=df["cost"],
        marker_color=[config.CHART_COLORS["traditional"], config.CHART_COLORS["flownetics"]],
        hovertemplate=f"%{{x}}: {symbol} %{{y:,.0f}}<extra></extra>",
    ))
    return _apply_layout(fig, "Cost Comparison (Per Kg)")


def _pie(df, title: str, colors, amounts_inr, currency: str) -> go.Figure:
    symbol = currency_symbol(currency)
    fig = go.Figure(go.Pie(
        labels=df["name"],
        values=df["value"],
        hole=0.45,
        marker=dict(colors=colors),
        textinfo="percent",
        customdata=[format_money_short(amount, currency) for amount in amounts_inr],
        hovertemplate=f"%{{label}}: {symbol} %{{customdata}}<extra></extra>",
    ))
    return _apply_layout(fig, title)


def investment_breakdown_figure(output: CalculatorOutput, currency: str) -> go.Figure:
    df = report.investment_breakdown_frame(output, currency)
    colors = [config.CHART_COLORS[k] for k in ("traditional", "flownetics", "fees")]
    amounts = [output.part_a_inr, output.part_bc_inr, output.interest_on_deposit_inr]
    return _pie(df, "Investment Breakdown", colors, amounts, currency)


def savings_breakdown_figure(output: CalculatorOutput, currency: str) -> go.Figure:
    df = report.savings_breakdown_frame(output, currency)
    colors = [config.CHART_COLORS["savings"], config.CHART_COLORS["fees"]]
    amounts = [output.annual_savings_inr, output.annual_faas_fees_inr]
    return _pie(df, "Annual Savings vs FaaS Fees", colors, amounts, currency)


def roi_timeline_figure(output: CalculatorOutput, currency: str) -> go.Figure:
    df = report.roi_timeline_frame(output, currency)
    fig = go.Figure()
    if not df.empty:
        fig.add_trace(go.Scatter(
            x=df["month"], y=df["savings"], mode="lines+markers",
            name="Cumulative savings", line=dict(color=config.CHART_COLORS["savings"], width=3),
        ))
        fig.add_trace(go.Scatter(
            x=df["month"], y=df["breakeven"], mode="lines",
            name="Break-even", line=dict(color=config.CHART_COLORS["accent"], dash="dash"),
        ))
    fig.update_xaxes(title_text="Month")
    fig.update_yaxes(title_text=currency)
    return _apply_layout(fig, "ROI Timeline")


def build_figures(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> Dict[str, go.Figure]:
    return {
        "cost_comparison": cost_comparison_figure(inputs, output, currency),
        "investment": investment_breakdown_figure(output, currency),
        "savings": savings_breakdown_figure(output, currency),
        "timeline": roi_timeline_figure(output, currency),
    }


def render_roi_charts(inputs: CalculatorInput, output: CalculatorOutput, currency: str):
    """Render the ROI charts into the active Streamlit app."""
    figures = build_figures(inputs, output, currency)

    top = st.columns(2)
    top[0].plotly_chart(figures["cost_comparison"], use_container_width=True)
    top[1].plotly_chart(figures["investment"], use_container_width=True)

    bottom = st.columns(2)
    bottom[0].plotly_chart(figures["savings"], use_container_width=True)
    if output.has_roi:
        bottom[1].plotly_chart(figures["timeline"], use_container_width=True)
    else:
        bottom[1].info("No positive net savings - ROI timeline unavailable.")
