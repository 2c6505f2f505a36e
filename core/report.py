"""
ROI report building.

Turns calculator inputs/outputs into:
- the full report snapshot sent with a "Download Report" request
- the trimmed download record kept for the admin list
- dashboard metrics and chart tables in the display currency
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pandas as pd

from config import flownetics as config
from core import currency as fx
from core.roi_calculator import CalculatorInput, CalculatorOutput, InvalidInput

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def build_report_data(inputs: CalculatorInput, output: CalculatorOutput) -> Dict:
    """Full snapshot of inputs and outputs, keyed the way the report consumer expects."""
    reactions = list(inputs.reaction_types) + [config.NO_REACTION] * (
        config.MAX_PROCESS_STEPS - len(inputs.reaction_types)
    )
    return {
        "currency": inputs.currency,
        "currencySymbol": fx.currency_symbol(inputs.currency),
        "volumeTonsPerMonth": inputs.monthly_volume_tons,
        "annualQtyTons": output.annual_volume_tons,
        "numSteps": inputs.num_process_steps,
        "reactions": reactions,
        "ksmCostINR": inputs.ksm_cost_per_kg_inr,
        "flowneticsKsmINR": output.flownetics_cost_per_kg_inr,
        "savingsRmPerKgINR": output.savings_per_kg_inr,
        "faasPerKgINR": output.faas_fee_per_kg_inr,
        "savingsRmPerAnnumINR": output.annual_savings_inr,
        "flowneticsFeesPerYearINR": output.annual_faas_fees_inr,
        "savingsAfterFaasINR": output.net_annual_savings_after_faas_inr,
        "partA_INR": output.part_a_inr,
        "partBC_INR": output.part_bc_inr,
        "refundableINR": output.refundable_deposit_inr,
        "interestRefundableINR": output.interest_on_deposit_inr,
        "totalCostClientINR": output.total_client_cost_inr,
        "roiMonths": output.roi_months,
        "faasPercent": inputs.faas_fee_percent,
    }


def validate_contact(name: str, email: str) -> Tuple[str, str]:
    """
    Check the contact details required before a report download.

    Returns:
        (name, email) stripped of surrounding whitespace

    Raises:
        InvalidInput: If name or email is missing, or email is malformed
    """
    name = (name or "").strip()
    email = (email or "").strip()
    if not name:
        raise InvalidInput("name", "is required")
    if not email:
        raise InvalidInput("email", "is required")
    if not EMAIL_PATTERN.match(email):
        raise InvalidInput("email", f"is not a valid address (got {email!r})")
    return name, email


def build_download_record(
    name: str,
    email: str,
    inputs: CalculatorInput,
    output: CalculatorOutput,
    downloaded_at: Optional[datetime] = None,
) -> Dict:
    """
    Trimmed record persisted when a user downloads the report.

    Raises:
        InvalidInput: If name or email is missing, or email is malformed
    """
    name, email = validate_contact(name, email)

    report_data = build_report_data(inputs, output)
    record = {"name": name, "email": email}
    record.update({key: report_data[key] for key in config.REPORT_RECORD_FIELDS})
    record["downloadedAt"] = downloaded_at or datetime.now(timezone.utc)

    logger.debug("Built download record (%s steps, %s)", inputs.num_process_steps, inputs.currency)
    return record


def dashboard_metrics(output: CalculatorOutput) -> Dict[str, float]:
    """Headline figures for the results dashboard (INR)."""
    return {
        "roi_months": output.roi_months,
        "roi_years": output.roi_years,
        "annual_roi_pct": output.annual_roi_pct,
        "net_annual_savings_inr": output.net_annual_savings_after_faas_inr,
        "total_client_cost_inr": output.total_client_cost_inr,
    }


def cost_comparison_frame(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> pd.DataFrame:
    """Per-kg KSM cost, current batch vs Flownetics."""
    return pd.DataFrame([
        {"name": "Traditional", "cost": fx.convert(inputs.ksm_cost_per_kg_inr, currency)},
        {"name": config.SOLUTION_NAME, "cost": fx.convert(output.flownetics_cost_per_kg_inr, currency)},
    ])


def investment_breakdown_frame(output: CalculatorOutput, currency: str) -> pd.DataFrame:
    return pd.DataFrame([
        {"name": "Part A (Equipment)", "value": fx.convert(output.part_a_inr, currency)},
        {"name": "Part B+C (Setup)", "value": fx.convert(output.part_bc_inr, currency)},
        {
            "name": f"Interest ({config.DEPOSIT_TERM_YEARS}y)",
            "value": fx.convert(output.interest_on_deposit_inr, currency),
        },
    ])


def savings_breakdown_frame(output: CalculatorOutput, currency: str) -> pd.DataFrame:
    return pd.DataFrame([
        {"name": "Total Savings", "value": fx.convert(output.annual_savings_inr, currency)},
        {"name": "FaaS Fees", "value": fx.convert(output.annual_faas_fees_inr, currency)},
    ])


def roi_timeline_frame(
    output: CalculatorOutput,
    currency: str,
    months: int = config.ROI_TIMELINE_MONTHS,
    step: int = config.ROI_TIMELINE_STEP_MONTHS,
) -> pd.DataFrame:
    """
    Cumulative net savings against the break-even line.

    Empty when ROI is undefined (no net savings to accumulate).
    """
    columns = ["month", "savings", "breakeven"]
    if not output.has_roi:
        return pd.DataFrame(columns=columns)

    monthly_savings = output.net_annual_savings_after_faas_inr / 12
    breakeven = fx.convert(output.total_client_cost_inr, currency)
    rows: List[Dict] = []
    for month in range(0, months + 1, step):
        rows.append({
            "month": month,
            "savings": fx.convert(monthly_savings * month, currency),
            "breakeven": breakeven,
        })
    return pd.DataFrame(rows, columns=columns)


def results_table(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> pd.DataFrame:
    """Line-item results in INR and the display currency, for export."""
    items = [
        ("Current KSM cost per kg", inputs.ksm_cost_per_kg_inr),
        ("Flownetics KSM cost per kg", output.flownetics_cost_per_kg_inr),
        ("Savings per kg", output.savings_per_kg_inr),
        ("FaaS fee per kg", output.faas_fee_per_kg_inr),
        ("Annual savings", output.annual_savings_inr),
        ("Annual FaaS fees", output.annual_faas_fees_inr),
        ("Net annual savings after FaaS", output.net_annual_savings_after_faas_inr),
        ("Total feasibility cost", output.total_feasibility_cost_inr),
        ("Part A", output.part_a_inr),
        ("Part B+C", output.part_bc_inr),
        ("Refundable deposit", output.refundable_deposit_inr),
        ("Interest on deposit", output.interest_on_deposit_inr),
        ("Total client cost", output.total_client_cost_inr),
    ]
    records = []
    for label, value in items:
        record = {"Item": label, config.BASE_CURRENCY: round(value, 2)}
        if currency != config.BASE_CURRENCY:
            record[currency] = round(fx.convert(value, currency), 2)
        records.append(record)
    return pd.DataFrame(records)


def inputs_table(inputs: CalculatorInput) -> pd.DataFrame:
    reactions = ", ".join(r or config.UNDEFINED_PLACEHOLDER for r in inputs.selected_reactions)
    return pd.DataFrame([
        {"Parameter": "Currency", "Value": inputs.currency},
        {"Parameter": "Process steps", "Value": inputs.num_process_steps},
        {"Parameter": "Reaction types", "Value": reactions},
        {"Parameter": "Volume (tons/month)", "Value": inputs.monthly_volume_tons},
        {"Parameter": "KSM cost per kg (INR)", "Value": inputs.ksm_cost_per_kg_inr},
        {"Parameter": "FaaS fee (%)", "Value": inputs.faas_fee_percent},
    ])
