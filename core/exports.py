"""
Export utilities for Flownetics ROI outputs.

Generates the Excel workbook offered by the "Download Report" button.
"""
import io
from typing import Optional

import pandas as pd

from config import flownetics as config
from core import report
from core.roi_calculator import CalculatorInput, CalculatorOutput


def export_multi_sheet_excel(sheets: dict, title: Optional[str] = None) -> bytes:
    """
    Export multiple DataFrames to a single Excel file with multiple sheets.

    Args:
        sheets: Dict of {sheet_name: dataframe}
        title: Optional workbook title (document properties)

    Returns:
        Excel file as bytes
    """
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        for sheet_name, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)
        if title:
            writer.book.properties.title = title
    return output.getvalue()


def roi_report_sheets(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> dict:
    """Sheets of the ROI workbook, in display order."""
    summary = pd.DataFrame([
        {"Metric": "ROI period (months)", "Value": round(output.roi_months, 2)},
        {"Metric": "ROI period (years)", "Value": round(output.roi_years, 2)},
        {"Metric": "Annual ROI (%)", "Value": round(output.annual_roi_pct, 1)},
        {"Metric": "Volume discount (%)", "Value": round(output.volume_discount_rate * 100, 1)},
        {"Metric": "Deposit multiplier", "Value": output.volume_multiplier},
    ])
    return {
        "Inputs": report.inputs_table(inputs),
        "Summary": summary,
        "Line Items": report.results_table(inputs, output, currency),
        "Investment": report.investment_breakdown_frame(output, currency),
        "Savings": report.savings_breakdown_frame(output, currency),
        "Timeline": report.roi_timeline_frame(output, currency),
    }


def build_roi_workbook(inputs: CalculatorInput, output: CalculatorOutput, currency: str) -> bytes:
    return export_multi_sheet_excel(
        roi_report_sheets(inputs, output, currency), title=config.REPORT_TITLE
    )
