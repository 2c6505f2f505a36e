"""
Display-currency helpers.

The ROI engine works in INR only; these helpers convert and format figures for
the dashboard, charts and exports using the fixed rates in config.flownetics.
"""
from typing import Optional

from config import flownetics as config
from core.roi_calculator import InvalidInput


def _rate(currency: str) -> float:
    try:
        return config.FX_RATES[currency]
    except KeyError:
        raise InvalidInput(
            "currency", f"must be one of {', '.join(config.FX_RATES)} (got {currency!r})"
        ) from None


def currency_symbol(currency: str) -> str:
    _rate(currency)
    return config.CURRENCY_SYMBOLS[currency]


def convert(amount_inr: Optional[float], currency: str) -> float:
    """Convert an INR amount into the display currency."""
    return (amount_inr or 0) * _rate(currency)


def format_money(amount_inr: Optional[float], currency: str) -> str:
    """
    Format an INR amount in the display currency, e.g. "$ 1,234".

    Zero or missing amounts render as an empty string so placeholders stay blank.
    """
    if not amount_inr:
        _rate(currency)
        return ""
    return f"{currency_symbol(currency)} {convert(amount_inr, currency):,.0f}"


def format_money_approx(amount_inr: Optional[float], currency: str) -> str:
    formatted = format_money(amount_inr, currency)
    return f"{formatted} (approx)" if formatted else ""


def format_money_short(amount_inr: Optional[float], currency: str) -> str:
    """Converted amount without symbol ("0" for zero), used for chart hover labels."""
    if not amount_inr:
        _rate(currency)
        return "0"
    return f"{convert(amount_inr, currency):,.0f}"


def format_roi_months(roi_months: Optional[float]) -> str:
    """One-decimal month count, or the placeholder when ROI is undefined."""
    if not roi_months or roi_months <= 0:
        return config.UNDEFINED_PLACEHOLDER
    return f"{roi_months:.1f}"


def discount_label(num_process_steps: int) -> str:
    rate = config.VOLUME_DISCOUNT_RATES.get(num_process_steps, 0.0)
    return f"{rate * 100:.0f}%"
