"""
ROI Calculator for Flownetics Factory-as-a-Service (FaaS) deployments.

Replicates the FaaS calculator wizard logic to calculate:
- Per-kg and annual KSM savings
- FaaS fees and net savings after fees
- Client investment (Part A, Part B+C, refundable deposit interest)
- ROI period in months

Every figure is computed in INR. Currency conversion is a display concern
(see core.currency) so this module stays currency-agnostic.

Usage Example:
    from core.roi_calculator import compute, CalculatorInput

    inputs = CalculatorInput(
        currency="INR",
        num_process_steps=1,
        reaction_types=["L-L"],
        monthly_volume_tons=10,
        ksm_cost_per_kg_inr=5000,
        faas_fee_percent=50,
    )

    output = compute(inputs)
    print(output.format_summary())
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from config import flownetics as config

logger = logging.getLogger(__name__)


class ROICalculationError(ValueError):
    """Base error for ROI calculation problems."""

    def __init__(self, field_name: str, reason: str):
        self.field = field_name
        self.reason = reason
        super().__init__(f"{field_name}: {reason}")


class InvalidInput(ROICalculationError):
    """Out-of-range or missing calculator input."""


class UndefinedResult(ROICalculationError):
    """A result was requested that has no meaning for these inputs."""


@dataclass(frozen=True)
class ROIAssumptions:
    """
    Business parameters behind the calculation.

    Defaults mirror config.flownetics; override individual fields for what-if
    scenarios without touching the formula.
    """
    flow_cost_ratio: float = config.FLOW_COST_RATIO
    reaction_costs_inr: Dict[str, float] = field(
        default_factory=lambda: dict(config.REACTION_COSTS_INR)
    )
    volume_discount_rates: Dict[int, float] = field(
        default_factory=lambda: dict(config.VOLUME_DISCOUNT_RATES)
    )
    part_bc_factor: float = config.PART_BC_FACTOR
    volume_multiplier_tiers: Tuple[Tuple[float, float], ...] = tuple(
        config.VOLUME_MULTIPLIER_TIERS
    )
    volume_multiplier_ceiling: float = config.VOLUME_MULTIPLIER_CEILING
    deposit_interest_rate: float = config.DEPOSIT_INTEREST_RATE
    deposit_term_years: int = config.DEPOSIT_TERM_YEARS
    kg_per_ton: float = config.KG_PER_TON
    months_per_year: int = config.MONTHS_PER_YEAR

    @property
    def deposit_interest_factor(self) -> float:
        """Compounded interest share over the deposit term (1.12^3 - 1 by default)."""
        return (1 + self.deposit_interest_rate) ** self.deposit_term_years - 1


DEFAULT_ASSUMPTIONS = ROIAssumptions()


def _number_error(field_name: str, value):
    """Return an InvalidInput when value is not a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return InvalidInput(field_name, f"must be a number (got {value!r})")
    if not math.isfinite(value):
        return InvalidInput(field_name, "must be a finite number")
    return None


@dataclass
class CalculatorInput:
    """
    Input parameters captured by the calculator wizard.

    Basics:
        currency: Display currency (INR, USD, EUR); computation is always INR
        num_process_steps: Number of process steps (1-4)
        monthly_volume_tons: Production volume in tons per month

    Process:
        reaction_types: Reaction type per step ("L-L", "L-L+C", "L-G", "G-G" or "").
            Entries beyond num_process_steps are ignored.

    Economics:
        ksm_cost_per_kg_inr: Current batch KSM cost per kg (INR)
        faas_fee_percent: Share of savings paid as FaaS fee (40-60)
    """
    currency: str = config.DEFAULT_CURRENCY
    num_process_steps: int = config.DEFAULT_PROCESS_STEPS
    reaction_types: List[str] = field(default_factory=list)
    monthly_volume_tons: float = config.DEFAULT_VOLUME_TONS
    ksm_cost_per_kg_inr: float = config.DEFAULT_KSM_COST_INR
    faas_fee_percent: int = config.DEFAULT_FAAS_FEE_PERCENT

    @property
    def selected_reactions(self) -> List[str]:
        """Reaction types for the active steps only."""
        return list(self.reaction_types[:self.num_process_steps])

    def validate(self) -> List[InvalidInput]:
        """
        Validate inputs and return every error found.

        Returns:
            List of InvalidInput errors (empty if all valid)
        """
        errors = []

        if self.currency not in config.FX_RATES:
            errors.append(InvalidInput(
                "currency",
                f"must be one of {', '.join(config.FX_RATES)} (got {self.currency!r})",
            ))

        steps = self.num_process_steps
        if isinstance(steps, bool) or not isinstance(steps, int):
            errors.append(InvalidInput(
                "num_process_steps", f"must be an integer (got {steps!r})"
            ))
        elif not config.MIN_PROCESS_STEPS <= steps <= config.MAX_PROCESS_STEPS:
            errors.append(InvalidInput(
                "num_process_steps",
                f"must be between {config.MIN_PROCESS_STEPS} and "
                f"{config.MAX_PROCESS_STEPS} (got {steps})",
            ))

        reactions = self.reaction_types
        if not isinstance(reactions, (list, tuple)):
            errors.append(InvalidInput(
                "reaction_types", f"must be a list of reaction types (got {reactions!r})"
            ))
        elif not all(isinstance(r, str) for r in reactions):
            errors.append(InvalidInput(
                "reaction_types", f"entries must be strings (got {list(reactions)!r})"
            ))
        elif len(reactions) > config.MAX_PROCESS_STEPS:
            errors.append(InvalidInput(
                "reaction_types",
                f"at most {config.MAX_PROCESS_STEPS} entries allowed "
                f"(got {len(reactions)})",
            ))

        volume = self.monthly_volume_tons
        error = _number_error("monthly_volume_tons", volume)
        if error:
            errors.append(error)
        elif volume <= 0:
            errors.append(InvalidInput(
                "monthly_volume_tons", f"must be positive (got {volume})"
            ))

        ksm_cost = self.ksm_cost_per_kg_inr
        error = _number_error("ksm_cost_per_kg_inr", ksm_cost)
        if error:
            errors.append(error)
        elif ksm_cost <= 0:
            errors.append(InvalidInput(
                "ksm_cost_per_kg_inr", f"must be positive (got {ksm_cost})"
            ))

        fee = self.faas_fee_percent
        error = _number_error("faas_fee_percent", fee)
        if error:
            errors.append(error)
        elif not config.MIN_FAAS_FEE_PERCENT <= fee <= config.MAX_FAAS_FEE_PERCENT:
            errors.append(InvalidInput(
                "faas_fee_percent",
                f"must be between {config.MIN_FAAS_FEE_PERCENT} and "
                f"{config.MAX_FAAS_FEE_PERCENT} (got {fee})",
            ))

        return errors


@dataclass
class CalculatorOutput:
    """
    Calculated ROI results, all in INR.

    Per-kg Economics:
        annual_volume_tons: Annual production (tons)
        flownetics_cost_per_kg_inr: KSM cost per kg with Flownetics
        savings_per_kg_inr: KSM saving per kg
        faas_fee_per_kg_inr: FaaS fee per kg

    Annual Economics:
        annual_savings_inr: Gross annual KSM savings
        annual_faas_fees_inr: Annual FaaS fees
        net_annual_savings_after_faas_inr: Savings left to the client after fees

    Investment:
        total_feasibility_cost_inr: Summed feasibility cost before discount
        volume_discount_rate: Discount applied for the number of steps
        part_a_inr: Discounted feasibility cost
        part_bc_inr: Part B+C (2x Part A)
        volume_multiplier: Deposit multiplier for the monthly volume
        refundable_deposit_inr: Refundable deposit
        interest_on_deposit_inr: Imputed interest on the deposit over the term
        total_client_cost_inr: Part A + Part B+C + interest

    ROI:
        roi_months: Months to break even (0 when there are no net savings)

    Validation:
        warnings: List of sanity check warnings
    """
    annual_volume_tons: float
    flownetics_cost_per_kg_inr: float
    savings_per_kg_inr: float
    faas_fee_per_kg_inr: float

    annual_savings_inr: float
    annual_faas_fees_inr: float
    net_annual_savings_after_faas_inr: float

    total_feasibility_cost_inr: float
    volume_discount_rate: float
    part_a_inr: float
    part_bc_inr: float
    volume_multiplier: float
    refundable_deposit_inr: float
    interest_on_deposit_inr: float
    total_client_cost_inr: float

    roi_months: float

    warnings: List[str] = field(default_factory=list)

    @property
    def has_roi(self) -> bool:
        return self.roi_months > 0

    def payback_months(self) -> float:
        """Months to break even; raises UndefinedResult when there are no net savings."""
        if not self.has_roi:
            raise UndefinedResult(
                "roi_months",
                "no positive net savings or client cost, break-even is undefined",
            )
        return self.roi_months

    @property
    def roi_years(self) -> float:
        return self.roi_months / 12

    @property
    def annual_roi_pct(self) -> float:
        """Net annual savings as a percentage of total client cost."""
        if self.total_client_cost_inr <= 0:
            return 0.0
        return self.net_annual_savings_after_faas_inr / self.total_client_cost_inr * 100

    def format_summary(self) -> str:
        """Generate a human-readable summary of ROI results (INR)."""
        roi_text = (
            f"{self.roi_months:.1f} months ({self.roi_years:.1f} years)"
            if self.has_roi else config.UNDEFINED_PLACEHOLDER
        )
        lines = [
            "=" * 60,
            "FLOWNETICS FAAS ROI ANALYSIS",
            "=" * 60,
            "",
            "PER KG:",
            f"  Current KSM: ₹{self.flownetics_cost_per_kg_inr + self.savings_per_kg_inr:,.2f}"
            f" → Flownetics: ₹{self.flownetics_cost_per_kg_inr:,.2f}",
            f"  Savings: ₹{self.savings_per_kg_inr:,.2f} | FaaS fee: ₹{self.faas_fee_per_kg_inr:,.2f}",
            "",
            f"ANNUAL ({self.annual_volume_tons:,.1f} tons):",
            f"  Gross savings: ₹{self.annual_savings_inr:,.2f}",
            f"  FaaS fees: ₹{self.annual_faas_fees_inr:,.2f}",
            f"  Net savings after FaaS: ₹{self.net_annual_savings_after_faas_inr:,.2f}",
            "",
            "INVESTMENT:",
            f"  Feasibility cost: ₹{self.total_feasibility_cost_inr:,.2f}"
            f" (discount {self.volume_discount_rate:.0%})",
            f"  Part A: ₹{self.part_a_inr:,.2f}",
            f"  Part B+C: ₹{self.part_bc_inr:,.2f}",
            f"  Refundable deposit: ₹{self.refundable_deposit_inr:,.2f}"
            f" ({self.volume_multiplier:g}x)",
            f"  Interest on deposit: ₹{self.interest_on_deposit_inr:,.2f}",
            f"  TOTAL CLIENT COST: ₹{self.total_client_cost_inr:,.2f}",
            "",
            "ROI METRICS:",
            f"  Break-even: {roi_text}",
            f"  Annual ROI: {self.annual_roi_pct:.1f}%",
            "=" * 60,
        ]

        if self.warnings:
            lines.extend([
                "",
                "WARNINGS:",
            ])
            for warning in self.warnings:
                lines.append(f"  - {warning}")
            lines.append("=" * 60)

        return "\n".join(lines)


def volume_discount_rate(
    num_process_steps: int,
    assumptions: ROIAssumptions = DEFAULT_ASSUMPTIONS,
) -> float:
    """Discount on feasibility cost for the number of process steps (0 if unknown)."""
    return assumptions.volume_discount_rates.get(num_process_steps, 0.0)


def volume_multiplier(
    monthly_volume_tons: float,
    assumptions: ROIAssumptions = DEFAULT_ASSUMPTIONS,
) -> float:
    """
    Refundable deposit multiplier for a monthly volume.

    Tiers are inclusive upper bounds: exactly 10 tons/month is 2x, 10.0001 is 2.5x.
    A non-positive volume is looked up as 1 ton.
    """
    volume = monthly_volume_tons if monthly_volume_tons and monthly_volume_tons > 0 else 1
    for upper_bound, multiplier in assumptions.volume_multiplier_tiers:
        if volume <= upper_bound:
            return multiplier
    return assumptions.volume_multiplier_ceiling


def feasibility_cost(
    reaction_types: Sequence[str],
    assumptions: ROIAssumptions = DEFAULT_ASSUMPTIONS,
) -> float:
    """Sum of feasibility costs; empty or unrecognized reaction types cost nothing."""
    total = 0
    for reaction in reaction_types:
        if reaction:
            total += assumptions.reaction_costs_inr.get(reaction, 0)
    return total


def meets_min_digits(value, min_digits: int = config.MIN_KSM_COST_DIGITS) -> bool:
    """True when the value's text form has at least min_digits digit characters."""
    if value is None:
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    digits = [ch for ch in str(value) if ch.isdigit()]
    return len(digits) >= min_digits


def compute(
    inputs: CalculatorInput,
    assumptions: ROIAssumptions = DEFAULT_ASSUMPTIONS,
) -> CalculatorOutput:
    """
    Calculate FaaS ROI for a set of wizard inputs.

    Args:
        inputs: CalculatorInput with all wizard values
        assumptions: Business parameters (defaults from config.flownetics)

    Returns:
        CalculatorOutput with every derived figure in INR

    Raises:
        InvalidInput: If inputs fail validation
    """
    errors = inputs.validate()
    if errors:
        for error in errors[1:]:
            logger.debug("Additional input error: %s", error)
        raise errors[0]

    warnings = []

    # --- PER-KG ECONOMICS ---

    annual_volume_tons = inputs.monthly_volume_tons * assumptions.months_per_year

    flownetics_cost_per_kg = inputs.ksm_cost_per_kg_inr * assumptions.flow_cost_ratio
    savings_per_kg = inputs.ksm_cost_per_kg_inr - flownetics_cost_per_kg
    faas_fee_per_kg = savings_per_kg * (inputs.faas_fee_percent / 100)

    # --- ANNUAL ECONOMICS ---

    annual_kg = annual_volume_tons * assumptions.kg_per_ton
    annual_savings = savings_per_kg * annual_volume_tons * assumptions.kg_per_ton
    annual_faas_fees = faas_fee_per_kg * annual_volume_tons * assumptions.kg_per_ton
    net_annual_savings = annual_savings - annual_faas_fees

    # --- INVESTMENT ---

    selected = inputs.selected_reactions
    missing_steps = [
        idx + 1 for idx in range(inputs.num_process_steps)
        if idx >= len(selected) or selected[idx] not in assumptions.reaction_costs_inr
    ]
    if missing_steps:
        warnings.append(
            f"No recognized reaction type for step(s) {', '.join(map(str, missing_steps))} "
            "- feasibility cost counted as 0"
        )

    ignored = [r for r in inputs.reaction_types[inputs.num_process_steps:] if r]
    if ignored:
        warnings.append(
            f"Reaction types beyond step {inputs.num_process_steps} ignored: {', '.join(ignored)}"
        )

    total_feasibility = feasibility_cost(selected, assumptions)
    discount_rate = volume_discount_rate(inputs.num_process_steps, assumptions)

    part_a = total_feasibility * (1 - discount_rate)
    part_bc = part_a * assumptions.part_bc_factor

    multiplier = volume_multiplier(inputs.monthly_volume_tons, assumptions)
    refundable_deposit = part_bc * multiplier
    interest_on_deposit = refundable_deposit * assumptions.deposit_interest_factor

    total_client_cost = part_a + part_bc + interest_on_deposit

    # --- ROI ---

    if net_annual_savings > 0 and total_client_cost > 0:
        roi_months = (total_client_cost / net_annual_savings) * assumptions.months_per_year
    else:
        roi_months = 0.0

    # --- SANITY CHECKS ---

    if not meets_min_digits(inputs.ksm_cost_per_kg_inr):
        warnings.append(
            f"KSM cost {inputs.ksm_cost_per_kg_inr:g} has fewer than "
            f"{config.MIN_KSM_COST_DIGITS} digits - verify the per-kg figure"
        )

    if net_annual_savings <= 0:
        warnings.append("No positive net savings after FaaS fees - ROI period is undefined")

    if roi_months > config.LONG_PAYBACK_MONTHS:
        warnings.append(f"ROI period is {roi_months:.1f} months - unusually long")

    for warning in warnings:
        logger.warning(warning)

    logger.debug(
        "Computed ROI: %.0f kg/year, net savings %.2f INR, total cost %.2f INR, %.3f months",
        annual_kg, net_annual_savings, total_client_cost, roi_months,
    )

    return CalculatorOutput(
        # Per kg
        annual_volume_tons=annual_volume_tons,
        flownetics_cost_per_kg_inr=flownetics_cost_per_kg,
        savings_per_kg_inr=savings_per_kg,
        faas_fee_per_kg_inr=faas_fee_per_kg,

        # Annual
        annual_savings_inr=annual_savings,
        annual_faas_fees_inr=annual_faas_fees,
        net_annual_savings_after_faas_inr=net_annual_savings,

        # Investment
        total_feasibility_cost_inr=total_feasibility,
        volume_discount_rate=discount_rate,
        part_a_inr=part_a,
        part_bc_inr=part_bc,
        volume_multiplier=multiplier,
        refundable_deposit_inr=refundable_deposit,
        interest_on_deposit_inr=interest_on_deposit,
        total_client_cost_inr=total_client_cost,

        # ROI
        roi_months=roi_months,

        # Validation
        warnings=warnings,
    )


def quick_roi(
    monthly_volume_tons: float,
    ksm_cost_per_kg_inr: float,
    reaction_type: str = "L-L",
    faas_fee_percent: int = config.DEFAULT_FAAS_FEE_PERCENT,
    currency: str = config.DEFAULT_CURRENCY,
) -> CalculatorOutput:
    """
    Quick single-step ROI calculation.

    Useful for rapid "what-if" scenarios.

    Example:
        >>> output = quick_roi(monthly_volume_tons=10, ksm_cost_per_kg_inr=5000)
        >>> print(f"ROI: {output.roi_months:.2f} months")
    """
    inputs = CalculatorInput(
        currency=currency,
        num_process_steps=1,
        reaction_types=[reaction_type],
        monthly_volume_tons=monthly_volume_tons,
        ksm_cost_per_kg_inr=ksm_cost_per_kg_inr,
        faas_fee_percent=faas_fee_percent,
    )
    return compute(inputs)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    print(quick_roi(monthly_volume_tons=10, ksm_cost_per_kg_inr=5000).format_summary())
