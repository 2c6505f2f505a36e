"""
Flownetics FaaS configuration.

Business parameters for the ROI calculator, currency display, and the wizard.
All money values are INR; conversion happens only at display time.
"""

# ===========================
# CURRENCIES
# ===========================

BASE_CURRENCY = "INR"

# Fixed display rates (INR -> currency)
FX_RATES = {
    "INR": 1,
    "USD": 0.012,
    "EUR": 0.011,
}

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
}

UNDEFINED_PLACEHOLDER = "—"

# ===========================
# REACTION TYPES
# ===========================

# One-time feasibility cost per process step (INR)
REACTION_COSTS_INR = {
    "L-L": 400000,
    "L-L+C": 550000,
    "L-G": 750000,
    "G-G": 900000,
}

REACTION_LABELS = {
    "L-L": "Liquid-Liquid (L-L)",
    "L-L+C": "Liquid-Liquid + Catalyst (L-L+C)",
    "L-G": "Liquid-Gas (L-G)",
    "G-G": "Gas-Gas (G-G)",
}

NO_REACTION = ""

# ===========================
# PRICING RULES
# ===========================

# Flownetics KSM cost as a share of the current batch cost (30% reduction)
FLOW_COST_RATIO = 0.7

# Discount on summed feasibility cost, keyed by number of process steps
VOLUME_DISCOUNT_RATES = {
    1: 0.0,
    2: 0.07,
    3: 0.11,
    4: 0.15,
}

# Part B+C is a fixed multiple of Part A
PART_BC_FACTOR = 2

# Refundable deposit multiplier by monthly volume: (upper bound tons inclusive, multiplier)
VOLUME_MULTIPLIER_TIERS = [
    (10, 2.0),
    (20, 2.5),
    (30, 3.0),
    (40, 4.0),
]
VOLUME_MULTIPLIER_CEILING = 5.0

# Imputed interest on the refundable deposit
DEPOSIT_INTEREST_RATE = 0.12
DEPOSIT_TERM_YEARS = 3

# Unit factors
KG_PER_TON = 1000
MONTHS_PER_YEAR = 12

# ===========================
# INPUT RANGES
# ===========================

MIN_PROCESS_STEPS = 1
MAX_PROCESS_STEPS = 4

MIN_FAAS_FEE_PERCENT = 40
MAX_FAAS_FEE_PERCENT = 60

MIN_VOLUME_TONS = 1
MAX_VOLUME_TONS = 100

# KSM cost entry must have at least this many digits
MIN_KSM_COST_DIGITS = 4

# ===========================
# WIZARD DEFAULTS
# ===========================

DEFAULT_CURRENCY = "INR"
DEFAULT_PROCESS_STEPS = 1
DEFAULT_VOLUME_TONS = 10.0
DEFAULT_KSM_COST_INR = 0.0
DEFAULT_FAAS_FEE_PERCENT = 50

# ===========================
# REPORTING
# ===========================

SOLUTION_NAME = "Flownetics"
REPORT_TITLE = "Flownetics ROI Analysis"

# Cumulative savings chart horizon
ROI_TIMELINE_MONTHS = 60
ROI_TIMELINE_STEP_MONTHS = 3

# Sanity thresholds for result warnings
LONG_PAYBACK_MONTHS = 36

# Fields kept on the persisted download record
REPORT_RECORD_FIELDS = [
    "currency",
    "volumeTonsPerMonth",
    "numSteps",
    "roiMonths",
    "totalCostClientINR",
    "savingsAfterFaasINR",
]

CHART_COLORS = {
    "traditional": "#f9c9a7",
    "flownetics": "#9d92e5",
    "savings": "#8dd99e",
    "fees": "#c49de3",
    "investment": "#f4a582",
    "accent": "#e07742",
}
