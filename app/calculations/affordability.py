"""
Home Affordability

Finds the most expensive home a borrower can carry given income, existing
debts and the standard front-end / back-end debt-to-income limits.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.calculations.amortization import calculate_payment
from app.calculations.defaults import DEFAULT_MARKET, MarketDefaults
from app.calculations.validation import (
    require_non_negative,
    require_positive,
    round_currency,
    to_percent,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_PRICE = 100_000
MAX_SEARCH_PRICE = 5_000_000
PRICE_STEP = 1_000

RECOMMEND_IMPROVE = (
    "Consider increasing income, reducing debts, or saving for a larger down payment."
)
RECOMMEND_REDUCE_DEBT = (
    "Consider reducing existing debts before purchasing to improve affordability."
)
RECOMMEND_CAUTION = "You may qualify but consider the higher payment carefully."
RECOMMEND_STRONG = "You appear to be in a strong financial position for this purchase."


@dataclass(frozen=True)
class AffordabilityProfile:
    """Borrower income, debts and target loan terms."""

    monthly_income: float
    monthly_debts: float
    down_payment: float
    interest_rate: float  # Percent
    loan_term: int  # Years
    property_tax_rate: Optional[float] = None  # Decimal, e.g. 0.0121
    insurance_rate: Optional[float] = None  # Decimal, e.g. 0.0045
    debt_to_income_ratio: Optional[float] = None  # Front-end override, e.g. 0.31

    def __post_init__(self):
        require_positive("monthly_income", self.monthly_income)
        require_non_negative("monthly_debts", self.monthly_debts)
        require_non_negative("down_payment", self.down_payment)
        require_non_negative("interest_rate", self.interest_rate)
        require_positive("loan_term", self.loan_term)
        for name in ("property_tax_rate", "insurance_rate"):
            value = getattr(self, name)
            if value is not None:
                require_non_negative(name, value)
        if self.debt_to_income_ratio is not None:
            require_positive("debt_to_income_ratio", self.debt_to_income_ratio)


@dataclass(frozen=True)
class AffordabilityResult:
    """Maximum purchase supported by the profile."""

    max_home_price: float
    max_monthly_payment: float
    max_loan_amount: float
    required_income: float
    debt_to_income_ratio: float  # Percent
    front_end_ratio: float  # Percent
    back_end_ratio: float  # Percent
    recommendation: str

    @property
    def feasible(self) -> bool:
        return self.max_home_price > 0


def calculate_max_monthly_payment(
    profile: AffordabilityProfile,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> float:
    """
    Maximum housing payment under both debt-to-income limits.

    Only the front-end ratio can be overridden per profile; the back-end
    ratio always comes from the market defaults.
    """
    front_end = profile.debt_to_income_ratio or defaults.front_end_ratio
    by_front_end = profile.monthly_income * front_end
    by_back_end = profile.monthly_income * defaults.back_end_ratio - profile.monthly_debts
    return min(by_front_end, by_back_end)


def escrow_rate(
    profile: AffordabilityProfile,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> float:
    """Monthly tax + insurance + PMI estimate as a fraction of home price."""
    tax_rate = profile.property_tax_rate
    if tax_rate is None:
        tax_rate = defaults.property_tax_rate
    insurance_rate = profile.insurance_rate
    if insurance_rate is None:
        insurance_rate = defaults.home_insurance_rate
    return (tax_rate + insurance_rate + defaults.pmi_rate) / 12


def fits_budget(
    home_price: float,
    profile: AffordabilityProfile,
    max_payment: float,
    monthly_escrow_rate: float,
) -> bool:
    """True if the P&I on this price fits what is left after escrow."""
    available_for_pi = max_payment - home_price * monthly_escrow_rate
    if available_for_pi <= 0:
        return False
    loan_amount = max(0.0, home_price - profile.down_payment)
    payment = calculate_payment(loan_amount, profile.interest_rate, profile.loan_term)
    return payment <= available_for_pi


def find_max_home_price(
    profile: AffordabilityProfile,
    max_payment: float,
    monthly_escrow_rate: float,
) -> float:
    """
    Largest price on the $1,000 grid that still fits the budget.

    Required payment rises and the escrow-adjusted budget falls with price,
    so the grid splits into a fitting prefix and a failing suffix. Binary
    search over that grid returns the same price a linear scan from the
    bottom would stop at. Returns 0 when even the lowest price fails.
    """
    if not fits_budget(MIN_SEARCH_PRICE, profile, max_payment, monthly_escrow_rate):
        return 0

    low = 0
    high = (MAX_SEARCH_PRICE - MIN_SEARCH_PRICE) // PRICE_STEP

    while low < high:
        mid = (low + high + 1) // 2
        price = MIN_SEARCH_PRICE + mid * PRICE_STEP
        if fits_budget(price, profile, max_payment, monthly_escrow_rate):
            low = mid
        else:
            high = mid - 1

    return MIN_SEARCH_PRICE + low * PRICE_STEP


def calculate_affordability(
    profile: AffordabilityProfile,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> AffordabilityResult:
    """
    Calculate home affordability based on income and debts.

    Args:
        profile: Borrower income, debts and loan terms
        defaults: Escrow rates and debt-to-income limits

    Returns:
        AffordabilityResult; a zero max price means no home in the search
        range is affordable
    """
    front_end = profile.debt_to_income_ratio or defaults.front_end_ratio
    max_payment = calculate_max_monthly_payment(profile, defaults)

    max_home_price = find_max_home_price(
        profile, max_payment, escrow_rate(profile, defaults)
    )
    max_loan_amount = max(0.0, max_home_price - profile.down_payment)

    actual_front_end = max_payment / profile.monthly_income
    actual_back_end = (max_payment + profile.monthly_debts) / profile.monthly_income

    if max_home_price == 0:
        recommendation = RECOMMEND_IMPROVE
    elif actual_back_end > defaults.back_end_ratio:
        recommendation = RECOMMEND_REDUCE_DEBT
    elif actual_front_end > defaults.front_end_ratio:
        recommendation = RECOMMEND_CAUTION
    else:
        recommendation = RECOMMEND_STRONG

    logger.debug(
        "Affordability search: max payment %.2f -> max price %d",
        max_payment,
        max_home_price,
    )

    required_income = max_payment / front_end if max_payment > 0 else 0.0

    return AffordabilityResult(
        max_home_price=float(max_home_price),
        max_monthly_payment=round_currency(max_payment),
        max_loan_amount=round_currency(max_loan_amount, 0),
        required_income=round_currency(required_income),
        debt_to_income_ratio=to_percent(actual_back_end),
        front_end_ratio=to_percent(actual_front_end),
        back_end_ratio=to_percent(actual_back_end),
        recommendation=recommendation,
    )
