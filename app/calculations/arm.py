"""
Adjustable-Rate Mortgage Projection

Projects a capped, periodically adjusting rate over the life of the loan,
assuming every adjustment moves the rate up by the full cap, and compares
the worst case to a fixed-rate alternative.

Each year's payment is a standalone recomputation: the balance the loan
would have at the initial rate after the elapsed years, re-amortized at
that year's rate over the remaining term. It does not carry higher
interest from earlier adjusted years forward, so later-year payments run
slightly below what a servicer would bill.
"""

import math
from dataclasses import dataclass
from typing import List

from app.calculations.amortization import calculate_payment, calculate_remaining_balance
from app.calculations.defaults import DEFAULT_MARKET, MarketDefaults
from app.calculations.validation import (
    InvalidInput,
    require_non_negative,
    require_positive,
    round_currency,
)

SCENARIO_CURRENT = "current"
SCENARIO_RISING = "rising"
SCENARIO_MAX = "max"


@dataclass(frozen=True)
class ARMTerms:
    """Purchase, loan term and rate-adjustment structure of an ARM."""

    home_price: float
    down_payment: float
    loan_term: int  # Years
    initial_rate: float  # Percent
    initial_period: int  # Years before first adjustment
    adjustment_period: int  # Years between adjustments
    initial_cap: float  # Max increase at first adjustment (percentage points)
    periodic_cap: float  # Max increase at later adjustments
    lifetime_cap: float  # Max increase over the life of the loan
    margin: float  # Lender margin added to the index
    current_index: float  # Current index rate (e.g. SOFR)

    def __post_init__(self):
        require_positive("home_price", self.home_price)
        require_non_negative("down_payment", self.down_payment)
        if self.down_payment > self.home_price:
            raise InvalidInput("Down payment cannot exceed home price")
        require_positive("loan_term", self.loan_term)
        require_non_negative("initial_rate", self.initial_rate)
        require_non_negative("initial_period", self.initial_period)
        require_positive("adjustment_period", self.adjustment_period)
        for name in ("initial_cap", "periodic_cap", "lifetime_cap", "margin", "current_index"):
            require_non_negative(name, getattr(self, name))

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def rate_ceiling(self) -> float:
        return self.initial_rate + self.lifetime_cap


@dataclass(frozen=True)
class ARMYear:
    """Rate and payment in effect for one loan year."""

    year: int
    rate: float
    payment: float
    scenario: str


@dataclass(frozen=True)
class FixedRateComparison:
    rate: float
    payment: float
    total_interest: float


@dataclass(frozen=True)
class ARMResult:
    """Initial, worst-case and year-by-year ARM payments."""

    initial_monthly_payment: float
    max_possible_payment: float
    max_rate: float
    fully_indexed_rate: float
    index_exceeds_ceiling: bool
    worst_case_scenario: ARMYear
    payment_schedule: List[ARMYear]
    total_interest_current: float
    total_interest_worst_case: float
    fixed_loan_comparison: FixedRateComparison


def is_adjustment_year(year: int, initial_period: int, adjustment_period: int) -> bool:
    """Rates reset the year after the fixed period, then every adjustment period."""
    if year <= initial_period:
        return False
    return (year - initial_period - 1) % adjustment_period == 0


def project_rates(terms: ARMTerms) -> List[float]:
    """Worst-case rate for each loan year, capped at the lifetime ceiling."""
    rates = []
    rate = terms.initial_rate

    for year in range(1, terms.loan_term + 1):
        if is_adjustment_year(year, terms.initial_period, terms.adjustment_period):
            if year == terms.initial_period + 1:
                step = terms.initial_cap
            else:
                step = terms.periodic_cap
            rate = min(rate + step, terms.rate_ceiling)
        rates.append(rate)

    return rates


def scenario_for(year: int, rate: float, terms: ARMTerms) -> str:
    if year <= terms.initial_period:
        return SCENARIO_CURRENT
    if math.isclose(rate, terms.rate_ceiling):
        return SCENARIO_MAX
    return SCENARIO_RISING


def payment_for_year(terms: ARMTerms, year: int, rate: float) -> float:
    """Payment re-amortized at `rate` over the years left from `year` on."""
    balance = calculate_remaining_balance(
        terms.loan_amount, terms.initial_rate, terms.loan_term, (year - 1) * 12
    )
    remaining_years = terms.loan_term - year + 1
    return calculate_payment(balance, rate, remaining_years)


def generate_arm_schedule(terms: ARMTerms) -> List[ARMYear]:
    """Year-by-year rate, payment and scenario tag."""
    return [
        ARMYear(
            year=year,
            rate=rate,
            payment=payment_for_year(terms, year, rate),
            scenario=scenario_for(year, rate, terms),
        )
        for year, rate in enumerate(project_rates(terms), start=1)
    ]


def calculate_arm(
    terms: ARMTerms,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> ARMResult:
    """
    Calculate ARM payment scenarios.

    Args:
        terms: Loan and rate-adjustment structure
        defaults: Supplies the fixed-rate spread for the comparison loan

    Returns:
        ARMResult with schedule, worst case and fixed-rate comparison
    """
    loan_amount = terms.loan_amount
    total_payments = terms.loan_term * 12

    initial_payment = calculate_payment(loan_amount, terms.initial_rate, terms.loan_term)
    max_rate = terms.rate_ceiling
    max_payment = calculate_payment(loan_amount, max_rate, terms.loan_term)

    schedule = generate_arm_schedule(terms)
    worst_case = max(schedule, key=lambda row: row.payment)

    fully_indexed = terms.current_index + terms.margin

    fixed_rate = terms.initial_rate + defaults.fixed_rate_spread
    fixed_payment = calculate_payment(loan_amount, fixed_rate, terms.loan_term)

    return ARMResult(
        initial_monthly_payment=initial_payment,
        max_possible_payment=max_payment,
        max_rate=max_rate,
        fully_indexed_rate=fully_indexed,
        index_exceeds_ceiling=fully_indexed > max_rate,
        worst_case_scenario=worst_case,
        payment_schedule=schedule,
        total_interest_current=round_currency(initial_payment * total_payments - loan_amount),
        total_interest_worst_case=round_currency(max_payment * total_payments - loan_amount),
        fixed_loan_comparison=FixedRateComparison(
            rate=fixed_rate,
            payment=fixed_payment,
            total_interest=round_currency(fixed_payment * total_payments - loan_amount),
        ),
    )
