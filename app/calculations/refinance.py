"""
Refinance Analysis

Compares the remaining cost of an existing loan against a new loan on the
same balance, including the break-even point on closing costs.

Interest totals use payment x months - balance rather than integrating a
full schedule. This keeps both sides on the same footing but overstates
interest on the existing loan when the quoted payment is not a level
payment for the remaining term.
"""

from dataclasses import dataclass

from app.calculations.amortization import calculate_payment
from app.calculations.validation import (
    require_non_negative,
    require_positive,
    round_currency,
)

EXCELLENT_BREAK_EVEN_MONTHS = 24
LONG_BREAK_EVEN_MONTHS = 60


@dataclass(frozen=True)
class RefinanceInputs:
    """Existing loan and the proposed replacement."""

    current_loan_balance: float
    current_interest_rate: float  # Percent
    current_monthly_payment: float
    remaining_term: float  # Years
    new_interest_rate: float  # Percent
    new_loan_term: int  # Years
    closing_costs: float

    def __post_init__(self):
        require_non_negative("current_loan_balance", self.current_loan_balance)
        require_non_negative("current_interest_rate", self.current_interest_rate)
        require_non_negative("current_monthly_payment", self.current_monthly_payment)
        require_positive("remaining_term", self.remaining_term)
        require_non_negative("new_interest_rate", self.new_interest_rate)
        require_positive("new_loan_term", self.new_loan_term)
        require_non_negative("closing_costs", self.closing_costs)


@dataclass(frozen=True)
class RefinanceResult:
    """Savings and break-even for a refinance."""

    new_monthly_payment: float
    monthly_savings: float
    total_savings: float
    break_even_months: float  # inf when the new loan never pays back closing costs
    total_interest_old: float
    total_interest_new: float
    interest_savings: float
    recommendation: str

    @property
    def breaks_even(self) -> bool:
        return self.break_even_months != float("inf")


def calculate_break_even_months(closing_costs: float, monthly_savings: float) -> float:
    """Months of savings needed to recover closing costs."""
    if monthly_savings <= 0:
        return float("inf")
    return closing_costs / monthly_savings


def calculate_refinance(inputs: RefinanceInputs) -> RefinanceResult:
    """
    Calculate refinancing benefits.

    Args:
        inputs: Existing loan details and proposed new loan terms

    Returns:
        RefinanceResult with savings, interest comparison and recommendation
    """
    new_payment = calculate_payment(
        inputs.current_loan_balance, inputs.new_interest_rate, inputs.new_loan_term
    )
    monthly_savings = inputs.current_monthly_payment - new_payment
    break_even = calculate_break_even_months(inputs.closing_costs, monthly_savings)

    total_interest_old = (
        inputs.current_monthly_payment * inputs.remaining_term * 12
        - inputs.current_loan_balance
    )
    total_interest_new = new_payment * inputs.new_loan_term * 12 - inputs.current_loan_balance
    interest_savings = total_interest_old - total_interest_new
    total_savings = interest_savings - inputs.closing_costs

    if monthly_savings <= 0:
        recommendation = "Refinancing may not provide savings at this time."
    elif break_even > LONG_BREAK_EVEN_MONTHS:
        recommendation = "Consider if you plan to stay in the home long enough to break even."
    elif break_even <= EXCELLENT_BREAK_EVEN_MONTHS:
        recommendation = "Excellent opportunity to save with refinancing."
    else:
        recommendation = "Good refinancing opportunity if you plan to stay in the home."

    return RefinanceResult(
        new_monthly_payment=new_payment,
        monthly_savings=round_currency(monthly_savings),
        total_savings=round_currency(total_savings),
        break_even_months=round_currency(break_even, 1),
        total_interest_old=round_currency(total_interest_old),
        total_interest_new=round_currency(total_interest_new),
        interest_savings=round_currency(interest_savings),
        recommendation=recommendation,
    )
