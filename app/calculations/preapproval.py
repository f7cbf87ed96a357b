"""
Pre-Approval Estimate

Rough likelihood-of-approval score and rate quote from credit score,
debt-to-income and loan-to-value.
"""

from dataclasses import dataclass
from typing import List

from app.calculations.defaults import DEFAULT_MARKET, MarketDefaults
from app.calculations.validation import (
    InvalidInput,
    require_non_negative,
    require_positive,
    round_currency,
)

LOAN_TYPES = ("conventional", "FHA", "VA", "jumbo")


@dataclass(frozen=True)
class PreApprovalInputs:
    annual_income: float
    monthly_debts: float
    credit_score: int
    down_payment: float
    home_price: float
    loan_type: str = "conventional"

    def __post_init__(self):
        require_positive("annual_income", self.annual_income)
        require_non_negative("monthly_debts", self.monthly_debts)
        require_positive("credit_score", self.credit_score)
        require_non_negative("down_payment", self.down_payment)
        require_positive("home_price", self.home_price)
        if self.down_payment > self.home_price:
            raise InvalidInput("Down payment cannot exceed home price")
        if self.loan_type not in LOAN_TYPES:
            raise InvalidInput(f"Loan type must be one of {', '.join(LOAN_TYPES)}")


@dataclass(frozen=True)
class PreApprovalEstimate:
    approval_likelihood: int  # 0-100
    estimated_rate: float  # Percent
    dti_ratio: float  # Percent
    ltv_ratio: float  # Percent
    recommendations: List[str]


def estimate_preapproval(
    inputs: PreApprovalInputs,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> PreApprovalEstimate:
    """Score approval likelihood starting from a neutral 50."""
    monthly_income = inputs.annual_income / 12
    dti = inputs.monthly_debts / monthly_income * 100
    ltv = (inputs.home_price - inputs.down_payment) / inputs.home_price * 100

    likelihood = 50
    rate = defaults.base_rate

    credit = inputs.credit_score
    if credit >= 760:
        likelihood += 30
        rate -= 0.5
    elif credit >= 700:
        likelihood += 20
        rate -= 0.25
    elif credit >= 660:
        likelihood += 10
    elif credit < 620:
        likelihood -= 20
        rate += 0.5

    if dti <= 28:
        likelihood += 20
    elif dti <= 36:
        likelihood += 10
    elif dti > 43:
        likelihood -= 20

    if ltv <= 80:
        likelihood += 15
    elif ltv > 95:
        likelihood -= 15

    recommendations = []
    if credit < 700:
        recommendations.append("Consider improving your credit score for better rates")
    if dti > 36:
        recommendations.append("Pay down existing debts to improve debt-to-income ratio")
    if ltv > 80:
        recommendations.append("Consider increasing down payment to avoid PMI")

    return PreApprovalEstimate(
        approval_likelihood=min(max(likelihood, 0), 100),
        estimated_rate=rate,
        dti_ratio=round_currency(dti, 1),
        ltv_ratio=round_currency(ltv, 1),
        recommendations=recommendations,
    )
