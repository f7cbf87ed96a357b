"""
Monthly Mortgage Budget

Combines principal and interest with escrow items (property tax,
insurance, PMI, HOA) into the full monthly housing payment.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from app.calculations.amortization import (
    AmortizationEntry,
    LoanTerms,
    calculate_payment,
    generate_amortization_schedule,
)
from app.calculations.defaults import DEFAULT_MARKET, MarketDefaults
from app.calculations.validation import (
    InvalidInput,
    require_non_negative,
    require_positive,
    round_currency,
)


@dataclass(frozen=True)
class MortgageInputs:
    """Purchase and financing details for a single home."""

    home_price: float
    down_payment: float
    loan_term: int  # Years
    interest_rate: float  # Percent
    property_tax: Optional[float] = None  # Annual amount
    home_insurance: Optional[float] = None  # Annual amount
    pmi: Optional[float] = None  # Monthly override
    hoa_fees: float = 0.0  # Monthly
    utilities: float = 0.0  # Monthly estimate, informational
    maintenance: float = 0.0  # Monthly estimate, informational

    def __post_init__(self):
        require_positive("home_price", self.home_price)
        require_non_negative("down_payment", self.down_payment)
        if self.down_payment > self.home_price:
            raise InvalidInput("Down payment cannot exceed home price")
        for name in ("property_tax", "home_insurance", "pmi"):
            value = getattr(self, name)
            if value is not None:
                require_non_negative(name, value)
        require_non_negative("hoa_fees", self.hoa_fees)
        require_non_negative("utilities", self.utilities)
        require_non_negative("maintenance", self.maintenance)

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def loan_terms(self) -> LoanTerms:
        return LoanTerms(
            principal=self.loan_amount,
            annual_rate=self.interest_rate,
            term_years=self.loan_term,
        )


@dataclass(frozen=True)
class MortgageBudget:
    """Monthly housing payment broken down by line item."""

    home_price: float
    down_payment: float
    loan_amount: float
    principal_and_interest: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_pmi: float
    monthly_hoa: float
    total_monthly_payment: float
    total_interest: float
    total_cost: float
    payoff_date: date
    amortization_schedule: List[AmortizationEntry]

    @property
    def monthly_payment(self) -> float:
        return self.principal_and_interest


def calculate_monthly_pmi(
    home_price: float,
    down_payment: float,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> float:
    """PMI is charged on the loan only while equity is below the threshold."""
    if down_payment / home_price >= defaults.pmi_threshold:
        return 0.0
    return (home_price - down_payment) * defaults.pmi_rate / 12


def calculate_mortgage(
    inputs: MortgageInputs,
    defaults: MarketDefaults = DEFAULT_MARKET,
    start_date: Optional[date] = None,
) -> MortgageBudget:
    """
    Calculate the full monthly mortgage budget.

    Explicit annual tax/insurance amounts override the default rates, and
    an explicit PMI amount always wins over the computed one. Each line is
    rounded to cents before the total is summed.

    Args:
        inputs: Purchase and financing details
        defaults: Escrow rates to fall back on
        start_date: First payment date (defaults to today)

    Returns:
        MortgageBudget with line items, totals and amortization schedule
    """
    loan_amount = inputs.loan_amount
    months = inputs.loan_term * 12

    principal_and_interest = calculate_payment(
        loan_amount, inputs.interest_rate, inputs.loan_term
    )

    if inputs.property_tax is not None:
        monthly_tax = inputs.property_tax / 12
    else:
        monthly_tax = inputs.home_price * defaults.property_tax_rate / 12

    if inputs.home_insurance is not None:
        monthly_insurance = inputs.home_insurance / 12
    else:
        monthly_insurance = inputs.home_price * defaults.home_insurance_rate / 12

    if inputs.pmi is not None:
        monthly_pmi = inputs.pmi
    else:
        monthly_pmi = calculate_monthly_pmi(inputs.home_price, inputs.down_payment, defaults)

    line_items = [
        principal_and_interest,
        round_currency(monthly_tax),
        round_currency(monthly_insurance),
        round_currency(monthly_pmi),
        round_currency(inputs.hoa_fees),
    ]

    total_interest = principal_and_interest * months - loan_amount

    if start_date is None:
        start_date = date.today()

    return MortgageBudget(
        home_price=inputs.home_price,
        down_payment=inputs.down_payment,
        loan_amount=loan_amount,
        principal_and_interest=principal_and_interest,
        monthly_property_tax=line_items[1],
        monthly_insurance=line_items[2],
        monthly_pmi=line_items[3],
        monthly_hoa=line_items[4],
        total_monthly_payment=round_currency(sum(line_items)),
        total_interest=round_currency(total_interest),
        total_cost=round_currency(inputs.home_price + total_interest),
        payoff_date=start_date + relativedelta(years=inputs.loan_term),
        amortization_schedule=generate_amortization_schedule(
            inputs.loan_terms, start_date
        ),
    )


def calculate_home_insurance(
    home_price: float,
    high_risk_area: bool = False,
    defaults: MarketDefaults = DEFAULT_MARKET,
) -> float:
    """
    Estimate the annual homeowner's insurance premium.

    High-risk areas (wildfire, earthquake zones) are priced at a multiple
    of the base rate.
    """
    require_positive("home_price", home_price)
    rate = defaults.home_insurance_rate
    if high_risk_area:
        rate *= defaults.high_risk_insurance_multiplier
    return round_currency(home_price * rate)
