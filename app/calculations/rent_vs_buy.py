"""
Rent vs Buy Analysis

Projects the cumulative cost of buying (payments, escrow, maintenance,
closing costs, less equity) against renting (rent with annual increases,
plus the return the down payment and any monthly savings would have earned
if invested) over a multi-year horizon.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from app.calculations.amortization import (
    LoanTerms,
    calculate_payment,
    generate_amortization_schedule,
)
from app.calculations.validation import (
    InvalidInput,
    require_non_negative,
    require_positive,
    round_currency,
)

INTEREST_DEDUCTION_FACTOR = 0.8  # Average interest over the early years vs year one
MATERIAL_DIFFERENCE = 50_000
BUY_BREAK_EVEN_YEARS = 5
FAVORABLE_RENT_TO_PRICE = 0.005

CHOICE_BUY = "buy"
CHOICE_RENT = "rent"
CHOICE_NEUTRAL = "neutral"


@dataclass(frozen=True)
class RentVsBuyAssumptions:
    """Purchase, rent and market assumptions. Rates are in percent."""

    home_price: float
    down_payment: float
    interest_rate: float
    loan_term: int
    monthly_rent: float
    property_tax_rate: float
    home_insurance_rate: float
    hoa_fees: float  # Monthly
    maintenance_rate: float
    closing_costs: float
    rent_increase: float
    home_appreciation: float  # May be negative
    investment_return: float
    marginal_tax_rate: float
    years_to_analyze: int

    def __post_init__(self):
        require_positive("home_price", self.home_price)
        require_non_negative("down_payment", self.down_payment)
        if self.down_payment > self.home_price:
            raise InvalidInput("Down payment cannot exceed home price")
        require_non_negative("interest_rate", self.interest_rate)
        require_positive("loan_term", self.loan_term)
        for name in (
            "monthly_rent",
            "property_tax_rate",
            "home_insurance_rate",
            "hoa_fees",
            "maintenance_rate",
            "closing_costs",
            "rent_increase",
            "investment_return",
            "marginal_tax_rate",
        ):
            require_non_negative(name, getattr(self, name))
        if self.home_appreciation <= -100:
            raise InvalidInput("home_appreciation must be greater than -100%")
        require_positive("years_to_analyze", self.years_to_analyze)

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment


@dataclass(frozen=True)
class MonthlyBuyingCost:
    mortgage: float
    property_tax: float
    insurance: float
    hoa: float
    maintenance: float
    total: float
    after_tax: float


@dataclass(frozen=True)
class MonthlyComparison:
    buying: MonthlyBuyingCost
    rent: float
    difference: float  # After-tax buying cost minus rent


@dataclass(frozen=True)
class BuyingCosts:
    total_mortgage_payments: float
    total_property_tax: float
    total_insurance: float
    total_hoa: float
    total_maintenance: float
    closing_costs: float
    total: float
    home_value: float
    remaining_balance: float
    equity: float
    net_cost: float


@dataclass(frozen=True)
class RentingCosts:
    total_rent: float
    opportunity_cost: float
    investment_value: float
    net_cost: float


@dataclass(frozen=True)
class YearProjection:
    year: int
    buying_costs: BuyingCosts
    renting_costs: RentingCosts


@dataclass(frozen=True)
class Recommendation:
    choice: str
    reasoning: List[str]
    considerations: List[str]


@dataclass(frozen=True)
class RentVsBuyResult:
    monthly_comparison: MonthlyComparison
    long_term_analysis: List[YearProjection]
    break_even_point: int  # years_to_analyze + 1 when never reached
    recommendation: Recommendation


def calculate_monthly_comparison(a: RentVsBuyAssumptions) -> MonthlyComparison:
    """First-month buying cost (with the tax benefit) against rent."""
    loan_amount = a.loan_amount
    mortgage = calculate_payment(loan_amount, a.interest_rate, a.loan_term)
    property_tax = a.home_price * a.property_tax_rate / 100 / 12
    insurance = a.home_price * a.home_insurance_rate / 100 / 12
    maintenance = a.home_price * a.maintenance_rate / 100 / 12

    total = mortgage + property_tax + insurance + a.hoa_fees + maintenance

    average_interest = loan_amount * a.interest_rate / 100 / 12 * INTEREST_DEDUCTION_FACTOR
    tax_savings = (average_interest + property_tax) * a.marginal_tax_rate / 100
    after_tax = total - tax_savings

    return MonthlyComparison(
        buying=MonthlyBuyingCost(
            mortgage=mortgage,
            property_tax=round_currency(property_tax),
            insurance=round_currency(insurance),
            hoa=round_currency(a.hoa_fees),
            maintenance=round_currency(maintenance),
            total=round_currency(total),
            after_tax=round_currency(after_tax),
        ),
        rent=round_currency(a.monthly_rent),
        difference=round_currency(after_tax - a.monthly_rent),
    )


def project_years(
    a: RentVsBuyAssumptions, comparison: MonthlyComparison
) -> List[YearProjection]:
    """Cumulative buying and renting positions at the end of each year."""
    years = np.arange(1, a.years_to_analyze + 1)
    buying = comparison.buying

    # Buying side: payments and balance come from the amortization ledger
    schedule = generate_amortization_schedule(
        LoanTerms(a.loan_amount, a.interest_rate, a.loan_term)
    )
    # Loans that round to zero cents produce no rows
    if schedule:
        cumulative_payments = np.cumsum([row.payment_amount for row in schedule])
        balances = np.array([row.remaining_balance for row in schedule])
    else:
        cumulative_payments = np.zeros(1)
        balances = np.zeros(1)

    last_row = np.minimum(years * 12, len(balances)) - 1
    mortgage_paid = cumulative_payments[last_row]
    remaining_balance = balances[last_row]

    home_value = a.home_price * (1 + a.home_appreciation / 100) ** years

    # Renting side: rent steps up once a year
    annual_rent = a.monthly_rent * 12 * (1 + a.rent_increase / 100) ** (years - 1)
    total_rent = np.cumsum(annual_rent)

    growth = 1 + a.investment_return / 100
    down_payment_invested = a.down_payment * growth ** years
    monthly_difference = max(0.0, buying.after_tax - a.monthly_rent)
    if a.investment_return == 0:
        difference_invested = monthly_difference * 12 * years
    else:
        difference_invested = (
            monthly_difference * 12 * (growth ** years - 1) / (a.investment_return / 100)
        )
    investment_value = down_payment_invested + difference_invested

    projections = []
    for i, year in enumerate(years.tolist()):
        months = 12 * year
        total_tax = buying.property_tax * months
        total_insurance = buying.insurance * months
        total_hoa = buying.hoa * months
        total_maintenance = buying.maintenance * months
        total_buying = (
            mortgage_paid[i]
            + total_tax
            + total_insurance
            + total_hoa
            + total_maintenance
            + a.closing_costs
        )
        equity = home_value[i] - remaining_balance[i]
        opportunity_cost = investment_value[i] - a.down_payment

        projections.append(
            YearProjection(
                year=year,
                buying_costs=BuyingCosts(
                    total_mortgage_payments=round_currency(mortgage_paid[i]),
                    total_property_tax=round_currency(total_tax),
                    total_insurance=round_currency(total_insurance),
                    total_hoa=round_currency(total_hoa),
                    total_maintenance=round_currency(total_maintenance),
                    closing_costs=round_currency(a.closing_costs),
                    total=round_currency(total_buying),
                    home_value=round_currency(home_value[i]),
                    remaining_balance=round_currency(remaining_balance[i]),
                    equity=round_currency(equity),
                    net_cost=round_currency(total_buying - equity),
                ),
                renting_costs=RentingCosts(
                    total_rent=round_currency(total_rent[i]),
                    opportunity_cost=round_currency(opportunity_cost),
                    investment_value=round_currency(investment_value[i]),
                    net_cost=round_currency(total_rent[i] + opportunity_cost),
                ),
            )
        )

    return projections


def find_break_even_year(projections: List[YearProjection], horizon: int) -> int:
    """First year buying is cheaper than renting, else horizon + 1."""
    for row in projections:
        if row.buying_costs.net_cost < row.renting_costs.net_cost:
            return row.year
    return horizon + 1


def build_recommendation(
    a: RentVsBuyAssumptions,
    projections: List[YearProjection],
    break_even: int,
) -> Recommendation:
    final = projections[-1]
    net_difference = final.buying_costs.net_cost - final.renting_costs.net_cost
    horizon = a.years_to_analyze

    reasoning = []
    if break_even <= BUY_BREAK_EVEN_YEARS and net_difference < -MATERIAL_DIFFERENCE:
        choice = CHOICE_BUY
        reasoning.append(f"Buying becomes cheaper after {break_even} years")
        reasoning.append(f"{horizon}-year savings of ${abs(net_difference):,.0f}")
    elif break_even > horizon or net_difference > MATERIAL_DIFFERENCE:
        choice = CHOICE_RENT
        reasoning.append(f"Renting remains cheaper over {horizon} years")
        if break_even > horizon:
            reasoning.append("Break-even point beyond analysis period")
    else:
        choice = CHOICE_NEUTRAL
        reasoning.append("Financial impact is relatively neutral")
        reasoning.append("Decision should be based on lifestyle factors")

    considerations = []
    if a.monthly_rent < a.home_price * FAVORABLE_RENT_TO_PRICE:
        considerations.append("Rent-to-price ratio is favorable for buying")
    if a.home_appreciation > a.rent_increase + 1:
        considerations.append("Home appreciation significantly exceeds rent increases")
    considerations.append("Consider job stability and mobility needs")
    considerations.append("Factor in maintenance responsibilities and time commitment")
    considerations.append("Evaluate local market conditions and trends")

    return Recommendation(choice=choice, reasoning=reasoning, considerations=considerations)


def calculate_rent_vs_buy(assumptions: RentVsBuyAssumptions) -> RentVsBuyResult:
    """
    Compare renting and buying over the analysis horizon.

    Args:
        assumptions: Purchase, rent and market assumptions

    Returns:
        RentVsBuyResult with the monthly comparison, per-year projection,
        break-even year and recommendation
    """
    comparison = calculate_monthly_comparison(assumptions)
    projections = project_years(assumptions, comparison)
    break_even = find_break_even_year(projections, assumptions.years_to_analyze)

    return RentVsBuyResult(
        monthly_comparison=comparison,
        long_term_analysis=projections,
        break_even_point=break_even,
        recommendation=build_recommendation(assumptions, projections, break_even),
    )
