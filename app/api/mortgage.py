"""
Mortgage calculator API endpoints.

Each endpoint validates a request body, hands a calculator input record to
the engine and returns the calculator's result record.
"""

import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from app.calculations import InvalidInput
from app.calculations.affordability import (
    AffordabilityProfile,
    AffordabilityResult,
    calculate_affordability,
)
from app.calculations.amortization import (
    AmortizationEntry,
    ExtraPayment,
    ExtraPaymentAnalysis,
    LoanTerms,
    analyze_extra_payments,
    calculate_total_interest,
    generate_amortization_schedule,
)
from app.calculations.arm import ARMResult, ARMTerms, calculate_arm
from app.calculations.mortgage import (
    MortgageBudget,
    MortgageInputs,
    calculate_home_insurance,
    calculate_mortgage,
)
from app.calculations.preapproval import (
    PreApprovalEstimate,
    PreApprovalInputs,
    estimate_preapproval,
)
from app.calculations.property_tax import (
    PropertyTaxInputs,
    PropertyTaxResult,
    TaxExemptions,
    calculate_detailed_property_tax,
    calculate_property_tax,
)
from app.calculations.refinance import RefinanceInputs, calculate_refinance
from app.calculations.rent_vs_buy import (
    RentVsBuyAssumptions,
    RentVsBuyResult,
    calculate_rent_vs_buy,
)
from app.calculations.validation import round_currency
from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()

LoanTerm = Literal[10, 15, 20, 25, 30]
ARMLoanTerm = Literal[15, 20, 25, 30]


def invalid_input(exc: InvalidInput, calculator: str) -> HTTPException:
    """Translate an engine validation error into a 400 response."""
    logger.warning("Rejected %s input: %s", calculator, exc)
    return HTTPException(status_code=400, detail=str(exc))


# ============================================================================
# MONTHLY PAYMENT
# ============================================================================


class MortgageInput(BaseModel):
    """Input for monthly mortgage calculation."""

    home_price: float = Field(ge=50_000, le=10_000_000)
    down_payment: float = Field(ge=0, le=2_000_000)
    loan_term: LoanTerm
    interest_rate: float = Field(ge=0.1, le=20)
    property_tax: Optional[float] = Field(default=None, ge=0)
    home_insurance: Optional[float] = Field(default=None, ge=0)
    pmi: Optional[float] = Field(default=None, ge=0)
    hoa_fees: float = Field(default=0.0, ge=0)
    utilities: float = Field(default=0.0, ge=0)
    maintenance: float = Field(default=0.0, ge=0)
    start_date: Optional[date] = None


@router.post("/calculate", response_model=MortgageBudget)
def calculate_mortgage_endpoint(inputs: MortgageInput):
    """Calculate monthly payment with escrow and the amortization schedule."""
    try:
        mortgage_inputs = MortgageInputs(**inputs.model_dump(exclude={"start_date"}))
        return calculate_mortgage(
            mortgage_inputs, settings.market_defaults(), start_date=inputs.start_date
        )
    except InvalidInput as e:
        raise invalid_input(e, "mortgage")


# ============================================================================
# AMORTIZATION
# ============================================================================


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount: float = Field(ge=10_000, le=5_000_000)
    interest_rate: float = Field(ge=0.1, le=20)
    loan_term: LoanTerm
    start_date: Optional[date] = None


class AmortizationResponse(BaseModel):
    loan_amount: float
    interest_rate: float
    loan_term: int
    total_payments: int
    total_interest: float
    schedule: List[AmortizationEntry]


@router.post("/amortization", response_model=AmortizationResponse)
def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    try:
        terms = LoanTerms(inputs.loan_amount, inputs.interest_rate, inputs.loan_term)
    except InvalidInput as e:
        raise invalid_input(e, "amortization")

    schedule = generate_amortization_schedule(terms, inputs.start_date)

    return AmortizationResponse(
        loan_amount=inputs.loan_amount,
        interest_rate=inputs.interest_rate,
        loan_term=inputs.loan_term,
        total_payments=len(schedule),
        total_interest=calculate_total_interest(schedule),
        schedule=schedule,
    )


class ExtraPaymentInput(BaseModel):
    kind: Literal["monthly", "yearly", "one-time"]
    amount: float = Field(ge=0)
    month: int = Field(default=1, ge=1, le=12)
    year: int = Field(default=1, ge=1)
    start_year: int = Field(default=1, ge=1)


class ExtraPaymentsInput(BaseModel):
    """Input for extra payment analysis."""

    loan_amount: float = Field(ge=10_000, le=5_000_000)
    interest_rate: float = Field(ge=0.1, le=20)
    loan_term: LoanTerm
    extra_payments: List[ExtraPaymentInput] = Field(min_length=1)


@router.post("/extra-payments", response_model=ExtraPaymentAnalysis)
def calculate_extra_payments(inputs: ExtraPaymentsInput):
    """Interest and time saved by paying extra principal."""
    try:
        terms = LoanTerms(inputs.loan_amount, inputs.interest_rate, inputs.loan_term)
        extras = [ExtraPayment(**extra.model_dump()) for extra in inputs.extra_payments]
    except InvalidInput as e:
        raise invalid_input(e, "extra payments")

    return analyze_extra_payments(terms, extras)


# ============================================================================
# AFFORDABILITY
# ============================================================================


class AffordabilityInput(BaseModel):
    """Input for affordability calculation."""

    monthly_income: float = Field(ge=1_000, le=100_000)
    monthly_debts: float = Field(ge=0, le=50_000)
    down_payment: float = Field(ge=0, le=2_000_000)
    interest_rate: float = Field(ge=0.1, le=20)
    loan_term: LoanTerm
    property_tax_rate: Optional[float] = Field(default=None, ge=0, le=0.05)
    insurance_rate: Optional[float] = Field(default=None, ge=0, le=0.02)
    debt_to_income_ratio: Optional[float] = Field(default=None, ge=0.1, le=0.5)


@router.post("/affordability", response_model=AffordabilityResult)
def calculate_affordability_endpoint(inputs: AffordabilityInput):
    """Maximum home price supported by income and debts."""
    try:
        profile = AffordabilityProfile(**inputs.model_dump())
    except InvalidInput as e:
        raise invalid_input(e, "affordability")

    return calculate_affordability(profile, settings.market_defaults())


# ============================================================================
# REFINANCE
# ============================================================================


class RefinanceInput(BaseModel):
    """Input for refinance calculation."""

    current_loan_balance: float = Field(ge=10_000, le=5_000_000)
    current_interest_rate: float = Field(ge=0.1, le=20)
    current_monthly_payment: float = Field(ge=100, le=50_000)
    remaining_term: float = Field(ge=1, le=30)
    new_interest_rate: float = Field(ge=0.1, le=20)
    new_loan_term: LoanTerm
    closing_costs: float = Field(ge=0, le=50_000)


class RefinanceResponse(BaseModel):
    """Refinance results; break_even_months is null when never reached."""

    new_monthly_payment: float
    monthly_savings: float
    total_savings: float
    break_even_months: Optional[float] = None
    total_interest_old: float
    total_interest_new: float
    interest_savings: float
    recommendation: str


@router.post("/refinance", response_model=RefinanceResponse)
def calculate_refinance_endpoint(inputs: RefinanceInput):
    """Refinance savings and break-even analysis."""
    try:
        result = calculate_refinance(RefinanceInputs(**inputs.model_dump()))
    except InvalidInput as e:
        raise invalid_input(e, "refinance")

    return RefinanceResponse(
        new_monthly_payment=result.new_monthly_payment,
        monthly_savings=result.monthly_savings,
        total_savings=result.total_savings,
        break_even_months=result.break_even_months if result.breaks_even else None,
        total_interest_old=result.total_interest_old,
        total_interest_new=result.total_interest_new,
        interest_savings=result.interest_savings,
        recommendation=result.recommendation,
    )


# ============================================================================
# ADJUSTABLE RATE
# ============================================================================


class ARMInput(BaseModel):
    """Input for ARM calculation."""

    home_price: float = Field(ge=50_000, le=10_000_000)
    down_payment: float = Field(ge=0, le=2_000_000)
    loan_term: ARMLoanTerm
    initial_rate: float = Field(ge=0.1, le=20)
    initial_period: Literal[1, 3, 5, 7, 10]
    adjustment_period: Literal[1, 2, 3]
    initial_cap: float = Field(ge=0.1, le=5)
    periodic_cap: float = Field(ge=0.1, le=5)
    lifetime_cap: float = Field(ge=1, le=10)
    margin: float = Field(ge=1, le=5)
    current_index: float = Field(ge=0.1, le=15)


@router.post("/arm", response_model=ARMResult)
def calculate_arm_endpoint(inputs: ARMInput):
    """Adjustable-rate payment scenarios and fixed-rate comparison."""
    try:
        terms = ARMTerms(**inputs.model_dump())
    except InvalidInput as e:
        raise invalid_input(e, "ARM")

    return calculate_arm(terms, settings.market_defaults())


# ============================================================================
# PROPERTY TAX AND INSURANCE
# ============================================================================


class PropertyTaxEstimate(BaseModel):
    home_price: float
    county: str
    annual_property_tax: float
    monthly_property_tax: float


@router.get("/property-tax/{home_price}", response_model=PropertyTaxEstimate)
def get_property_tax(
    home_price: float,
    county: Optional[str] = Query(default=None),
):
    """Quick property tax estimate at the county's flat rate."""
    if not 50_000 <= home_price <= 10_000_000:
        raise HTTPException(
            status_code=400,
            detail="Invalid home price. Must be between $50,000 and $10,000,000",
        )

    defaults = settings.market_defaults()
    county = (county or defaults.default_county).lower()
    annual = calculate_property_tax(home_price, county, defaults=defaults)

    return PropertyTaxEstimate(
        home_price=home_price,
        county=county,
        annual_property_tax=annual,
        monthly_property_tax=round_currency(annual / 12),
    )


class ExemptionsInput(BaseModel):
    homestead: bool = False
    senior: bool = False
    veteran: bool = False


class PropertyTaxInput(BaseModel):
    """Input for detailed property tax calculation."""

    home_price: float = Field(ge=50_000, le=10_000_000)
    county: Literal[
        "riverside",
        "san-bernardino",
        "orange",
        "los-angeles",
        "ventura",
        "imperial",
        "kern",
        "santa-barbara",
    ]
    exemptions: ExemptionsInput = ExemptionsInput()


@router.post("/property-tax-detailed", response_model=PropertyTaxResult)
def calculate_property_tax_detailed(inputs: PropertyTaxInput):
    """Property tax with county breakdown and exemptions."""
    tax_inputs = PropertyTaxInputs(
        home_price=inputs.home_price,
        county=inputs.county,
        exemptions=TaxExemptions(**inputs.exemptions.model_dump()),
    )
    return calculate_detailed_property_tax(tax_inputs, defaults=settings.market_defaults())


class InsuranceEstimate(BaseModel):
    home_price: float
    high_risk: bool
    annual_insurance: float
    monthly_insurance: float


@router.get("/insurance/{home_price}", response_model=InsuranceEstimate)
def get_home_insurance(home_price: float, high_risk: bool = False):
    """Homeowner's insurance estimate."""
    if not 50_000 <= home_price <= 10_000_000:
        raise HTTPException(
            status_code=400,
            detail="Invalid home price. Must be between $50,000 and $10,000,000",
        )

    annual = calculate_home_insurance(home_price, high_risk, settings.market_defaults())

    return InsuranceEstimate(
        home_price=home_price,
        high_risk=high_risk,
        annual_insurance=annual,
        monthly_insurance=round_currency(annual / 12),
    )


# ============================================================================
# RENT VS BUY
# ============================================================================


class RentVsBuyInput(BaseModel):
    """Input for rent vs buy analysis. Rates are percentages."""

    home_price: float = Field(ge=50_000, le=10_000_000)
    down_payment: float = Field(ge=0, le=2_000_000)
    interest_rate: float = Field(ge=0.1, le=20)
    loan_term: ARMLoanTerm
    monthly_rent: float = Field(ge=500, le=20_000)
    property_tax_rate: float = Field(ge=0, le=5)
    home_insurance_rate: float = Field(ge=0, le=2)
    hoa_fees: float = Field(ge=0, le=2_000)
    maintenance_rate: float = Field(ge=0, le=3)
    closing_costs: float = Field(ge=0, le=100_000)
    rent_increase: float = Field(ge=0, le=10)
    home_appreciation: float = Field(ge=-5, le=15)
    investment_return: float = Field(ge=0, le=20)
    marginal_tax_rate: float = Field(ge=0, le=50)
    years_to_analyze: Literal[5, 10, 15, 20]


@router.post("/rent-vs-buy", response_model=RentVsBuyResult)
def calculate_rent_vs_buy_endpoint(inputs: RentVsBuyInput):
    """Compare renting and buying over the analysis horizon."""
    try:
        assumptions = RentVsBuyAssumptions(**inputs.model_dump())
    except InvalidInput as e:
        raise invalid_input(e, "rent vs buy")

    return calculate_rent_vs_buy(assumptions)


# ============================================================================
# PRE-APPROVAL
# ============================================================================


@router.get("/pre-approval-estimate", response_model=PreApprovalEstimate)
def get_preapproval_estimate(
    annual_income: float = Query(gt=0),
    monthly_debts: float = Query(ge=0),
    credit_score: int = Query(ge=300, le=850),
    down_payment: float = Query(ge=0),
    home_price: float = Query(gt=0),
    loan_type: Literal["conventional", "FHA", "VA", "jumbo"] = "conventional",
):
    """Pre-approval likelihood from basic borrower parameters."""
    try:
        inputs = PreApprovalInputs(
            annual_income=annual_income,
            monthly_debts=monthly_debts,
            credit_score=credit_score,
            down_payment=down_payment,
            home_price=home_price,
            loan_type=loan_type,
        )
    except InvalidInput as e:
        raise invalid_input(e, "pre-approval")

    return estimate_preapproval(inputs, settings.market_defaults())
