"""
Loan Amortization Calculations

Implements the level-payment formula and the per-period amortization
ledger, including schedules that carry extra principal payments.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from app.calculations.validation import (
    InvalidInput,
    require_non_negative,
    require_positive,
    require_whole_years,
    round_currency,
)

logger = logging.getLogger(__name__)

EXTRA_PAYMENT_KINDS = ("monthly", "yearly", "one-time")


@dataclass(frozen=True)
class LoanTerms:
    """Amount, annual rate (percent) and term of a fixed-rate loan."""

    principal: float
    annual_rate: float  # Percent, e.g. 7.25 for 7.25%
    term_years: int

    def __post_init__(self):
        require_non_negative("principal", self.principal)
        require_non_negative("annual_rate", self.annual_rate)
        require_whole_years("term_years", self.term_years)

    @property
    def total_months(self) -> int:
        return int(self.term_years * 12)

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate / 100 / 12


@dataclass(frozen=True)
class AmortizationEntry:
    """One row of the amortization ledger."""

    payment_index: int
    scheduled_date: date
    payment_amount: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float


@dataclass(frozen=True)
class ExtraPayment:
    """
    Additional principal paid on top of the scheduled payment.

    kind:
        monthly  - every month (from start_year on, if given)
        yearly   - once a year in calendar position `month` (1-12)
        one-time - once, in the first month of loan year `year`
    """

    kind: str
    amount: float
    month: int = 1
    year: int = 1
    start_year: int = 1

    def __post_init__(self):
        if self.kind not in EXTRA_PAYMENT_KINDS:
            raise InvalidInput(
                f"Extra payment kind must be one of {', '.join(EXTRA_PAYMENT_KINDS)}"
            )
        require_non_negative("extra payment amount", self.amount)
        if not 1 <= self.month <= 12:
            raise InvalidInput("Extra payment month must be between 1 and 12")
        require_positive("extra payment year", self.year)
        require_positive("extra payment start year", self.start_year)

    def amount_for(self, period: int) -> float:
        """Extra principal due in the given 1-based payment period."""
        loan_year = (period - 1) // 12 + 1
        month_in_year = (period - 1) % 12 + 1

        if self.kind == "one-time":
            return self.amount if loan_year == self.year and month_in_year == 1 else 0.0
        if loan_year < self.start_year:
            return 0.0
        if self.kind == "monthly":
            return self.amount
        return self.amount if month_in_year == self.month else 0.0


@dataclass(frozen=True)
class ExtraPaymentSummary:
    """Totals for one schedule (standard or accelerated)."""

    total_interest: float
    total_paid: float
    payoff_months: int


@dataclass(frozen=True)
class ExtraPaymentAnalysis:
    """Standard schedule compared against one carrying extra payments."""

    monthly_payment: float
    standard: ExtraPaymentSummary
    with_extra_payments: ExtraPaymentSummary
    interest_saved: float
    months_saved: int
    total_saved: float


def calculate_payment(principal: float, annual_rate: float, term_years: float) -> float:
    """
    Calculate the level monthly payment (principal + interest).

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent (e.g., 7.25)
        term_years: Loan term in years

    Returns:
        Monthly payment rounded to cents

    Raises:
        InvalidInput: On negative or NaN amounts, or a term that is not a
            positive whole number of years
    """
    require_non_negative("principal", principal)
    require_non_negative("annual_rate", annual_rate)
    require_whole_years("term_years", term_years)

    months = term_years * 12
    monthly_rate = annual_rate / 100 / 12

    if monthly_rate == 0:
        return round_currency(principal / months)

    growth = (1 + monthly_rate) ** months
    payment = principal * monthly_rate * growth / (growth - 1)

    return round_currency(payment)


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    term_years: float,
    payments_completed: int,
) -> float:
    """Closed-form balance after N level payments (unrounded payment)."""
    require_non_negative("principal", principal)
    require_non_negative("annual_rate", annual_rate)
    require_whole_years("term_years", term_years)

    months = term_years * 12
    monthly_rate = annual_rate / 100 / 12

    if payments_completed >= months:
        return 0.0

    if monthly_rate == 0:
        return max(0.0, principal - principal / months * payments_completed)

    growth = (1 + monthly_rate) ** months
    payment = principal * monthly_rate * growth / (growth - 1)
    balance = principal * ((1 + monthly_rate) ** payments_completed) - payment * (
        ((1 + monthly_rate) ** payments_completed - 1) / monthly_rate
    )

    return max(0.0, balance)


def generate_amortization_schedule(
    terms: LoanTerms,
    start_date: Optional[date] = None,
    extra_payments: Sequence[ExtraPayment] = (),
) -> List[AmortizationEntry]:
    """
    Generate the full amortization schedule.

    Interest is charged on the running balance and rounded to cents, so
    each row satisfies principal + interest == payment exactly. The final
    scheduled period clears whatever balance is left, and the schedule
    stops early once the balance reaches zero.

    Args:
        terms: Loan amount, rate and term
        start_date: Date of first payment (defaults to today)
        extra_payments: Additional principal payments to apply

    Returns:
        List of amortization rows
    """
    payment = calculate_payment(terms.principal, terms.annual_rate, terms.term_years)
    monthly_rate = terms.monthly_rate
    total_months = terms.total_months
    balance = round_currency(terms.principal)

    if start_date is None:
        start_date = date.today()

    schedule = []

    for period in range(1, total_months + 1):
        if balance <= 0:
            break

        interest = round_currency(balance * monthly_rate)
        extra = sum(item.amount_for(period) for item in extra_payments)

        if period == total_months:
            # Final period absorbs rounding residue
            principal_pmt = balance
        else:
            principal_pmt = round_currency(min(payment - interest + extra, balance))

        balance = round_currency(balance - principal_pmt)

        schedule.append(
            AmortizationEntry(
                payment_index=period,
                scheduled_date=start_date + relativedelta(months=period - 1),
                payment_amount=round_currency(principal_pmt + interest),
                principal_portion=principal_pmt,
                interest_portion=interest,
                remaining_balance=balance,
            )
        )

    if len(schedule) < total_months:
        logger.debug(
            "Loan of %.2f paid off after %d of %d payments",
            terms.principal,
            len(schedule),
            total_months,
        )

    return schedule


def calculate_total_interest(schedule: Sequence[AmortizationEntry]) -> float:
    """Calculate total interest paid over the schedule."""
    return round_currency(sum(row.interest_portion for row in schedule))


def calculate_total_paid(schedule: Sequence[AmortizationEntry]) -> float:
    """Calculate total of all payments in the schedule."""
    return round_currency(sum(row.payment_amount for row in schedule))


def analyze_extra_payments(
    terms: LoanTerms,
    extra_payments: Sequence[ExtraPayment],
    start_date: Optional[date] = None,
) -> ExtraPaymentAnalysis:
    """
    Compare the standard schedule with one that carries extra payments.

    Both sides are integrated from their ledgers, so the savings reflect
    interest actually avoided rather than a payment x term approximation.
    """
    standard_schedule = generate_amortization_schedule(terms, start_date)
    accelerated_schedule = generate_amortization_schedule(
        terms, start_date, extra_payments=extra_payments
    )

    standard = ExtraPaymentSummary(
        total_interest=calculate_total_interest(standard_schedule),
        total_paid=calculate_total_paid(standard_schedule),
        payoff_months=len(standard_schedule),
    )
    accelerated = ExtraPaymentSummary(
        total_interest=calculate_total_interest(accelerated_schedule),
        total_paid=calculate_total_paid(accelerated_schedule),
        payoff_months=len(accelerated_schedule),
    )

    return ExtraPaymentAnalysis(
        monthly_payment=calculate_payment(terms.principal, terms.annual_rate, terms.term_years),
        standard=standard,
        with_extra_payments=accelerated,
        interest_saved=round_currency(standard.total_interest - accelerated.total_interest),
        months_saved=standard.payoff_months - accelerated.payoff_months,
        total_saved=round_currency(standard.total_paid - accelerated.total_paid),
    )
