"""
Tests for payment, amortization, escrow, refinance and property tax calculations.
"""

import math

import pytest
from datetime import date

from app.calculations import InvalidInput
from app.calculations.amortization import (
    ExtraPayment,
    LoanTerms,
    analyze_extra_payments,
    calculate_payment,
    calculate_remaining_balance,
    calculate_total_interest,
    generate_amortization_schedule,
)
from app.calculations.mortgage import (
    MortgageInputs,
    calculate_home_insurance,
    calculate_mortgage,
)
from app.calculations.property_tax import (
    PropertyTaxInputs,
    TaxExemptions,
    calculate_detailed_property_tax,
    calculate_property_tax,
)
from app.calculations.refinance import RefinanceInputs, calculate_refinance
from app.calculations.validation import round_currency


class TestRounding:
    """Test currency rounding."""

    def test_rounds_half_up(self):
        assert round_currency(2.345) == 2.35
        assert round_currency(2.5, 0) == 3.0
        assert round_currency(0.125) == 0.13

    def test_infinity_passes_through(self):
        assert round_currency(float("inf")) == float("inf")


class TestPaymentFormula:
    """Test monthly payment calculation."""

    def test_calculate_payment(self):
        """Test monthly payment calculation."""
        # $1M loan at 5% for 30 years
        payment = calculate_payment(1000000, 5.0, 30)
        assert payment == 5368.22

    def test_calculate_payment_small_loan(self):
        # $100k at 6% for 30 years is the textbook $599.55
        assert calculate_payment(100000, 6.0, 30) == 599.55

    def test_zero_rate_is_straight_line(self):
        """Zero-rate loans divide principal evenly over the term."""
        assert calculate_payment(360000, 0, 30) == 1000.0
        assert calculate_payment(120000, 0, 10) == 1000.0

    def test_zero_principal(self):
        assert calculate_payment(0, 7.25, 30) == 0.0

    def test_rounded_to_cents(self):
        payment = calculate_payment(520000, 7.25, 30)
        assert payment == round(payment, 2)

    @pytest.mark.parametrize(
        "principal, rate, term",
        [
            (-1, 5.0, 30),
            (100000, -0.5, 30),
            (100000, 5.0, 0),
            (100000, 5.0, -10),
            (100000, 5.0, 2.5),
            (float("nan"), 5.0, 30),
            (100000, float("nan"), 30),
        ],
    )
    def test_invalid_inputs_rejected(self, principal, rate, term):
        with pytest.raises(InvalidInput):
            calculate_payment(principal, rate, term)

    @pytest.mark.parametrize("term_years", [0, -5, 0.04, 2.5])
    def test_invalid_loan_terms_rejected(self, term_years):
        """Terms must be a positive whole number of years."""
        with pytest.raises(InvalidInput):
            LoanTerms(principal=100000, annual_rate=5.0, term_years=term_years)

    def test_whole_float_term_accepted(self):
        assert LoanTerms(100000, 6.0, 30.0).total_months == 360

    def test_remaining_balance(self):
        # Nothing paid -> full principal; everything paid -> zero
        assert calculate_remaining_balance(100000, 6.0, 30, 0) == pytest.approx(100000)
        assert calculate_remaining_balance(100000, 6.0, 30, 360) == 0.0
        halfway = calculate_remaining_balance(100000, 6.0, 30, 180)
        assert 60000 < halfway < 80000


class TestAmortization:
    """Test loan amortization schedules."""

    def test_amortization_schedule_length(self):
        """Test amortization schedule has correct number of periods."""
        schedule = generate_amortization_schedule(LoanTerms(100000, 6.0, 5))
        assert len(schedule) == 60

    def test_first_month_split(self, standard_loan, first_payment_date):
        """$520k at 7.25%: first month interest is $3,141.67."""
        schedule = generate_amortization_schedule(standard_loan, first_payment_date)
        first = schedule[0]
        payment = calculate_payment(520000, 7.25, 30)

        assert first.payment_index == 1
        assert first.interest_portion == pytest.approx(3141.67, abs=0.01)
        assert first.principal_portion == pytest.approx(payment - 3141.67, abs=0.01)
        assert first.payment_amount == payment

    def test_final_balance_is_zero(self, standard_loan):
        schedule = generate_amortization_schedule(standard_loan)
        assert len(schedule) == 360
        assert schedule[-1].remaining_balance == 0

    def test_principal_sums_to_loan(self, standard_loan):
        schedule = generate_amortization_schedule(standard_loan)
        total_principal = sum(row.principal_portion for row in schedule)
        assert total_principal == pytest.approx(520000, abs=0.01)

    def test_rows_balance(self, standard_loan):
        """Each row's principal and interest add up to its payment."""
        schedule = generate_amortization_schedule(standard_loan)
        for row in schedule:
            assert row.principal_portion + row.interest_portion == pytest.approx(
                row.payment_amount, abs=0.005
            )

    def test_balance_never_increases(self, standard_loan):
        schedule = generate_amortization_schedule(standard_loan)
        balances = [row.remaining_balance for row in schedule]
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))

    def test_zero_rate_schedule(self):
        schedule = generate_amortization_schedule(LoanTerms(360000, 0, 30))
        assert len(schedule) == 360
        assert all(row.interest_portion == 0 for row in schedule)
        assert schedule[-1].remaining_balance == 0

    def test_uneven_zero_rate_residue_absorbed(self):
        """Rounding residue on an uneven zero-rate loan lands in the last payment."""
        schedule = generate_amortization_schedule(LoanTerms(100000, 0, 15))
        assert schedule[-1].remaining_balance == 0
        assert sum(row.principal_portion for row in schedule) == pytest.approx(100000, abs=0.01)

    def test_scheduled_dates_are_monthly(self, standard_loan, first_payment_date):
        schedule = generate_amortization_schedule(standard_loan, first_payment_date)
        assert schedule[0].scheduled_date == date(2025, 1, 1)
        assert schedule[1].scheduled_date == date(2025, 2, 1)
        assert schedule[12].scheduled_date == date(2026, 1, 1)

    def test_zero_principal_has_no_rows(self):
        assert generate_amortization_schedule(LoanTerms(0, 5.0, 30)) == []

    def test_total_interest(self):
        schedule = generate_amortization_schedule(LoanTerms(100000, 6.0, 30))
        # 599.55 x 360 - 100,000 = 115,838, within rounding
        assert calculate_total_interest(schedule) == pytest.approx(115838, abs=5)


class TestExtraPayments:
    """Test schedules with extra principal payments."""

    def test_monthly_extra_stops_early(self, standard_loan):
        extras = [ExtraPayment(kind="monthly", amount=200)]
        schedule = generate_amortization_schedule(standard_loan, extra_payments=extras)

        assert len(schedule) < 360
        assert schedule[-1].remaining_balance == 0
        total_principal = sum(row.principal_portion for row in schedule)
        assert total_principal == pytest.approx(520000, abs=0.01)

    def test_yearly_extra_lands_in_its_month(self, standard_loan):
        extras = [ExtraPayment(kind="yearly", amount=5000, month=6)]
        standard = generate_amortization_schedule(standard_loan)
        accelerated = generate_amortization_schedule(standard_loan, extra_payments=extras)

        # Months 1-5 identical, month 6 carries the extra
        for i in range(5):
            assert accelerated[i] == standard[i]
        assert accelerated[5].principal_portion == pytest.approx(
            standard[5].principal_portion + 5000, abs=0.01
        )

    def test_one_time_extra(self, standard_loan):
        extras = [ExtraPayment(kind="one-time", amount=50000, year=2)]
        schedule = generate_amortization_schedule(standard_loan, extra_payments=extras)
        standard = generate_amortization_schedule(standard_loan)

        # Applied in month 13 only
        assert schedule[12].principal_portion > 50000
        assert schedule[13].principal_portion < 1000
        assert len(schedule) < len(standard)

    def test_start_year_delays_monthly_extra(self, standard_loan):
        extras = [ExtraPayment(kind="monthly", amount=300, start_year=3)]
        schedule = generate_amortization_schedule(standard_loan, extra_payments=extras)
        standard = generate_amortization_schedule(standard_loan)
        assert schedule[23] == standard[23]
        assert schedule[24].principal_portion > standard[24].principal_portion

    def test_analyze_extra_payments(self, standard_loan):
        analysis = analyze_extra_payments(
            standard_loan, [ExtraPayment(kind="monthly", amount=200)]
        )
        assert analysis.monthly_payment == calculate_payment(520000, 7.25, 30)
        assert analysis.standard.payoff_months == 360
        assert analysis.months_saved > 0
        assert analysis.interest_saved > 0
        assert analysis.with_extra_payments.total_interest < analysis.standard.total_interest
        assert analysis.months_saved == (
            analysis.standard.payoff_months - analysis.with_extra_payments.payoff_months
        )

    def test_invalid_extra_payment_kind(self):
        with pytest.raises(InvalidInput):
            ExtraPayment(kind="weekly", amount=100)

    def test_invalid_extra_payment_month(self):
        with pytest.raises(InvalidInput):
            ExtraPayment(kind="yearly", amount=100, month=13)

    @pytest.mark.parametrize("start_year", [0, -1])
    def test_invalid_extra_payment_start_year(self, start_year):
        with pytest.raises(InvalidInput):
            ExtraPayment(kind="monthly", amount=100, start_year=start_year)


class TestMortgageBudget:
    """Test monthly payment with escrow."""

    def test_no_pmi_at_twenty_percent_down(self, first_payment_date):
        budget = calculate_mortgage(
            MortgageInputs(home_price=650000, down_payment=130000, loan_term=30, interest_rate=7.25),
            start_date=first_payment_date,
        )
        assert budget.monthly_pmi == 0
        assert budget.loan_amount == 520000

    def test_pmi_below_twenty_percent_down(self):
        budget = calculate_mortgage(
            MortgageInputs(home_price=650000, down_payment=65000, loan_term=30, interest_rate=7.25)
        )
        # 585,000 x 0.5% / 12
        assert budget.monthly_pmi == 243.75

    def test_explicit_pmi_wins(self):
        none_due = calculate_mortgage(
            MortgageInputs(650000, 65000, 30, 7.25, pmi=0)
        )
        assert none_due.monthly_pmi == 0

        charged = calculate_mortgage(
            MortgageInputs(650000, 200000, 30, 7.25, pmi=125.5)
        )
        assert charged.monthly_pmi == 125.5

    def test_default_escrow(self):
        budget = calculate_mortgage(MortgageInputs(650000, 65000, 30, 7.25))
        # 650,000 x 1.21% / 12 and 650,000 x 0.45% / 12
        assert budget.monthly_property_tax == 655.42
        assert budget.monthly_insurance == 243.75

    def test_explicit_escrow(self):
        budget = calculate_mortgage(
            MortgageInputs(650000, 130000, 30, 7.25, property_tax=6000, home_insurance=1800, hoa_fees=150)
        )
        assert budget.monthly_property_tax == 500.0
        assert budget.monthly_insurance == 150.0
        assert budget.monthly_hoa == 150.0

    def test_total_is_sum_of_rounded_lines(self):
        budget = calculate_mortgage(
            MortgageInputs(650000, 65000, 30, 7.25, hoa_fees=150)
        )
        lines = (
            budget.principal_and_interest
            + budget.monthly_property_tax
            + budget.monthly_insurance
            + budget.monthly_pmi
            + budget.monthly_hoa
        )
        assert budget.total_monthly_payment == pytest.approx(lines, abs=0.001)

    def test_totals_and_schedule(self, first_payment_date):
        budget = calculate_mortgage(
            MortgageInputs(650000, 130000, 30, 7.25), start_date=first_payment_date
        )
        assert budget.total_interest == pytest.approx(
            budget.principal_and_interest * 360 - 520000, abs=0.01
        )
        assert budget.total_cost == pytest.approx(650000 + budget.total_interest, abs=0.01)
        assert budget.payoff_date == date(2055, 1, 1)
        assert len(budget.amortization_schedule) == 360

    def test_down_payment_above_price(self):
        with pytest.raises(InvalidInput):
            MortgageInputs(home_price=300000, down_payment=400000, loan_term=30, interest_rate=7.0)

    def test_home_insurance(self):
        assert calculate_home_insurance(650000) == 2925.0
        assert calculate_home_insurance(650000, high_risk_area=True) == 4387.5


class TestRefinance:
    """Test refinance analysis."""

    def _inputs(self, **overrides):
        values = dict(
            current_loan_balance=400000,
            current_interest_rate=7.5,
            current_monthly_payment=2800,
            remaining_term=25,
            new_interest_rate=5.5,
            new_loan_term=30,
            closing_costs=6000,
        )
        values.update(overrides)
        return RefinanceInputs(**values)

    def test_new_payment_and_savings(self):
        result = calculate_refinance(self._inputs())
        # $400k at 5.5% for 30 years
        assert result.new_monthly_payment == 2271.16
        assert result.monthly_savings == 528.84
        assert result.break_even_months == 11.3
        assert result.recommendation == "Excellent opportunity to save with refinancing."

    def test_interest_approximation(self):
        result = calculate_refinance(self._inputs())
        assert result.total_interest_old == pytest.approx(2800 * 300 - 400000, abs=0.01)
        assert result.total_interest_new == pytest.approx(2271.16 * 360 - 400000, abs=0.01)
        assert result.total_savings == pytest.approx(result.interest_savings - 6000, abs=0.01)

    def test_no_savings_never_breaks_even(self):
        result = calculate_refinance(self._inputs(current_monthly_payment=2000))
        assert result.monthly_savings < 0
        assert math.isinf(result.break_even_months)
        assert not result.breaks_even
        assert result.recommendation == "Refinancing may not provide savings at this time."

    def test_long_break_even(self):
        result = calculate_refinance(self._inputs(closing_costs=40000))
        assert result.break_even_months > 60
        assert "long enough to break even" in result.recommendation

    def test_good_opportunity(self):
        result = calculate_refinance(self._inputs(closing_costs=20000))
        assert 24 < result.break_even_months <= 60
        assert result.recommendation.startswith("Good refinancing opportunity")


class TestPropertyTax:
    """Test property tax estimates."""

    def test_base_tax(self):
        result = calculate_detailed_property_tax(PropertyTaxInputs(500000, "riverside"))
        assert result.annual_tax == 6050.0
        assert result.monthly_tax == 504.17
        assert result.effective_rate == 1.21
        assert result.exemptions_applied == 0

    def test_breakdown_in_percent(self):
        result = calculate_detailed_property_tax(PropertyTaxInputs(500000, "orange"))
        assert result.breakdown.county_rate == 0.41
        assert result.breakdown.school_rate == 0.25
        assert result.breakdown.city_rate == 0.04
        assert result.breakdown.special_districts == 0.03

    def test_unknown_county_falls_back(self):
        known = calculate_detailed_property_tax(PropertyTaxInputs(500000, "riverside"))
        unknown = calculate_detailed_property_tax(PropertyTaxInputs(500000, "atlantis"))
        assert unknown == known

    def test_county_key_case_insensitive(self):
        upper = calculate_detailed_property_tax(PropertyTaxInputs(500000, "Orange"))
        lower = calculate_detailed_property_tax(PropertyTaxInputs(500000, "orange"))
        assert upper == lower

    def test_homestead_and_veteran(self):
        result = calculate_detailed_property_tax(
            PropertyTaxInputs(2000000, "orange", TaxExemptions(homestead=True, veteran=True))
        )
        # 2,000,000 x 0.73% - 7,000 - 4,000
        assert result.exemptions_applied == 11000
        assert result.annual_tax == 3600.0

    def test_senior_only_below_price_limit(self):
        expensive = calculate_detailed_property_tax(
            PropertyTaxInputs(1000000, "orange", TaxExemptions(senior=True))
        )
        assert expensive.exemptions_applied == 0

        modest = calculate_detailed_property_tax(
            PropertyTaxInputs(100000, "orange", TaxExemptions(senior=True))
        )
        assert modest.exemptions_applied == 4000

    def test_tax_never_negative(self):
        result = calculate_detailed_property_tax(
            PropertyTaxInputs(300000, "riverside", TaxExemptions(True, True, True))
        )
        assert result.annual_tax == 0
        assert result.monthly_tax == 0

    def test_flat_county_rate(self):
        assert calculate_property_tax(650000, "riverside") == 7865.0
        assert calculate_property_tax(650000, "Orange") == 4745.0
        # Unknown county uses the default rate
        assert calculate_property_tax(650000, "atlantis") == 7865.0
