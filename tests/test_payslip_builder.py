"""
Tests for novelty aggregation and payslip construction.
"""

from datetime import date
from decimal import Decimal

import pytest

from planilla.business_logic.novelty_aggregator import NoveltyTotals, aggregate_novelties, hourly_rate
from planilla.business_logic.payslip_builder import build_payslip, is_aguinaldo_taxable
from planilla.constants import NoveltyType, OvertimeRateType

CENT = Decimal("0.01")


class TestAggregateNovelties:

    def test_overtime_day_rate(self, make_novelty):
        novelties = [make_novelty(1, NoveltyType.OVERTIME, on=date(2026, 10, 5),
                                  overtime_hours=4, overtime_rate_type=OvertimeRateType.DAY)]
        totals = aggregate_novelties(novelties, 1, 2026, 10, Decimal("1600.00"))
        assert totals.overtime_pay.quantize(CENT) == Decimal("53.33")

    @pytest.mark.parametrize("rate_type, expected", [
        (OvertimeRateType.DAY, Decimal("7.50")),
        (OvertimeRateType.NIGHT, Decimal("8.4375")),
        (OvertimeRateType.HOLIDAY_DAY, Decimal("15.00")),
        (OvertimeRateType.HOLIDAY_NIGHT, Decimal("16.875")),
    ])
    def test_overtime_multipliers(self, make_novelty, rate_type, expected):
        # 900 / 30 / 8 = 3.75 per hour
        novelties = [make_novelty(1, NoveltyType.OVERTIME, overtime_hours=1, overtime_rate_type=rate_type)]
        totals = aggregate_novelties(novelties, 1, 2026, 10, Decimal("900"))
        assert totals.overtime_pay == expected

    def test_hourly_rate(self):
        assert hourly_rate(Decimal("900")) == Decimal("3.75")

    def test_sums_several_of_same_type(self, make_novelty):
        novelties = [
            make_novelty(1, NoveltyType.EXPENSE, amount="20.00"),
            make_novelty(1, NoveltyType.EXPENSE, amount="15.50"),
            make_novelty(1, NoveltyType.UNPAID_LEAVE, amount="30.00"),
            make_novelty(1, NoveltyType.UNPAID_LEAVE, amount="60.00"),
        ]
        totals = aggregate_novelties(novelties, 1, 2026, 10, Decimal("900"))
        assert totals.expenses == Decimal("35.50")
        assert totals.other_deductions == Decimal("90.00")

    def test_ignores_other_employees_and_months(self, make_novelty):
        novelties = [
            make_novelty(2, NoveltyType.EXPENSE, amount="20.00"),
            make_novelty(1, NoveltyType.EXPENSE, on=date(2026, 9, 30), amount="20.00"),
            make_novelty(1, NoveltyType.EXPENSE, on=date(2025, 10, 10), amount="20.00"),
            make_novelty(1, NoveltyType.VACATION_PAY, amount="135.00"),
        ]
        totals = aggregate_novelties(novelties, 1, 2026, 10, Decimal("900"))
        assert totals.expenses == Decimal("0")
        assert totals.vacation_pay == Decimal("135.00")

    def test_no_novelties(self):
        assert aggregate_novelties([], 1, 2026, 10, Decimal("900")) == NoveltyTotals()

    def test_overtime_without_hours_rejected(self, make_novelty):
        novelties = [make_novelty(1, NoveltyType.OVERTIME, overtime_rate_type=OvertimeRateType.DAY)]
        with pytest.raises(ValueError):
            aggregate_novelties(novelties, 1, 2026, 10, Decimal("900"))

    @pytest.mark.parametrize("novelty_type", [
        NoveltyType.EXPENSE,
        NoveltyType.UNPAID_LEAVE,
        NoveltyType.VACATION_PAY,
        NoveltyType.AGUINALDO,
    ])
    def test_amount_required(self, make_novelty, novelty_type):
        novelties = [make_novelty(1, novelty_type, amount=None)]
        with pytest.raises(ValueError):
            aggregate_novelties(novelties, 1, 2026, 10, Decimal("900"))


class TestAguinaldoTaxability:

    def test_threshold(self):
        assert is_aguinaldo_taxable(Decimal("1500.01")) is True
        assert is_aguinaldo_taxable(Decimal("1500.00")) is False


class TestBuildPayslip:

    def test_salary_only(self, make_employee):
        employee = make_employee(base_salary="900.00")
        slip = build_payslip(employee, NoveltyTotals(), "vigente")

        assert slip.gross_pay == Decimal("900.00")
        assert slip.isss_deduction == Decimal("27.00")
        assert slip.afp_deduction == Decimal("65.25")
        # 900 - 27 - 65.25 = 807.75 -> (807.75 - 472) * 0.10 + 17.67
        assert slip.income_tax == Decimal("51.245")
        assert slip.net_pay == Decimal("900.00") - slip.total_deductions
        assert slip.employer_cost == Decimal("1046.25")

    def test_overtime_enters_gross(self, make_employee):
        employee = make_employee(base_salary="1600.00")
        totals = NoveltyTotals(overtime_pay=Decimal("1600") / 30 / 8 * 4 * 2)
        slip = build_payslip(employee, totals, "vigente")

        assert slip.overtime_pay.quantize(CENT) == Decimal("53.33")
        assert slip.gross_pay.quantize(CENT) == Decimal("1653.33")
        assert slip.social_security_base == slip.gross_pay

    def test_non_taxable_aguinaldo(self, make_employee):
        employee = make_employee(base_salary="1500.00")
        slip = build_payslip(employee, NoveltyTotals(aguinaldo_pay=Decimal("1050.00")), "vigente")

        assert slip.aguinaldo_is_taxable is False
        assert slip.gross_pay == Decimal("1500.00")
        assert slip.total_earnings == Decimal("2550.00")
        assert slip.net_pay == Decimal("2550.00") - slip.total_deductions

    def test_taxable_aguinaldo(self, make_employee):
        employee = make_employee(base_salary="2000.00")
        slip = build_payslip(employee, NoveltyTotals(aguinaldo_pay=Decimal("1400.00")), "vigente")

        assert slip.aguinaldo_is_taxable is True
        assert slip.gross_pay == Decimal("3400.00")
        assert slip.social_security_base == Decimal("2000.00")
        # Employer contributions never include aguinaldo, the cost always does
        assert slip.employer_contributions == Decimal("75.00") + Decimal("175.00")
        assert slip.employer_cost == Decimal("2000.00") + Decimal("250.00") + Decimal("1400.00")

    def test_expenses_and_unpaid_leave(self, make_employee):
        employee = make_employee(base_salary="900.00")
        totals = NoveltyTotals(expenses=Decimal("25.00"), other_deductions=Decimal("30.00"))
        slip = build_payslip(employee, totals, "vigente")

        assert slip.gross_pay == Decimal("900.00")
        assert slip.total_earnings == Decimal("925.00")
        assert slip.net_pay == Decimal("925.00") - slip.total_deductions - Decimal("30.00")
        assert slip.employer_cost == Decimal("1046.25")

    def test_invariants(self, make_employee):
        employee = make_employee(base_salary="1750.00")
        totals = NoveltyTotals(
            overtime_pay=Decimal("40.00"), vacation_pay=Decimal("262.50"),
            aguinaldo_pay=Decimal("1225.00"), expenses=Decimal("12.00"),
            other_deductions=Decimal("58.33"),
        )
        slip = build_payslip(employee, totals, "vigente")

        assert slip.gross_pay == (slip.base_salary + slip.overtime_pay + slip.vacation_pay
                                  + (slip.aguinaldo_pay if slip.aguinaldo_is_taxable else 0))
        assert slip.net_pay == (slip.base_salary + slip.overtime_pay + slip.vacation_pay
                                + slip.aguinaldo_pay + slip.expenses
                                - slip.total_deductions - slip.other_deductions)
