"""
Tests for vacation bonus and aguinaldo eligibility.
"""

import sqlite3
from datetime import date, datetime
from decimal import Decimal

import pytest

from planilla.business_logic.benefit_manager import (
    AguinaldoLineItem,
    BenefitManager,
    calculate_aguinaldo,
    compute_aguinaldo_batch,
    compute_vacation_bonus,
    completed_years,
    is_within_aguinaldo_window,
)
from planilla.constants import EmployeeStatus, NoveltyType
from planilla.exceptions import (
    AlreadyPaidThisYearError,
    AlreadyRunThisYearError,
    NotEligibleError,
    OutsideDateWindowError,
)

from tests.conftest import NOW

CENT = Decimal("0.01")
IN_WINDOW = datetime(2026, 11, 15, 10, 0)


# ============================================================================
# Vacation bonus
# ============================================================================


class TestComputeVacationBonus:

    def test_amount(self, make_employee):
        novelty = compute_vacation_bonus(make_employee(base_salary="900.00"), [], NOW)

        assert novelty.amount == Decimal("135.00")
        assert novelty.type == NoveltyType.VACATION_PAY
        assert novelty.date == date(2026, 10, 18)
        assert novelty.description == "Pago de vacaciones 2026"
        assert novelty.id is None

    def test_exactly_one_year_is_eligible(self, make_employee):
        employee = make_employee(hire_date=date(2025, 10, 18))
        assert compute_vacation_bonus(employee, [], NOW).amount is not None

    def test_under_one_year_not_eligible(self, make_employee):
        employee = make_employee(hire_date=date(2025, 10, 19))
        with pytest.raises(NotEligibleError):
            compute_vacation_bonus(employee, [], NOW)

    def test_inactive_not_eligible(self, make_employee):
        employee = make_employee(status=EmployeeStatus.INACTIVE)
        with pytest.raises(NotEligibleError):
            compute_vacation_bonus(employee, [], NOW)

    def test_already_paid_this_year(self, make_employee, make_novelty):
        employee = make_employee()
        paid = make_novelty(employee.id, NoveltyType.VACATION_PAY, on=date(2026, 3, 1), amount="135.00")
        with pytest.raises(AlreadyPaidThisYearError):
            compute_vacation_bonus(employee, [paid], NOW)

    def test_paid_last_year_does_not_block(self, make_employee, make_novelty):
        employee = make_employee()
        paid = make_novelty(employee.id, NoveltyType.VACATION_PAY, on=date(2025, 12, 1), amount="135.00")
        assert compute_vacation_bonus(employee, [paid], NOW).amount == Decimal("135.00")

    def test_completed_years(self):
        assert completed_years(date(2020, 10, 19), date(2026, 10, 18)) == 5
        assert completed_years(date(2020, 10, 18), date(2026, 10, 18)) == 6


class TestVacationWithDatabase:

    def test_pay_then_reject_then_reset(self, benefit_manager, hire_employee):
        employee = hire_employee(base_salary="900.00", hire_date=date(2024, 1, 10))

        paid = benefit_manager.pay_vacation(employee.id, now=NOW)
        assert paid.id is not None
        assert benefit_manager.is_vacation_payable(employee.id, now=NOW) is False
        with pytest.raises(AlreadyPaidThisYearError):
            benefit_manager.pay_vacation(employee.id, now=NOW)

        assert benefit_manager.reset_vacation(employee.id, 2026) is True
        assert benefit_manager.is_vacation_payable(employee.id, now=NOW) is True

    def test_deleting_novelty_restores_eligibility(self, benefit_manager, novelty_manager, hire_employee):
        employee = hire_employee(hire_date=date(2024, 1, 10))
        paid = benefit_manager.pay_vacation(employee.id, now=NOW)

        assert novelty_manager.delete_novelty(paid.id) is True
        assert benefit_manager.is_vacation_payable(employee.id, now=NOW) is True

    def test_reset_without_payment(self, benefit_manager, hire_employee):
        employee = hire_employee()
        assert benefit_manager.reset_vacation(employee.id, 2026) is False

    def test_eligible_list(self, benefit_manager, hire_employee):
        veteran = hire_employee(hire_date=date(2019, 5, 1))
        hire_employee(hire_date=date(2026, 2, 1))
        benefit_manager.pay_vacation(veteran.id, now=NOW)

        statuses = benefit_manager.get_vacation_eligible_employees(now=NOW)
        assert [s.employee.id for s in statuses] == [veteran.id]
        assert statuses[0].is_paid is True
        assert statuses[0].years_of_service == 7

    def test_unknown_employee(self, benefit_manager):
        with pytest.raises(ValueError):
            benefit_manager.pay_vacation(42, now=NOW)

    def test_bonus_reaches_payslip(self, benefit_manager, payroll_manager, hire_employee):
        employee = hire_employee(base_salary="900.00", hire_date=date(2024, 1, 10))
        benefit_manager.pay_vacation(employee.id, now=NOW)

        slip = payroll_manager.run_payroll(now=NOW).payslips[0]
        assert slip.vacation_pay == Decimal("135.00")
        assert slip.social_security_base == Decimal("1035.00")


# ============================================================================
# Aguinaldo
# ============================================================================


class TestAguinaldoWindow:

    @pytest.mark.parametrize("day, expected", [
        (date(2026, 10, 19), False),
        (date(2026, 10, 20), True),
        (date(2026, 12, 20), True),
        (date(2026, 12, 21), False),
        (date(2026, 6, 1), False),
    ])
    def test_window_bounds(self, day, expected):
        assert is_within_aguinaldo_window(day) is expected

    def test_outside_window_rejected(self, make_employee):
        with pytest.raises(OutsideDateWindowError):
            compute_aguinaldo_batch([make_employee()], [], NOW)


class TestCalculateAguinaldo:
    """Base 600.00, so one day of salary is 20.00."""

    def test_ten_years_or_more(self, make_employee):
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2010, 1, 1)), 2026)
        assert item.days_to_pay == Decimal("21")
        assert item.amount == Decimal("420.00")

    def test_three_to_ten_years(self, make_employee):
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2020, 1, 1)), 2026)
        assert item.amount == Decimal("380.00")

    def test_one_to_three_years(self, make_employee):
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2025, 1, 1)), 2026)
        assert item.amount == Decimal("300.00")

    def test_exactly_one_year_at_reference_date(self, make_employee):
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2025, 12, 12)), 2026)
        assert item.days_to_pay == Decimal("15")

    def test_prorated_under_one_year(self, make_employee):
        # 164 days from July 1 to December 12
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2026, 7, 1)), 2026)
        assert item.amount.quantize(CENT) == Decimal("134.79")

    def test_hired_after_reference_date(self, make_employee):
        item = calculate_aguinaldo(make_employee(base_salary="600.00", hire_date=date(2026, 12, 15)), 2026)
        assert item.amount == Decimal("0")

    def test_taxability_flag(self, make_employee):
        assert calculate_aguinaldo(make_employee(base_salary="1500.01"), 2026).is_taxable is True
        assert calculate_aguinaldo(make_employee(base_salary="1500.00"), 2026).is_taxable is False


class TestAguinaldoBatch:

    def test_active_employees_only(self, make_employee):
        active = make_employee()
        inactive = make_employee(status=EmployeeStatus.INACTIVE)
        items = compute_aguinaldo_batch([active, inactive], [], IN_WINDOW)
        assert [i.employee_id for i in items] == [active.id]

    def test_skips_employees_already_paid(self, make_employee, make_novelty):
        first, second = make_employee(), make_employee()
        paid = make_novelty(first.id, NoveltyType.AGUINALDO, on=date(2026, 11, 1), amount="300.00")
        items = compute_aguinaldo_batch([first, second], [paid], IN_WINDOW)
        assert [i.employee_id for i in items] == [second.id]

    def test_everyone_paid(self, make_employee, make_novelty):
        employee = make_employee()
        paid = make_novelty(employee.id, NoveltyType.AGUINALDO, on=date(2026, 11, 1), amount="300.00")
        with pytest.raises(AlreadyRunThisYearError):
            compute_aguinaldo_batch([employee], [paid], IN_WINDOW)

    def test_whole_roster_mode(self, make_employee, make_novelty):
        first, second = make_employee(), make_employee()
        paid = make_novelty(first.id, NoveltyType.AGUINALDO, on=date(2026, 11, 1), amount="300.00")
        with pytest.raises(AlreadyRunThisYearError):
            compute_aguinaldo_batch([first, second], [paid], IN_WINDOW, per_employee=False)

    def test_last_years_aguinaldo_ignored(self, make_employee, make_novelty):
        employee = make_employee()
        paid = make_novelty(employee.id, NoveltyType.AGUINALDO, on=date(2025, 11, 1), amount="300.00")
        assert len(compute_aguinaldo_batch([employee], [paid], IN_WINDOW)) == 1


class TestAguinaldoWithDatabase:

    def test_confirm_and_pay(self, benefit_manager, payroll_manager, hire_employee):
        employee = hire_employee(base_salary="600.00", hire_date=date(2020, 1, 1))

        items = benefit_manager.calculate_aguinaldo(now=IN_WINDOW)
        created = benefit_manager.confirm_aguinaldo_batch(items, now=IN_WINDOW)
        assert [n.employee_id for n in created] == [employee.id]
        assert created[0].description == "Aguinaldo 2026"
        assert benefit_manager.has_aguinaldo_run(2026) is True

        with pytest.raises(AlreadyRunThisYearError):
            benefit_manager.calculate_aguinaldo(now=IN_WINDOW)

        slip = payroll_manager.run_payroll(now=datetime(2026, 11, 30, 8, 0)).payslips[0]
        assert slip.aguinaldo_pay == Decimal("380.00")
        assert slip.aguinaldo_is_taxable is False
        assert slip.gross_pay == Decimal("600.00")

    def test_confirm_twice_does_not_duplicate(self, benefit_manager, hire_employee):
        hire_employee()
        items = benefit_manager.calculate_aguinaldo(now=IN_WINDOW)
        benefit_manager.confirm_aguinaldo_batch(items, now=IN_WINDOW)

        assert benefit_manager.confirm_aguinaldo_batch(items, now=IN_WINDOW) == []

    def test_new_hire_after_batch(self, benefit_manager, hire_employee):
        hire_employee()
        benefit_manager.confirm_aguinaldo_batch(benefit_manager.calculate_aguinaldo(now=IN_WINDOW), now=IN_WINDOW)
        late = hire_employee(hire_date=date(2026, 11, 2))

        items = benefit_manager.calculate_aguinaldo(now=IN_WINDOW)
        assert [i.employee_id for i in items] == [late.id]

    def test_confirm_outside_window(self, benefit_manager):
        with pytest.raises(OutsideDateWindowError):
            benefit_manager.confirm_aguinaldo_batch([], now=NOW)

    def test_failed_write_saves_no_aguinaldo(self, employees_repo, novelties_repo, hire_employee):
        manager = BenefitManager(employees_repo, novelties_repo, aguinaldo_per_employee=False)
        first = hire_employee()
        second = hire_employee()
        items = manager.calculate_aguinaldo(now=IN_WINDOW)
        missing = AguinaldoLineItem(employee_id=999, employee_name="Sin registro", years_of_service=Decimal("1"),
                                    days_to_pay=Decimal("15"), amount=Decimal("450.00"), is_taxable=False)

        with pytest.raises(sqlite3.IntegrityError):
            manager.confirm_aguinaldo_batch([items[0], missing, items[1]], now=IN_WINDOW)
        assert novelties_repo.get_by_type_and_year(NoveltyType.AGUINALDO, 2026) == []
        assert manager.has_aguinaldo_run(2026) is False

        retried = manager.confirm_aguinaldo_batch(manager.calculate_aguinaldo(now=IN_WINDOW), now=IN_WINDOW)
        assert sorted(n.employee_id for n in retried) == [first.id, second.id]
        assert all(n.id is not None for n in retried)

    def test_add_many_empty(self, novelties_repo):
        assert novelties_repo.add_many([]) == []
