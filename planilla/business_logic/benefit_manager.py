# planilla/business_logic/benefit_manager.py
"""
Vacation bonus and aguinaldo (year-end bonus) eligibility.

Both benefits are paid by writing a novelty that the next payroll run picks
up. Each employee receives at most one of each per calendar year.
"""

from dataclasses import dataclass
from typing import Optional, List, Iterable, TYPE_CHECKING
from datetime import date, datetime
from decimal import Decimal
import logging

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.business_logic.payslip_builder import is_aguinaldo_taxable
from planilla.constants import (
    NoveltyType, DAYS_PER_MONTH, DAYS_PER_YEAR,
    VACATION_DAYS, VACATION_PREMIUM_RATE, VACATION_MIN_TENURE_DAYS,
    AGUINALDO_WINDOW_START, AGUINALDO_WINDOW_END, AGUINALDO_REFERENCE_DATE,
    AGUINALDO_TIERS, AGUINALDO_PRORATED_DAYS,
)
from planilla.exceptions import (
    AlreadyPaidThisYearError, NotEligibleError, OutsideDateWindowError, AlreadyRunThisYearError,
)
from planilla.utils.date_converter import to_date, days_between

if TYPE_CHECKING:
    from planilla.data_access.employees_repository import EmployeesRepository
    from planilla.data_access.novelties_repository import NoveltiesRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AguinaldoLineItem:
    employee_id: int
    employee_name: str
    years_of_service: Decimal
    days_to_pay: Decimal # Fractional when prorated
    amount: Decimal
    is_taxable: bool


@dataclass(frozen=True)
class VacationStatus:
    employee: EmployeeEntity
    years_of_service: int
    is_paid: bool
    amount: Decimal


# --- Vacation bonus ---

def vacation_bonus_amount(base_salary: Decimal) -> Decimal:
    return (base_salary / DAYS_PER_MONTH) * VACATION_DAYS * VACATION_PREMIUM_RATE

def is_vacation_eligible(employee: EmployeeEntity, today: date) -> bool:
    return (to_date(today) - employee.hire_date).days >= VACATION_MIN_TENURE_DAYS

def has_benefit_this_year(novelties: Iterable[NoveltyEntity], employee_id: int,
                          novelty_type: NoveltyType, year: int) -> bool:
    return any(n.employee_id == employee_id and n.type == novelty_type and n.date.year == year
               for n in novelties)

def completed_years(hire_date: date, today: date) -> int:
    """Full anniversaries reached by ``today``."""
    years = today.year - hire_date.year
    if (today.month, today.day) < (hire_date.month, hire_date.day):
        years -= 1
    return max(years, 0)

def compute_vacation_bonus(employee: EmployeeEntity,
                           novelties: Iterable[NoveltyEntity],
                           now: datetime) -> NoveltyEntity:
    """
    Unsaved vacation_pay novelty for ``employee`` dated today.
    Raises NotEligibleError before one year of service and
    AlreadyPaidThisYearError if this calendar year's bonus exists.
    """
    today = to_date(now)
    if not employee.is_active:
        raise NotEligibleError(employee.id, "el empleado está inactivo.")
    if not is_vacation_eligible(employee, today):
        raise NotEligibleError(employee.id, "aún no cumple un año de servicio.")
    if has_benefit_this_year(novelties, employee.id, NoveltyType.VACATION_PAY, today.year):
        raise AlreadyPaidThisYearError(employee.id, today.year)

    return NoveltyEntity(
        employee_id=employee.id,
        date=today,
        type=NoveltyType.VACATION_PAY,
        description=f"Pago de vacaciones {today.year}",
        amount=vacation_bonus_amount(employee.base_salary),
    )


# --- Aguinaldo ---

def aguinaldo_window(year: int):
    return (date(year, *AGUINALDO_WINDOW_START), date(year, *AGUINALDO_WINDOW_END))

def is_within_aguinaldo_window(today: date) -> bool:
    start, end = aguinaldo_window(today.year)
    return start <= to_date(today) <= end

def calculate_aguinaldo(employee: EmployeeEntity, year: int) -> AguinaldoLineItem:
    """
    Aguinaldo as of the yearly reference date. Tenure tiers pay a fixed number
    of days of salary; under one year pays 15 days prorated by days worked
    since the later of hire date and January 1.
    """
    reference_date = date(year, *AGUINALDO_REFERENCE_DATE)
    daily_salary = employee.base_salary / DAYS_PER_MONTH
    service_days = days_between(employee.hire_date, reference_date)
    years_of_service = Decimal(service_days) / Decimal(DAYS_PER_YEAR)

    for min_years, tier_days in AGUINALDO_TIERS:
        if years_of_service >= min_years:
            days_to_pay = tier_days
            break
    else:
        effective_start = max(employee.hire_date, date(year, 1, 1))
        days_worked = max((reference_date - effective_start).days, 0) # hired after the reference date: nothing accrued
        days_to_pay = AGUINALDO_PRORATED_DAYS * days_worked / DAYS_PER_YEAR

    return AguinaldoLineItem(
        employee_id=employee.id,
        employee_name=employee.name,
        years_of_service=years_of_service,
        days_to_pay=days_to_pay,
        amount=daily_salary * days_to_pay,
        is_taxable=is_aguinaldo_taxable(employee.base_salary),
    )

def compute_aguinaldo_batch(employees: Iterable[EmployeeEntity],
                            novelties: Iterable[NoveltyEntity],
                            now: datetime,
                            per_employee: bool = True,
                            active_only: bool = True) -> List[AguinaldoLineItem]:
    """
    Line items for everyone still owed this year's aguinaldo.

    With ``per_employee`` (the default) employees already paid this year are
    skipped and AlreadyRunThisYearError is raised only when nobody is left.
    Without it, any aguinaldo novelty dated this year blocks the whole batch.
    """
    today = to_date(now)
    if not is_within_aguinaldo_window(today):
        start, end = aguinaldo_window(today.year)
        logger.warning(f"Aguinaldo requested on {today}, outside window {start} - {end}.")
        raise OutsideDateWindowError(start, end)

    paid_ids = {n.employee_id for n in novelties
                if n.type == NoveltyType.AGUINALDO and n.date.year == today.year}
    if paid_ids and not per_employee:
        raise AlreadyRunThisYearError(today.year)

    roster = [e for e in employees if e.is_active] if active_only else list(employees)
    pending = [e for e in roster if e.id not in paid_ids]
    if paid_ids and not pending:
        raise AlreadyRunThisYearError(today.year)

    return [calculate_aguinaldo(e, today.year) for e in pending]


class BenefitManager:
    def __init__(self,
                 employees_repository: 'EmployeesRepository',
                 novelties_repository: 'NoveltiesRepository',
                 aguinaldo_per_employee: bool = True):
        if employees_repository is None: raise ValueError("employees_repository cannot be None")
        if novelties_repository is None: raise ValueError("novelties_repository cannot be None")

        self.employees_repository = employees_repository
        self.novelties_repository = novelties_repository
        self.aguinaldo_per_employee = aguinaldo_per_employee
        logger.info("BenefitManager initialized.")

    def _get_employee(self, employee_id: int) -> EmployeeEntity:
        employee = self.employees_repository.get_by_id(employee_id)
        if not employee:
            raise ValueError(f"No se encontró el empleado con identificador {employee_id}.")
        return employee

    # --- Vacation ---

    def get_vacation_eligible_employees(self, now: Optional[datetime] = None) -> List[VacationStatus]:
        """Employees with at least one year of service and whether this year's bonus is paid."""
        today = to_date(now or datetime.now())
        paid_ids = {n.employee_id for n in
                    self.novelties_repository.get_by_type_and_year(NoveltyType.VACATION_PAY, today.year)}
        return [
            VacationStatus(
                employee=e,
                years_of_service=completed_years(e.hire_date, today),
                is_paid=e.id in paid_ids,
                amount=vacation_bonus_amount(e.base_salary),
            )
            for e in self.employees_repository.get_active_employees()
            if is_vacation_eligible(e, today)
        ]

    def is_vacation_payable(self, employee_id: int, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        employee = self._get_employee(employee_id)
        try:
            compute_vacation_bonus(employee, self.novelties_repository.get_by_employee_id(employee_id), now)
        except (NotEligibleError, AlreadyPaidThisYearError):
            return False
        return True

    def pay_vacation(self, employee_id: int, now: Optional[datetime] = None) -> NoveltyEntity:
        now = now or datetime.now()
        employee = self._get_employee(employee_id)
        novelty = compute_vacation_bonus(employee, self.novelties_repository.get_by_employee_id(employee_id), now)
        try:
            created = self.novelties_repository.add(novelty)
        except Exception as e:
            logger.error(f"Error saving vacation bonus for employee ID {employee_id}: {e}", exc_info=True)
            raise
        logger.info(f"Vacation bonus {created.amount:.2f} recorded for employee ID {employee_id} (novelty ID {created.id}).")
        return created

    def reset_vacation(self, employee_id: int, year: Optional[int] = None) -> bool:
        """Deletes the employee's vacation_pay novelty for ``year`` so it can be paid again."""
        year = year or datetime.now().year
        to_delete = [n for n in self.novelties_repository.get_by_type_and_year(NoveltyType.VACATION_PAY, year)
                     if n.employee_id == employee_id]
        if not to_delete:
            logger.warning(f"No vacation payment found for employee ID {employee_id} in {year}.")
            return False
        for novelty in to_delete:
            self.novelties_repository.delete(novelty.id)
        logger.info(f"Vacation payment for employee ID {employee_id} in {year} reset.")
        return True

    # --- Aguinaldo ---

    def has_aguinaldo_run(self, year: int) -> bool:
        return bool(self.novelties_repository.get_by_type_and_year(NoveltyType.AGUINALDO, year))

    def calculate_aguinaldo(self, now: Optional[datetime] = None) -> List[AguinaldoLineItem]:
        now = now or datetime.now()
        year = to_date(now).year
        items = compute_aguinaldo_batch(
            self.employees_repository.get_all(),
            self.novelties_repository.get_by_type_and_year(NoveltyType.AGUINALDO, year),
            now,
            per_employee=self.aguinaldo_per_employee,
        )
        logger.info(f"Aguinaldo {year} calculated for {len(items)} employee(s).")
        return items

    def confirm_aguinaldo_batch(self, items: Iterable[AguinaldoLineItem], now: Optional[datetime] = None) -> List[NoveltyEntity]:
        """
        Saves one aguinaldo novelty per line item, all in one transaction.
        Employees paid in the meantime are skipped so nobody receives two in
        the same year. If any write fails nothing is saved.
        """
        today = to_date(now or datetime.now())
        if not is_within_aguinaldo_window(today):
            raise OutsideDateWindowError(*aguinaldo_window(today.year))

        already_paid = {n.employee_id for n in
                        self.novelties_repository.get_by_type_and_year(NoveltyType.AGUINALDO, today.year)}
        pending: List[NoveltyEntity] = []
        for item in items:
            if item.employee_id in already_paid:
                logger.warning(f"Employee ID {item.employee_id} already has an aguinaldo for {today.year}; skipped.")
                continue
            pending.append(NoveltyEntity(
                employee_id=item.employee_id,
                date=today,
                type=NoveltyType.AGUINALDO,
                description=f"Aguinaldo {today.year}",
                amount=item.amount,
            ))
            already_paid.add(item.employee_id)

        try:
            created = self.novelties_repository.add_many(pending)
        except Exception as e:
            logger.error(f"Error saving aguinaldo {today.year} batch of {len(pending)}: {e}", exc_info=True)
            raise

        logger.info(f"Aguinaldo {today.year} confirmed for {len(created)} employee(s).")
        return created
