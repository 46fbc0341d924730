# planilla/business_logic/payroll_manager.py

from typing import Optional, List, Iterable, TYPE_CHECKING
from datetime import date, datetime
from decimal import Decimal
import logging

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.business_logic.entities.payroll_entity import PayrollEntity
from planilla.business_logic.novelty_aggregator import aggregate_novelties
from planilla.business_logic.payslip_builder import build_payslip
from planilla.exceptions import DuplicatePeriodError, EmptyRosterError
from planilla.utils.date_converter import format_period

if TYPE_CHECKING:
    from planilla.data_access.payrolls_repository import PayrollsRepository
    from planilla.data_access.employees_repository import EmployeesRepository
    from planilla.data_access.novelties_repository import NoveltiesRepository

logger = logging.getLogger(__name__)


def compute_payroll(employees: Iterable[EmployeeEntity],
                    novelties: Iterable[NoveltyEntity],
                    existing_periods: Iterable[str],
                    now: datetime,
                    active_only: bool = True,
                    tax_schedule: Optional[str] = None) -> PayrollEntity:
    """
    Builds (but does not save) the payroll for the month containing ``now``.

    Raises DuplicatePeriodError if a payroll with the same period name exists
    and EmptyRosterError if there is nobody to pay. Payslips follow roster
    order. Any calculation error propagates and nothing is produced.
    """
    period = format_period(now)
    if period in set(existing_periods):
        logger.warning(f"Payroll run rejected: period '{period}' already exists.")
        raise DuplicatePeriodError(period)

    roster = [e for e in employees if e.is_active] if active_only else list(employees)
    if not roster:
        logger.warning(f"Payroll run for '{period}' rejected: no employees to pay.")
        raise EmptyRosterError()

    novelties = list(novelties)
    payslips = []
    total_cost = Decimal("0")
    for employee in roster:
        totals = aggregate_novelties(novelties, employee.id, now.year, now.month, employee.base_salary)
        payslip = build_payslip(employee, totals, tax_schedule)
        payslips.append(payslip)
        total_cost += payslip.employer_cost

    run_date = now if isinstance(now, datetime) else datetime.combine(now, datetime.min.time())
    return PayrollEntity(period=period, run_date=run_date, total_cost=total_cost, payslips=payslips)


class PayrollManager:
    def __init__(self,
                 payrolls_repository: 'PayrollsRepository',
                 employees_repository: 'EmployeesRepository',
                 novelties_repository: 'NoveltiesRepository',
                 active_only: bool = True,
                 tax_schedule: Optional[str] = None):

        if payrolls_repository is None: raise ValueError("payrolls_repository cannot be None")
        if employees_repository is None: raise ValueError("employees_repository cannot be None")
        if novelties_repository is None: raise ValueError("novelties_repository cannot be None")

        self.payrolls_repository = payrolls_repository
        self.employees_repository = employees_repository
        self.novelties_repository = novelties_repository
        self.active_only = active_only
        self.tax_schedule = tax_schedule

    def run_payroll(self, now: Optional[datetime] = None) -> PayrollEntity:
        """
        Runs and saves the payroll for the current month from a fresh snapshot
        of employees, novelties and existing periods. The payroll and all its
        payslips are committed together or not at all.
        """
        now = now or datetime.now()

        employees = self.employees_repository.get_all()
        novelties = self.novelties_repository.get_for_month(now.year, now.month)
        existing_periods = self.payrolls_repository.get_all_periods()

        payroll = compute_payroll(employees, novelties, existing_periods, now,
                                  active_only=self.active_only, tax_schedule=self.tax_schedule)
        try:
            saved = self.payrolls_repository.add(payroll)
        except DuplicatePeriodError:
            logger.warning(f"Payroll for '{payroll.period}' was saved by another run first; this run is discarded.")
            raise
        except Exception as e:
            logger.error(f"Error saving payroll for period '{payroll.period}': {e}", exc_info=True)
            raise

        logger.info(f"Payroll ID {saved.id} for '{saved.period}' created with {len(saved.payslips)} payslip(s). "
                    f"Total employer cost: {saved.total_cost:.2f}")
        return saved

    def get_payroll_by_id(self, payroll_id: int) -> Optional[PayrollEntity]:
        return self.payrolls_repository.get_by_id(payroll_id)

    def get_payroll_by_period(self, period: str) -> Optional[PayrollEntity]:
        return self.payrolls_repository.get_by_period(period)

    def get_all_payrolls(self) -> List[PayrollEntity]:
        """All payrolls, newest run first."""
        return self.payrolls_repository.get_all()

    def get_latest_payroll(self) -> Optional[PayrollEntity]:
        payrolls = self.get_all_payrolls()
        return payrolls[0] if payrolls else None

    def delete_payroll(self, payroll_id: int) -> bool:
        """Deletes a payroll and its payslips, freeing its period for a new run."""
        if not isinstance(payroll_id, int) or payroll_id <= 0:
            raise ValueError("Identificador de planilla no válido.")

        payroll_to_delete = self.payrolls_repository.get_by_id(payroll_id)
        if not payroll_to_delete:
            logger.warning(f"Payroll ID {payroll_id} not found for deletion.")
            return False

        try:
            self.payrolls_repository.delete(payroll_id)
        except Exception as e:
            logger.error(f"Error deleting Payroll ID {payroll_id}: {e}", exc_info=True)
            raise
        logger.info(f"Payroll ID {payroll_id} ('{payroll_to_delete.period}') deleted with "
                    f"{len(payroll_to_delete.payslips)} payslip(s).")
        return True
