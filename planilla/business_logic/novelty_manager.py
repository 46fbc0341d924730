# planilla/business_logic/novelty_manager.py
"""
Capture of monthly novelties: overtime, expense reimbursements and unpaid
leave. Vacation and aguinaldo novelties are written by the BenefitManager.
"""

from typing import Optional, List, Dict, TYPE_CHECKING
from datetime import date
from decimal import Decimal, InvalidOperation
import logging

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.constants import (
    NoveltyType, OvertimeRateType, OVERTIME_RATE_LABELS, DAYS_PER_MONTH,
    MAX_DAY_OVERTIME_HOURS, MAX_NIGHT_OVERTIME_HOURS,
    MIN_UNPAID_LEAVE_DAYS, MAX_UNPAID_LEAVE_DAYS,
)
from planilla.exceptions import NoveltyValidationError
from planilla.utils.date_converter import to_date

if TYPE_CHECKING:
    from planilla.data_access.employees_repository import EmployeesRepository
    from planilla.data_access.novelties_repository import NoveltiesRepository

logger = logging.getLogger(__name__)

MAX_OVERTIME_HOURS = {
    OvertimeRateType.DAY: MAX_DAY_OVERTIME_HOURS,
    OvertimeRateType.HOLIDAY_DAY: MAX_DAY_OVERTIME_HOURS,
    OvertimeRateType.NIGHT: MAX_NIGHT_OVERTIME_HOURS,
    OvertimeRateType.HOLIDAY_NIGHT: MAX_NIGHT_OVERTIME_HOURS,
}


def _to_decimal(value) -> Optional[Decimal]:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError):
        return None


class NoveltyManager:
    def __init__(self,
                 novelties_repository: 'NoveltiesRepository',
                 employees_repository: 'EmployeesRepository'):
        if novelties_repository is None: raise ValueError("novelties_repository cannot be None")
        if employees_repository is None: raise ValueError("employees_repository cannot be None")

        self.novelties_repository = novelties_repository
        self.employees_repository = employees_repository

    def _check_common(self, employee_id: int, on: date, today: Optional[date], errors: Dict[str, str]) -> Optional[EmployeeEntity]:
        employee = self.employees_repository.get_by_id(employee_id) if isinstance(employee_id, int) else None
        if not employee:
            errors["employee_id"] = "Debe seleccionar un empleado válido."
        if not isinstance(on, date):
            errors["date"] = "La fecha no es válida."
        elif on > (to_date(today) if today else date.today()):
            errors["date"] = "La fecha no puede ser futura."
        return employee

    def _save(self, novelty: NoveltyEntity) -> NoveltyEntity:
        try:
            created = self.novelties_repository.add(novelty)
        except Exception as e:
            logger.error(f"Error saving {novelty.type.value} novelty for employee ID {novelty.employee_id}: {e}", exc_info=True)
            raise
        logger.info(f"Novelty ID {created.id} ({created.type.value}) recorded for employee ID {created.employee_id}.")
        return created

    def add_overtime(self, employee_id: int, on: date, hours, rate_type: OvertimeRateType,
                     today: Optional[date] = None) -> NoveltyEntity:
        on = to_date(on)
        errors: Dict[str, str] = {}
        self._check_common(employee_id, on, today, errors)

        hours_value = _to_decimal(hours)
        if not isinstance(rate_type, OvertimeRateType):
            errors["overtime_rate_type"] = "Debe seleccionar el tipo de jornada."
        if hours_value is None or hours_value <= 0:
            errors["overtime_hours"] = "Las horas deben ser mayores que cero."
        elif isinstance(rate_type, OvertimeRateType) and hours_value > MAX_OVERTIME_HOURS[rate_type]:
            errors["overtime_hours"] = (f"No se pueden registrar más de {MAX_OVERTIME_HOURS[rate_type]} "
                                        f"horas extra ({OVERTIME_RATE_LABELS[rate_type]}).")
        if errors:
            raise NoveltyValidationError(errors)

        return self._save(NoveltyEntity(
            employee_id=employee_id,
            date=on,
            type=NoveltyType.OVERTIME,
            description=f"{hours_value} hrs extra ({OVERTIME_RATE_LABELS[rate_type]})",
            overtime_hours=hours_value,
            overtime_rate_type=rate_type,
        ))

    def add_expense(self, employee_id: int, on: date, amount, description: str,
                    today: Optional[date] = None) -> NoveltyEntity:
        on = to_date(on)
        errors: Dict[str, str] = {}
        self._check_common(employee_id, on, today, errors)

        amount_value = _to_decimal(amount)
        if amount_value is None or amount_value <= 0:
            errors["amount"] = "El monto debe ser mayor que cero."
        if not description or not description.strip():
            errors["description"] = "Debe indicar el motivo del gasto."
        if errors:
            raise NoveltyValidationError(errors)

        return self._save(NoveltyEntity(
            employee_id=employee_id,
            date=on,
            type=NoveltyType.EXPENSE,
            description=description.strip(),
            amount=amount_value,
        ))

    def add_unpaid_leave(self, employee_id: int, on: date, days: int,
                         today: Optional[date] = None) -> NoveltyEntity:
        on = to_date(on)
        errors: Dict[str, str] = {}
        employee = self._check_common(employee_id, on, today, errors)

        if not isinstance(days, int) or not MIN_UNPAID_LEAVE_DAYS <= days <= MAX_UNPAID_LEAVE_DAYS:
            errors["unpaid_leave_days"] = (f"Los días de permiso deben estar entre "
                                           f"{MIN_UNPAID_LEAVE_DAYS} y {MAX_UNPAID_LEAVE_DAYS}.")
        if errors:
            raise NoveltyValidationError(errors)

        return self._save(NoveltyEntity(
            employee_id=employee_id,
            date=on,
            type=NoveltyType.UNPAID_LEAVE,
            description=f"{days} día(s) de permiso sin goce de sueldo.",
            amount=employee.base_salary / DAYS_PER_MONTH * days,
            unpaid_leave_days=days,
        ))

    def get_novelties_for_month(self, year: int, month: int) -> List[NoveltyEntity]:
        """Novelties dated in (year, month), newest first."""
        return self.novelties_repository.get_for_month(year, month)

    def get_novelties_for_employee(self, employee_id: int) -> List[NoveltyEntity]:
        return self.novelties_repository.get_by_employee_id(employee_id)

    def delete_novelty(self, novelty_id: int) -> bool:
        if not isinstance(novelty_id, int) or novelty_id <= 0:
            raise ValueError("Identificador de novedad no válido.")
        try:
            deleted = self.novelties_repository.delete(novelty_id)
        except Exception as e:
            logger.error(f"Error deleting novelty ID {novelty_id}: {e}", exc_info=True)
            raise
        if deleted:
            logger.info(f"Novelty ID {novelty_id} deleted.")
        else:
            logger.warning(f"Novelty ID {novelty_id} not found for deletion.")
        return deleted
