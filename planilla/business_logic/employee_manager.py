# planilla/business_logic/employee_manager.py

from typing import Optional, List, Any, TYPE_CHECKING
from datetime import date
from decimal import Decimal, InvalidOperation
import logging

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.constants import ContractType, AfpType, EmployeeStatus
from planilla.exceptions import DuplicateIdentifierError

if TYPE_CHECKING:
    from planilla.data_access.employees_repository import EmployeesRepository

logger = logging.getLogger(__name__)

# Attribute -> label used in duplicate messages
UNIQUE_FIELDS = {
    "name": "nombre",
    "national_id": "DUI",
    "tax_id": "NIT",
    "social_security_id": "ISSS",
    "pension_id": "NUP",
}

REQUIRED_TEXT_FIELDS = {
    "name": "El nombre del empleado no puede estar vacío.",
    "position": "El cargo no puede estar vacío.",
    "national_id": "El DUI es obligatorio.",
    "tax_id": "El NIT es obligatorio.",
    "social_security_id": "El número de ISSS es obligatorio.",
    "pension_id": "El NUP es obligatorio.",
}


class EmployeeManager:
    def __init__(self, employees_repository: 'EmployeesRepository'):
        if employees_repository is None: raise ValueError("employees_repository cannot be None")
        self.employees_repository = employees_repository

    def _validate(self, employee: EmployeeEntity) -> None:
        for attr, message in REQUIRED_TEXT_FIELDS.items():
            value = getattr(employee, attr)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(message)

        try:
            salary = Decimal(str(employee.base_salary))
        except (InvalidOperation, TypeError):
            raise ValueError("El salario base no es un número válido.")
        if salary <= 0:
            raise ValueError("El salario base debe ser mayor que cero.")
        employee.base_salary = salary

        if not isinstance(employee.hire_date, date):
            raise ValueError("La fecha de contratación no es válida.")
        if employee.termination_date is not None:
            if not isinstance(employee.termination_date, date):
                raise ValueError("La fecha de retiro no es válida.")
            if employee.termination_date < employee.hire_date:
                raise ValueError("La fecha de retiro no puede ser anterior a la fecha de contratación.")

    def _check_unique(self, employee: EmployeeEntity) -> None:
        """Raises DuplicateIdentifierError if another employee shares a name or legal identifier."""
        for other in self.employees_repository.get_all():
            if employee.id is not None and other.id == employee.id:
                continue
            if other.name.strip().lower() == employee.name.strip().lower():
                raise DuplicateIdentifierError(UNIQUE_FIELDS["name"], employee.name)
            for attr in ("national_id", "tax_id", "social_security_id", "pension_id"):
                if getattr(other, attr).strip() == getattr(employee, attr).strip():
                    raise DuplicateIdentifierError(UNIQUE_FIELDS[attr], getattr(employee, attr))

    def add_employee(self,
                     name: str,
                     national_id: str,
                     tax_id: str,
                     social_security_id: str,
                     pension_id: str,
                     position: str,
                     base_salary: Decimal,
                     hire_date: date,
                     contract_type: ContractType = ContractType.MONTHLY,
                     afp_type: AfpType = AfpType.CONFIA,
                     job_description: Optional[str] = None,
                     termination_date: Optional[date] = None,
                     status: Optional[EmployeeStatus] = None) -> EmployeeEntity:
        employee = EmployeeEntity(
            name=name.strip() if isinstance(name, str) else name,
            national_id=national_id,
            tax_id=tax_id,
            social_security_id=social_security_id,
            pension_id=pension_id,
            position=position,
            base_salary=base_salary,
            hire_date=hire_date,
            contract_type=contract_type,
            afp_type=afp_type,
            job_description=job_description,
            termination_date=termination_date,
            status=status,
        )
        self._validate(employee)
        self._check_unique(employee)

        try:
            created = self.employees_repository.add(employee)
        except Exception as e:
            logger.error(f"Error adding employee '{name}': {e}", exc_info=True)
            raise
        logger.info(f"Employee '{created.name}' created with ID {created.id}.")
        return created

    def update_employee(self, employee_id: int, **changes: Any) -> EmployeeEntity:
        """Applies ``changes`` (attribute -> new value) to an existing employee."""
        employee = self.get_employee_by_id(employee_id)
        if not employee:
            raise ValueError(f"No se encontró el empleado con identificador {employee_id}.")

        for attr, value in changes.items():
            if attr == "id" or not hasattr(employee, attr):
                raise ValueError(f"Campo de empleado desconocido: {attr}")
            setattr(employee, attr, value)

        self._validate(employee)
        self._check_unique(employee)

        try:
            updated = self.employees_repository.update(employee)
        except Exception as e:
            logger.error(f"Error updating employee ID {employee_id}: {e}", exc_info=True)
            raise
        logger.info(f"Employee ID {employee_id} updated: {sorted(changes)}.")
        return updated

    def set_employee_status(self, employee_id: int, status: EmployeeStatus) -> EmployeeEntity:
        return self.update_employee(employee_id, status=status)

    def get_employee_by_id(self, employee_id: int) -> Optional[EmployeeEntity]:
        if not isinstance(employee_id, int) or employee_id <= 0: return None
        return self.employees_repository.get_by_id(employee_id)

    def get_all_employees(self, active_only: bool = False) -> List[EmployeeEntity]:
        if active_only:
            return self.employees_repository.get_active_employees()
        return self.employees_repository.get_all()

    def delete_employee(self, employee_id: int) -> bool:
        """Deletes the employee and their novelties. Stored payslips are kept."""
        employee = self.get_employee_by_id(employee_id)
        if not employee:
            logger.warning(f"Employee ID {employee_id} not found for deletion.")
            return False
        try:
            deleted = self.employees_repository.delete(employee_id)
        except Exception as e:
            logger.error(f"Error deleting employee ID {employee_id}: {e}", exc_info=True)
            raise
        logger.info(f"Employee ID {employee_id} ('{employee.name}') deleted.")
        return deleted
