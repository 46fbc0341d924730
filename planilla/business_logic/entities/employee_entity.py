# planilla/business_logic/entities/employee_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity
from planilla.constants import ContractType, AfpType, EmployeeStatus

@dataclass
class EmployeeEntity(BaseEntity):
    name: str
    national_id: str         # DUI
    tax_id: str              # NIT
    social_security_id: str  # ISSS affiliation number
    pension_id: str          # NUP (AFP account)
    position: str
    base_salary: Decimal     # Monthly
    hire_date: date
    contract_type: ContractType = field(default=ContractType.MONTHLY)
    afp_type: AfpType = field(default=AfpType.CONFIA)
    job_description: Optional[str] = field(default=None)
    termination_date: Optional[date] = field(default=None)
    status: Optional[EmployeeStatus] = field(default=None) # None means active

    @property
    def is_active(self) -> bool:
        return self.status != EmployeeStatus.INACTIVE
