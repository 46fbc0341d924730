# planilla/business_logic/entities/__init__.py
from .base_entity import BaseEntity
from .employee_entity import EmployeeEntity
from .novelty_entity import NoveltyEntity
from .payslip_entity import PayslipEntity
from .payroll_entity import PayrollEntity
from .user_entity import UserEntity

__all__ = [
    "BaseEntity", "EmployeeEntity", "NoveltyEntity",
    "PayslipEntity", "PayrollEntity", "UserEntity",
]
