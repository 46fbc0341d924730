# planilla/business_logic/entities/novelty_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity
from planilla.constants import NoveltyType, OvertimeRateType

@dataclass
class NoveltyEntity(BaseEntity):
    employee_id: int # Foreign Key to EmployeeEntity
    date: date
    type: NoveltyType
    description: str = field(default="")
    # expense / unpaid_leave / vacation_pay / aguinaldo
    amount: Optional[Decimal] = field(default=None)
    # overtime only
    overtime_hours: Optional[Decimal] = field(default=None)
    overtime_rate_type: Optional[OvertimeRateType] = field(default=None)
    # unpaid_leave only
    unpaid_leave_days: Optional[int] = field(default=None)
