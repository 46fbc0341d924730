# planilla/business_logic/entities/payroll_entity.py
from dataclasses import dataclass, field
from typing import List
from datetime import datetime
from decimal import Decimal
from .base_entity import BaseEntity
from .payslip_entity import PayslipEntity

@dataclass
class PayrollEntity(BaseEntity):
    period: str # e.g. "Octubre de 2026", unique across payrolls
    run_date: datetime
    total_cost: Decimal = field(default=Decimal("0"))
    payslips: List[PayslipEntity] = field(default_factory=list) # Stored in payslips table, not a column
