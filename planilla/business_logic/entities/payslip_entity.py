# planilla/business_logic/entities/payslip_entity.py
from dataclasses import dataclass
from decimal import Decimal

@dataclass(frozen=True)
class PayslipEntity: # No BaseEntity: payslips live only inside their PayrollEntity
    employee_id: int
    employee_name: str
    base_salary: Decimal
    overtime_pay: Decimal
    vacation_pay: Decimal
    aguinaldo_pay: Decimal
    aguinaldo_is_taxable: bool
    expenses: Decimal
    social_security_base: Decimal # Excludes aguinaldo
    gross_pay: Decimal            # Taxable income
    isss_deduction: Decimal
    afp_deduction: Decimal
    income_tax: Decimal
    total_deductions: Decimal
    other_deductions: Decimal     # Unpaid leave
    employer_isss: Decimal
    employer_afp: Decimal
    employer_contributions: Decimal
    total_earnings: Decimal
    net_pay: Decimal
    employer_cost: Decimal
