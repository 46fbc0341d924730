# planilla/business_logic/payslip_builder.py

from decimal import Decimal
from typing import Optional

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.business_logic.entities.payslip_entity import PayslipEntity
from planilla.business_logic.novelty_aggregator import NoveltyTotals
from planilla.business_logic.deduction_calculator import (
    calculate_employee_deductions, calculate_employer_contributions,
)
from planilla.constants import AGUINALDO_TAXABLE_THRESHOLD


def is_aguinaldo_taxable(base_salary: Decimal) -> bool:
    return base_salary > AGUINALDO_TAXABLE_THRESHOLD

def build_payslip(employee: EmployeeEntity, totals: NoveltyTotals, tax_schedule: Optional[str] = None) -> PayslipEntity:
    """
    One employee's payslip for a period.

    Aguinaldo never enters the social-security base, and enters taxable
    income only above the taxability threshold, but it is always paid out
    and always part of the employer's cost.
    """
    base = employee.base_salary
    social_security_base = base + totals.overtime_pay + totals.vacation_pay
    aguinaldo_taxable = is_aguinaldo_taxable(base)
    gross_pay = social_security_base + (totals.aguinaldo_pay if aguinaldo_taxable else Decimal("0"))

    deductions = calculate_employee_deductions(gross_pay, tax_schedule)
    employer = calculate_employer_contributions(social_security_base)

    total_earnings = social_security_base + totals.aguinaldo_pay + totals.expenses
    net_pay = total_earnings - deductions.total - totals.other_deductions
    employer_cost = social_security_base + employer.total + totals.aguinaldo_pay

    return PayslipEntity(
        employee_id=employee.id,
        employee_name=employee.name,
        base_salary=base,
        overtime_pay=totals.overtime_pay,
        vacation_pay=totals.vacation_pay,
        aguinaldo_pay=totals.aguinaldo_pay,
        aguinaldo_is_taxable=aguinaldo_taxable,
        expenses=totals.expenses,
        social_security_base=social_security_base,
        gross_pay=gross_pay,
        isss_deduction=deductions.social_security,
        afp_deduction=deductions.pension,
        income_tax=deductions.income_tax,
        total_deductions=deductions.total,
        other_deductions=totals.other_deductions,
        employer_isss=employer.social_security,
        employer_afp=employer.pension,
        employer_contributions=employer.total,
        total_earnings=total_earnings,
        net_pay=net_pay,
        employer_cost=employer_cost,
    )
