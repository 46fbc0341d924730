# planilla/business_logic/deduction_calculator.py
"""
Statutory payroll calculations for El Salvador.

Pure functions, Decimal in and Decimal out. Nothing is rounded here; amounts
are quantized to cents only when presented.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from planilla.config import INCOME_TAX_SCHEDULE
from planilla.constants import (
    ISSS_SALARY_CEILING, ISSS_EMPLOYEE_RATE, AFP_EMPLOYEE_RATE,
    ISSS_EMPLOYER_RATE, AFP_EMPLOYER_RATE, INCOME_TAX_SCHEDULES,
)

ZERO = Decimal("0")


@dataclass(frozen=True)
class EmployeeDeductions:
    social_security: Decimal # ISSS
    pension: Decimal         # AFP
    income_tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class EmployerContributions:
    social_security: Decimal
    pension: Decimal
    total: Decimal


def calculate_income_tax(taxable_income: Decimal, schedule: Optional[str] = None) -> Decimal:
    """
    Monthly income tax withholding for income already net of ISSS and AFP.

    Only the highest bracket whose lower bound is reached applies:
    ``(taxable_income - bound) * rate + addend``. Never negative.
    """
    brackets = INCOME_TAX_SCHEDULES[schedule or INCOME_TAX_SCHEDULE]
    for lower_bound, rate, addend in brackets:
        if taxable_income >= lower_bound:
            return max(ZERO, (taxable_income - lower_bound) * rate + addend)
    return ZERO


def calculate_employee_deductions(gross_taxable_pay: Decimal, schedule: Optional[str] = None) -> EmployeeDeductions:
    if gross_taxable_pay < 0:
        raise ValueError("El salario gravable no puede ser negativo.")

    social_security = min(gross_taxable_pay, ISSS_SALARY_CEILING) * ISSS_EMPLOYEE_RATE
    pension = gross_taxable_pay * AFP_EMPLOYEE_RATE
    taxable_after_ss_pension = gross_taxable_pay - social_security - pension
    income_tax = calculate_income_tax(taxable_after_ss_pension, schedule)

    return EmployeeDeductions(
        social_security=social_security,
        pension=pension,
        income_tax=income_tax,
        total=social_security + pension + income_tax,
    )


def calculate_employer_contributions(social_security_base_pay: Decimal) -> EmployerContributions:
    """Employer ISSS (capped base) and AFP (uncapped) on pay excluding aguinaldo."""
    if social_security_base_pay < 0:
        raise ValueError("La base de cotización no puede ser negativa.")

    social_security = min(social_security_base_pay, ISSS_SALARY_CEILING) * ISSS_EMPLOYER_RATE
    pension = social_security_base_pay * AFP_EMPLOYER_RATE
    return EmployerContributions(
        social_security=social_security,
        pension=pension,
        total=social_security + pension,
    )
