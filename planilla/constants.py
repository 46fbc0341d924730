# planilla/constants.py

from decimal import Decimal
from enum import Enum

# General
DATE_FORMAT = "%Y-%m-%d"

class ContractType(Enum):
    MONTHLY = "mensual"
    DAILY = "diario"
    HOURLY = "por_hora"

class EmployeeStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class AfpType(Enum):
    CONFIA = "Confía"
    CRECER = "Crecer"

class NoveltyType(Enum):
    OVERTIME = "overtime"
    EXPENSE = "expense"
    UNPAID_LEAVE = "unpaid_leave"
    VACATION_PAY = "vacation_pay"
    AGUINALDO = "aguinaldo"

class OvertimeRateType(Enum):
    DAY = "day"
    NIGHT = "night"
    HOLIDAY_DAY = "holiday_day"
    HOLIDAY_NIGHT = "holiday_night"

class UserRole(Enum):
    ADMIN = "admin"
    MANAGER = "manager"

# Labels used in generated novelty descriptions
OVERTIME_RATE_LABELS = {
    OvertimeRateType.DAY: "Diurna",
    OvertimeRateType.NIGHT: "Nocturna",
    OvertimeRateType.HOLIDAY_DAY: "Asueto Diurna",
    OvertimeRateType.HOLIDAY_NIGHT: "Asueto Nocturna",
}

# --- Employee deductions (ISSS / AFP) ---
ISSS_SALARY_CEILING = Decimal("1000")
ISSS_EMPLOYEE_RATE = Decimal("0.03")
AFP_EMPLOYEE_RATE = Decimal("0.0725")

# --- Employer contributions ---
ISSS_EMPLOYER_RATE = Decimal("0.075")
AFP_EMPLOYER_RATE = Decimal("0.0875")

# --- Income tax (monthly withholding table) ---
# (lower bound, rate, fixed addend), highest bracket first.
# A bracket applies when taxable income reaches its lower bound.
INCOME_TAX_SCHEDULES = {
    "vigente": (
        (Decimal("2038.10"), Decimal("0.30"), Decimal("288.57")),
        (Decimal("895.24"), Decimal("0.20"), Decimal("60.00")),
        (Decimal("472.00"), Decimal("0.10"), Decimal("17.67")),
    ),
    "anterior": (
        (Decimal("2038.10"), Decimal("0.30"), Decimal("288.57")),
        (Decimal("895.24"), Decimal("0.20"), Decimal("60.00")),
        (Decimal("550.00"), Decimal("0.10"), Decimal("17.67")),
    ),
}

# --- Salary conversions ---
DAYS_PER_MONTH = Decimal("30")
HOURS_PER_DAY = Decimal("8")
DAYS_PER_YEAR = 365

# --- Overtime ---
OVERTIME_MULTIPLIERS = {
    OvertimeRateType.DAY: Decimal("2.0"),
    OvertimeRateType.NIGHT: Decimal("2.25"),
    OvertimeRateType.HOLIDAY_DAY: Decimal("4.0"),
    OvertimeRateType.HOLIDAY_NIGHT: Decimal("4.5"),
}
MAX_DAY_OVERTIME_HOURS = Decimal("8")
MAX_NIGHT_OVERTIME_HOURS = Decimal("7")

# --- Unpaid leave ---
MIN_UNPAID_LEAVE_DAYS = 1
MAX_UNPAID_LEAVE_DAYS = 2

# --- Vacation bonus ---
VACATION_DAYS = Decimal("15")
VACATION_PREMIUM_RATE = Decimal("0.30")
VACATION_MIN_TENURE_DAYS = 365

# --- Aguinaldo ---
AGUINALDO_TAXABLE_THRESHOLD = Decimal("1500")
AGUINALDO_WINDOW_START = (10, 20)   # (month, day) October 20
AGUINALDO_WINDOW_END = (12, 20)     # December 20
AGUINALDO_REFERENCE_DATE = (12, 12) # December 12
# (minimum years of service, days to pay), highest tier first
AGUINALDO_TIERS = (
    (10, Decimal("21")),
    (3, Decimal("19")),
    (1, Decimal("15")),
)
AGUINALDO_PRORATED_DAYS = Decimal("15")
