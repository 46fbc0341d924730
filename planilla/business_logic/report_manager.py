# planilla/business_logic/report_manager.py

from typing import Optional, List, Dict, Any, TYPE_CHECKING
from decimal import Decimal
import logging

from planilla.utils.date_converter import format_currency

if TYPE_CHECKING:
    from planilla.data_access.employees_repository import EmployeesRepository
    from planilla.data_access.payrolls_repository import PayrollsRepository

logger = logging.getLogger(__name__)

RECENT_EMPLOYEES_LIMIT = 5


class ReportManager:
    def __init__(self,
                 employees_repository: 'EmployeesRepository',
                 payrolls_repository: 'PayrollsRepository'):
        self.employees_repository = employees_repository
        self.payrolls_repository = payrolls_repository

    def get_dashboard_summary(self) -> Dict[str, Any]:
        logger.info("Generating dashboard summary.")
        employees = self.employees_repository.get_all()
        payrolls = self.payrolls_repository.get_all()
        latest = payrolls[0] if payrolls else None

        average_salary: Optional[Decimal] = None
        if employees:
            average_salary = sum((e.base_salary for e in employees), Decimal("0")) / len(employees)

        return {
            "employee_count": len(employees),
            "latest_payroll_period": latest.period if latest else None,
            "latest_payroll_cost": latest.total_cost if latest else None,
            "average_salary": average_salary,
            "recent_employees": [
                {"id": e.id, "name": e.name, "position": e.position, "base_salary": e.base_salary}
                for e in employees[:RECENT_EMPLOYEES_LIMIT]
            ],
        }

    def get_payroll_report(self, payroll_id: int) -> Optional[Dict[str, Any]]:
        """Per-payslip rows and column totals of one payroll, with display strings."""
        payroll = self.payrolls_repository.get_by_id(payroll_id)
        if not payroll:
            logger.warning(f"Payroll ID {payroll_id} not found for report.")
            return None

        rows: List[Dict[str, Any]] = []
        totals = {"gross_pay": Decimal("0"), "total_deductions": Decimal("0"),
                  "net_pay": Decimal("0"), "employer_cost": Decimal("0")}
        for slip in payroll.payslips:
            rows.append({
                "employee_name": slip.employee_name,
                "gross_pay": format_currency(slip.gross_pay),
                "total_deductions": format_currency(slip.total_deductions + slip.other_deductions),
                "net_pay": format_currency(slip.net_pay),
                "employer_cost": format_currency(slip.employer_cost),
            })
            totals["gross_pay"] += slip.gross_pay
            totals["total_deductions"] += slip.total_deductions + slip.other_deductions
            totals["net_pay"] += slip.net_pay
            totals["employer_cost"] += slip.employer_cost

        return {
            "period": payroll.period,
            "run_date": payroll.run_date,
            "rows": rows,
            "totals": totals,
            "total_cost": format_currency(payroll.total_cost),
        }
