# planilla/main_app.py
import sys
import argparse
import logging
import logging.config

# --- Configuration and Constants ---
from planilla.config import DATABASE_PATH, LOGGING_CONFIG, INCOME_TAX_SCHEDULE, COMPANY_NAME, ensure_directories
from planilla.exceptions import PlanillaError

# --- Data Access Layer (DAL) ---
from planilla.data_access.database_manager import DatabaseManager
from planilla.data_access.employees_repository import EmployeesRepository
from planilla.data_access.novelties_repository import NoveltiesRepository
from planilla.data_access.payrolls_repository import PayrollsRepository
from planilla.data_access.users_repository import UsersRepository

# --- Business Logic Layer (BLL) ---
from planilla.business_logic.employee_manager import EmployeeManager
from planilla.business_logic.novelty_manager import NoveltyManager
from planilla.business_logic.payroll_manager import PayrollManager
from planilla.business_logic.benefit_manager import BenefitManager
from planilla.business_logic.user_manager import UserManager
from planilla.business_logic.report_manager import ReportManager
from planilla.utils.date_converter import format_currency

logger = logging.getLogger(__name__)


class PayrollApplication:
    """Wires repositories and managers around one database file."""

    def __init__(self, db_path=DATABASE_PATH, tax_schedule=INCOME_TAX_SCHEDULE):
        logger.info("Initializing Database Manager and creating tables...")
        self.db_manager = DatabaseManager(db_path)
        try:
            self.db_manager.create_tables()
        except Exception as e:
            logger.error(f"FATAL: Could not initialize database: {e}", exc_info=True)
            raise

        logger.info("Initializing Repositories...")
        self.employees_repo = EmployeesRepository(self.db_manager)
        self.novelties_repo = NoveltiesRepository(self.db_manager)
        self.payrolls_repo = PayrollsRepository(self.db_manager)
        self.users_repo = UsersRepository(self.db_manager)

        logger.info("Initializing Managers...")
        self.employee_manager = EmployeeManager(self.employees_repo)
        self.novelty_manager = NoveltyManager(self.novelties_repo, self.employees_repo)
        self.payroll_manager = PayrollManager(
            payrolls_repository=self.payrolls_repo,
            employees_repository=self.employees_repo,
            novelties_repository=self.novelties_repo,
            tax_schedule=tax_schedule,
        )
        self.benefit_manager = BenefitManager(self.employees_repo, self.novelties_repo)
        self.user_manager = UserManager(self.users_repo)
        self.report_manager = ReportManager(self.employees_repo, self.payrolls_repo)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="planilla", description=f"{COMPANY_NAME}: planilla de El Salvador")
    parser.add_argument("--db", default=DATABASE_PATH, help="Ruta del archivo de base de datos")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("init", help="Crear las tablas de la base de datos")
    subparsers.add_parser("run-payroll", help="Ejecutar la planilla del mes actual")
    subparsers.add_parser("summary", help="Mostrar el resumen del panel")
    subparsers.add_parser("aguinaldo", help="Calcular y confirmar el aguinaldo del año")
    return parser


def main(argv=None):
    ensure_directories()
    logging.config.dictConfig(LOGGING_CONFIG)
    args = _build_parser().parse_args(argv)
    logger.info(f"Application starting: command '{args.command}'.")

    app = PayrollApplication(args.db)
    try:
        if args.command == "run-payroll":
            payroll = app.payroll_manager.run_payroll()
            print(f"Planilla {payroll.period}: {len(payroll.payslips)} empleado(s), "
                  f"costo total {format_currency(payroll.total_cost)}")
        elif args.command == "summary":
            summary = app.report_manager.get_dashboard_summary()
            print(f"Empleados: {summary['employee_count']}")
            if summary["latest_payroll_period"]:
                print(f"Última planilla: {summary['latest_payroll_period']} "
                      f"({format_currency(summary['latest_payroll_cost'])})")
        elif args.command == "aguinaldo":
            items = app.benefit_manager.calculate_aguinaldo()
            created = app.benefit_manager.confirm_aguinaldo_batch(items)
            print(f"Aguinaldo registrado para {len(created)} empleado(s).")
    except PlanillaError as e:
        logger.warning(f"Command '{args.command}' rejected: {e}")
        print(str(e), file=sys.stderr)
        return 1
    logger.info("Command finished successfully.")
    return 0

if __name__ == '__main__':
    sys.exit(main())
