# planilla/data_access/database_manager.py

import sqlite3
import logging
from planilla.config import DATABASE_PATH
from planilla.constants import (
    ContractType, AfpType, EmployeeStatus, NoveltyType, OvertimeRateType, UserRole
)

logger = logging.getLogger(__name__)


def _enum_values(enum_cls) -> str:
    return ', '.join(f"'{member.value}'" for member in enum_cls)


class DatabaseManager:
    def __init__(self, db_path=DATABASE_PATH):
        self.db_path = db_path
        self.conn = None

    def __enter__(self):
        try:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row # Access columns by name
            self.conn.execute("PRAGMA foreign_keys = ON;") # Enforce foreign key constraints
            logger.debug(f"Database connection established to {self.db_path}")
            return self.conn
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database {self.db_path}: {e}")
            raise

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Anything not committed inside the block is rolled back on close.
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Database connection closed.")

    def execute_query(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                conn.commit()
                return cursor
        except sqlite3.Error as e:
            logger.error(f"Query execution failed: {query} with params {params} - {e}")
            raise

    def fetch_one(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Fetch one failed: {query} with params {params} - {e}")
            raise

    def fetch_all(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Fetch all failed: {query} with params {params} - {e}")
            raise

    def create_tables(self):
        # Money columns are TEXT so Decimal values round-trip exactly.
        queries = {
            "employees": """
            CREATE TABLE IF NOT EXISTS employees (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                national_id TEXT NOT NULL UNIQUE,        -- DUI
                tax_id TEXT NOT NULL UNIQUE,             -- NIT
                social_security_id TEXT NOT NULL UNIQUE, -- ISSS
                pension_id TEXT NOT NULL UNIQUE,         -- NUP
                position TEXT NOT NULL,
                job_description TEXT,
                base_salary TEXT NOT NULL,
                contract_type TEXT NOT NULL CHECK(contract_type IN ({contract_types})),
                hire_date TEXT NOT NULL,
                termination_date TEXT,
                afp_type TEXT NOT NULL CHECK(afp_type IN ({afp_types})),
                status TEXT CHECK(status IN ({statuses}))  -- NULL means active
            );
            """.format(
                contract_types=_enum_values(ContractType),
                afp_types=_enum_values(AfpType),
                statuses=_enum_values(EmployeeStatus),
            ),
            "novelties": """
            CREATE TABLE IF NOT EXISTS novelties (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                employee_id INTEGER NOT NULL,
                date TEXT NOT NULL,
                type TEXT NOT NULL CHECK(type IN ({novelty_types})),
                description TEXT NOT NULL DEFAULT '',
                amount TEXT,
                overtime_hours TEXT,
                overtime_rate_type TEXT CHECK(overtime_rate_type IN ({rate_types})),
                unpaid_leave_days INTEGER,
                FOREIGN KEY (employee_id) REFERENCES employees(id) ON DELETE CASCADE
            );
            """.format(
                novelty_types=_enum_values(NoveltyType),
                rate_types=_enum_values(OvertimeRateType),
            ),
            "payrolls": """
            CREATE TABLE IF NOT EXISTS payrolls (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                period TEXT NOT NULL UNIQUE,  -- one run per period
                run_date TEXT NOT NULL,
                total_cost TEXT NOT NULL
            );
            """,
            "payslips": """
            CREATE TABLE IF NOT EXISTS payslips (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                payroll_id INTEGER NOT NULL,
                position INTEGER NOT NULL,    -- roster order within the run
                employee_id INTEGER NOT NULL, -- no FK: payslips outlive deleted employees
                employee_name TEXT NOT NULL,
                base_salary TEXT NOT NULL,
                overtime_pay TEXT NOT NULL,
                vacation_pay TEXT NOT NULL,
                aguinaldo_pay TEXT NOT NULL,
                aguinaldo_is_taxable INTEGER NOT NULL DEFAULT 0,
                expenses TEXT NOT NULL,
                social_security_base TEXT NOT NULL,
                gross_pay TEXT NOT NULL,
                isss_deduction TEXT NOT NULL,
                afp_deduction TEXT NOT NULL,
                income_tax TEXT NOT NULL,
                total_deductions TEXT NOT NULL,
                other_deductions TEXT NOT NULL,
                employer_isss TEXT NOT NULL,
                employer_afp TEXT NOT NULL,
                employer_contributions TEXT NOT NULL,
                total_earnings TEXT NOT NULL,
                net_pay TEXT NOT NULL,
                employer_cost TEXT NOT NULL,
                FOREIGN KEY (payroll_id) REFERENCES payrolls(id) ON DELETE CASCADE
            );
            """,
            "users": """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE COLLATE NOCASE,
                password_hash TEXT NOT NULL,
                role TEXT NOT NULL CHECK(role IN ({roles}))
            );
            """.format(roles=_enum_values(UserRole)),
        }

        order = ['employees', 'novelties', 'payrolls', 'payslips', 'users']

        try:
            with self as conn:
                cursor = conn.cursor()
                logger.info(f"Attempting to execute {len(order)} table creation SQL query(ies).")
                for query_index, table_name in enumerate(order):
                    logger.debug(f"Executing SQL for: {table_name} (Query {query_index+1}/{len(order)})")
                    try:
                        cursor.execute(queries[table_name])
                    except sqlite3.Error as e_exec:
                        logger.error(f"SQLite error creating table '{table_name}': {e_exec}")
                        raise
                conn.commit()
                logger.info("Database tables checked/created successfully.")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database schema: {e}", exc_info=True)
            raise
