"""
Pytest fixtures for the payroll test suite.

Provides:
- A fresh sqlite database file per test (tmp_path)
- Repositories and managers wired to that database
- Factories for in-memory employees and novelties used by the pure calculators
"""

import itertools
from datetime import date, datetime
from decimal import Decimal

import pytest

from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.business_logic.employee_manager import EmployeeManager
from planilla.business_logic.novelty_manager import NoveltyManager
from planilla.business_logic.payroll_manager import PayrollManager
from planilla.business_logic.benefit_manager import BenefitManager
from planilla.business_logic.user_manager import UserManager
from planilla.business_logic.report_manager import ReportManager
from planilla.data_access.database_manager import DatabaseManager
from planilla.data_access.employees_repository import EmployeesRepository
from planilla.data_access.novelties_repository import NoveltiesRepository
from planilla.data_access.payrolls_repository import PayrollsRepository
from planilla.data_access.users_repository import UsersRepository

# Fixed clock: a Sunday in October 2026, inside no aguinaldo window.
NOW = datetime(2026, 10, 18, 9, 30)
TODAY = NOW.date()


# ============================================================================
# Pure factories
# ============================================================================


@pytest.fixture
def make_employee():
    """Builds an unsaved EmployeeEntity; ``id`` is assigned from a counter unless given."""
    counter = itertools.count(1)

    def _make(base_salary="900.00", hire_date=date(2020, 1, 15), **overrides):
        employee_id = overrides.pop("id", None) or next(counter)
        data = dict(
            name=f"Empleado {employee_id}",
            national_id=f"0000000{employee_id}-1",
            tax_id=f"0614-000000-00{employee_id}-1",
            social_security_id=f"10000000{employee_id}",
            pension_id=f"20000000000{employee_id}",
            position="Operario",
            base_salary=Decimal(base_salary),
            hire_date=hire_date,
        )
        data.update(overrides)
        return EmployeeEntity(id=employee_id, **data)

    return _make


@pytest.fixture
def make_novelty():
    def _make(employee_id, novelty_type, on=TODAY, **fields):
        if "amount" in fields and fields["amount"] is not None:
            fields["amount"] = Decimal(str(fields["amount"]))
        if "overtime_hours" in fields and fields["overtime_hours"] is not None:
            fields["overtime_hours"] = Decimal(str(fields["overtime_hours"]))
        return NoveltyEntity(employee_id=employee_id, date=on, type=novelty_type, **fields)

    return _make


# ============================================================================
# Database and repositories
# ============================================================================


@pytest.fixture
def db_manager(tmp_path):
    db = DatabaseManager(str(tmp_path / "planilla_test.db"))
    db.create_tables()
    return db


@pytest.fixture
def employees_repo(db_manager):
    return EmployeesRepository(db_manager)


@pytest.fixture
def novelties_repo(db_manager):
    return NoveltiesRepository(db_manager)


@pytest.fixture
def payrolls_repo(db_manager):
    return PayrollsRepository(db_manager)


@pytest.fixture
def users_repo(db_manager):
    return UsersRepository(db_manager)


# ============================================================================
# Managers
# ============================================================================


@pytest.fixture
def employee_manager(employees_repo):
    return EmployeeManager(employees_repo)


@pytest.fixture
def novelty_manager(novelties_repo, employees_repo):
    return NoveltyManager(novelties_repo, employees_repo)


@pytest.fixture
def payroll_manager(payrolls_repo, employees_repo, novelties_repo):
    return PayrollManager(payrolls_repo, employees_repo, novelties_repo, tax_schedule="vigente")


@pytest.fixture
def benefit_manager(employees_repo, novelties_repo):
    return BenefitManager(employees_repo, novelties_repo)


@pytest.fixture
def user_manager(users_repo):
    return UserManager(users_repo)


@pytest.fixture
def report_manager(employees_repo, payrolls_repo):
    return ReportManager(employees_repo, payrolls_repo)


# ============================================================================
# Saved employees
# ============================================================================


@pytest.fixture
def hire_employee(employee_manager):
    """Saves an employee through EmployeeManager with unique identifiers."""
    counter = itertools.count(1)

    def _hire(name=None, base_salary="900.00", hire_date=date(2020, 1, 15), **overrides):
        n = next(counter)
        return employee_manager.add_employee(
            name=name or f"Empleado {n}",
            national_id=overrides.pop("national_id", f"0123456{n}-{n}"),
            tax_id=overrides.pop("tax_id", f"0614-010190-10{n}-{n}"),
            social_security_id=overrides.pop("social_security_id", f"30000000{n}"),
            pension_id=overrides.pop("pension_id", f"40000000000{n}"),
            position=overrides.pop("position", "Contador"),
            base_salary=Decimal(base_salary),
            hire_date=hire_date,
            **overrides,
        )

    return _hire
