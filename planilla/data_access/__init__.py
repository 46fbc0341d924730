# planilla/data_access/__init__.py

from .database_manager import DatabaseManager
from .base_repository import BaseRepository

from .employees_repository import EmployeesRepository
from .novelties_repository import NoveltiesRepository
from .payrolls_repository import PayrollsRepository
from .users_repository import UsersRepository

ALL_REPOSITORIES = [
    EmployeesRepository, NoveltiesRepository, PayrollsRepository, UsersRepository,
]
