# planilla/data_access/employees_repository.py

from typing import List, Optional

from planilla.data_access.base_repository import BaseRepository
from planilla.data_access.database_manager import DatabaseManager
from planilla.business_logic.entities.employee_entity import EmployeeEntity
from planilla.constants import EmployeeStatus
import logging

logger = logging.getLogger(__name__)

class EmployeesRepository(BaseRepository[EmployeeEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=EmployeeEntity,
                         table_name="employees")

    def get_active_employees(self) -> List[EmployeeEntity]:
        # NULL status counts as active
        query = f"SELECT * FROM {self._table_name} WHERE status IS NULL OR status != ? ORDER BY id"
        rows = self.db_manager.fetch_all(query, (EmployeeStatus.INACTIVE.value,))
        return [self._entity_from_row(dict(r)) for r in rows]

    def get_by_national_id(self, national_id: str) -> Optional[EmployeeEntity]:
        row = self.db_manager.fetch_one(f"SELECT * FROM {self._table_name} WHERE national_id = ?", (national_id,))
        return self._entity_from_row(dict(row)) if row else None
