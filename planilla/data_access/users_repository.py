# planilla/data_access/users_repository.py

from typing import Optional

from planilla.data_access.base_repository import BaseRepository
from planilla.data_access.database_manager import DatabaseManager
from planilla.business_logic.entities.user_entity import UserEntity
import logging

logger = logging.getLogger(__name__)

class UsersRepository(BaseRepository[UserEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=UserEntity,
                         table_name="users")

    def get_by_username(self, username: str) -> Optional[UserEntity]:
        # username column is COLLATE NOCASE
        row = self.db_manager.fetch_one(f"SELECT * FROM {self._table_name} WHERE username = ?", (username,))
        return self._entity_from_row(dict(row)) if row else None
