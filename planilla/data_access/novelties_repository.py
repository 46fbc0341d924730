# planilla/data_access/novelties_repository.py

from typing import List
import sqlite3
from datetime import date, timedelta

from planilla.data_access.base_repository import BaseRepository
from planilla.data_access.database_manager import DatabaseManager
from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.constants import NoveltyType
import logging

logger = logging.getLogger(__name__)

class NoveltiesRepository(BaseRepository[NoveltyEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=NoveltyEntity,
                         table_name="novelties")

    def get_by_employee_id(self, employee_id: int) -> List[NoveltyEntity]:
        return self.find_by_criteria({"employee_id": employee_id}, order_by="date DESC, id DESC")

    def get_for_month(self, year: int, month: int) -> List[NoveltyEntity]:
        first_day = date(year, month, 1)
        next_month = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        last_day = next_month - timedelta(days=1)
        return self.find_by_criteria({"date": ('BETWEEN', (first_day, last_day))},
                                     order_by="date DESC, id DESC")

    def get_by_type_and_year(self, novelty_type: NoveltyType, year: int) -> List[NoveltyEntity]:
        return self.find_by_criteria({
            "type": novelty_type,
            "date": ('BETWEEN', (date(year, 1, 1), date(year, 12, 31))),
        })

    def add_many(self, entities: List[NoveltyEntity]) -> List[NoveltyEntity]:
        """Inserts all novelties in one transaction; on any failure none is stored."""
        if not entities:
            return []
        rows = []
        for entity in entities:
            fields_to_insert = self._entity_to_dict_for_db(entity)
            fields_to_insert.pop('id', None)
            rows.append(fields_to_insert)
        query = (f"INSERT INTO {self._table_name} ({', '.join(rows[0])}) "
                 f"VALUES ({', '.join(['?'] * len(rows[0]))})")

        new_ids = []
        try:
            with self.db_manager as conn:
                cursor = conn.cursor()
                for fields_to_insert in rows:
                    cursor.execute(query, tuple(fields_to_insert.values()))
                    new_ids.append(cursor.lastrowid)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error saving {len(entities)} novelties in one batch: {e}", exc_info=True)
            raise

        for entity, new_id in zip(entities, new_ids):
            entity.id = new_id
        logger.debug(f"Saved {len(entities)} novelties in one batch.")
        return entities
