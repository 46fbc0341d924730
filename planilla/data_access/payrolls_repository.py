# planilla/data_access/payrolls_repository.py

from typing import List, Optional
import sqlite3
import logging

from planilla.data_access.base_repository import BaseRepository
from planilla.data_access.database_manager import DatabaseManager
from planilla.business_logic.entities.payroll_entity import PayrollEntity
from planilla.business_logic.entities.payslip_entity import PayslipEntity
from planilla.exceptions import DuplicatePeriodError

logger = logging.getLogger(__name__)

class PayrollsRepository(BaseRepository[PayrollEntity]):
    """
    Payrolls and their embedded payslips. Payslips have no lifecycle of their
    own: they are written with the payroll in one transaction and removed with
    it by ON DELETE CASCADE.
    """

    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PayrollEntity,
                         table_name="payrolls")
        # Column mapping only; never used to write payslips on their own.
        self._payslip_mapper = BaseRepository(db_manager, PayslipEntity, "payslips")

    def add(self, entity: PayrollEntity) -> PayrollEntity:
        payroll_fields = self._entity_to_dict_for_db(entity)
        payroll_fields.pop('id', None)
        payroll_query = (f"INSERT INTO {self._table_name} ({', '.join(payroll_fields)}) "
                         f"VALUES ({', '.join(['?'] * len(payroll_fields))})")

        try:
            with self.db_manager as conn:
                cursor = conn.cursor()
                cursor.execute(payroll_query, tuple(payroll_fields.values()))
                payroll_id = cursor.lastrowid
                for position, payslip in enumerate(entity.payslips):
                    slip_fields = self._payslip_mapper._entity_to_dict_for_db(payslip)
                    slip_fields["payroll_id"] = payroll_id
                    slip_fields["position"] = position
                    cursor.execute(
                        f"INSERT INTO payslips ({', '.join(slip_fields)}) "
                        f"VALUES ({', '.join(['?'] * len(slip_fields))})",
                        tuple(slip_fields.values()),
                    )
                conn.commit()
        except sqlite3.IntegrityError as e:
            if "payrolls.period" not in str(e):
                logger.error(f"Integrity error saving payroll for period '{entity.period}': {e}", exc_info=True)
                raise
            logger.warning(f"Payroll for period '{entity.period}' rejected by unique index: {e}")
            raise DuplicatePeriodError(entity.period) from e
        except sqlite3.Error as e:
            logger.error(f"Error saving payroll for period '{entity.period}': {e}", exc_info=True)
            raise

        entity.id = payroll_id
        logger.debug(f"Payroll ID {payroll_id} saved with {len(entity.payslips)} payslip(s).")
        return entity

    def update(self, entity: PayrollEntity) -> PayrollEntity:
        raise ValueError("Una planilla ejecutada no puede modificarse; elimínela y vuelva a ejecutarla.")

    def _load_payslips(self, payroll: PayrollEntity) -> PayrollEntity:
        rows = self.db_manager.fetch_all(
            "SELECT * FROM payslips WHERE payroll_id = ? ORDER BY position", (payroll.id,)
        )
        payroll.payslips = [self._payslip_mapper._entity_from_row(dict(r)) for r in rows]
        return payroll

    def get_by_id(self, entity_id: int) -> Optional[PayrollEntity]:
        payroll = super().get_by_id(entity_id)
        return self._load_payslips(payroll) if payroll else None

    def get_all(self, order_by: Optional[str] = "run_date DESC, id DESC") -> List[PayrollEntity]:
        return [self._load_payslips(p) for p in super().get_all(order_by=order_by)]

    def get_by_period(self, period: str) -> Optional[PayrollEntity]:
        found = self.find_by_criteria({"period": period})
        return self._load_payslips(found[0]) if found else None

    def get_all_periods(self) -> List[str]:
        rows = self.db_manager.fetch_all(f"SELECT period FROM {self._table_name}")
        return [row["period"] for row in rows]
