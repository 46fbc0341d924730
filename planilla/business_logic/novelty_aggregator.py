# planilla/business_logic/novelty_aggregator.py

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Iterator
import logging

from planilla.business_logic.entities.novelty_entity import NoveltyEntity
from planilla.constants import NoveltyType, OVERTIME_MULTIPLIERS, DAYS_PER_MONTH, HOURS_PER_DAY

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class NoveltyTotals:
    overtime_pay: Decimal = ZERO
    vacation_pay: Decimal = ZERO
    aguinaldo_pay: Decimal = ZERO
    expenses: Decimal = ZERO
    other_deductions: Decimal = ZERO # Unpaid leave


def hourly_rate(base_salary: Decimal) -> Decimal:
    return base_salary / DAYS_PER_MONTH / HOURS_PER_DAY

def overtime_pay(base_salary: Decimal, novelty: NoveltyEntity) -> Decimal:
    if novelty.overtime_rate_type is None or novelty.overtime_hours is None:
        raise ValueError(f"Novedad de horas extra {novelty.id} sin horas o tipo de jornada.")
    multiplier = OVERTIME_MULTIPLIERS[novelty.overtime_rate_type]
    return novelty.overtime_hours * hourly_rate(base_salary) * multiplier

def novelty_amount(novelty: NoveltyEntity) -> Decimal:
    if novelty.amount is None:
        raise ValueError(f"Novedad {novelty.id} de tipo {novelty.type.value} sin monto.")
    return novelty.amount

def novelties_in_period(novelties: Iterable[NoveltyEntity], employee_id: int, year: int, month: int) -> Iterator[NoveltyEntity]:
    for novelty in novelties:
        if novelty.employee_id == employee_id and novelty.date.year == year and novelty.date.month == month:
            yield novelty

def aggregate_novelties(novelties: Iterable[NoveltyEntity],
                        employee_id: int,
                        year: int,
                        month: int,
                        base_salary: Decimal) -> NoveltyTotals:
    """
    Sums one employee's novelties for (year, month) by kind. Every novelty in
    the period counts, including several of the same type.
    """
    overtime = vacation = aguinaldo = expenses = other_deductions = ZERO
    count = 0

    for novelty in novelties_in_period(novelties, employee_id, year, month):
        count += 1
        if novelty.type == NoveltyType.OVERTIME:
            overtime += overtime_pay(base_salary, novelty)
        elif novelty.type == NoveltyType.VACATION_PAY:
            vacation += novelty_amount(novelty)
        elif novelty.type == NoveltyType.AGUINALDO:
            aguinaldo += novelty_amount(novelty)
        elif novelty.type == NoveltyType.EXPENSE:
            expenses += novelty_amount(novelty)
        elif novelty.type == NoveltyType.UNPAID_LEAVE:
            other_deductions += novelty_amount(novelty)

    if count:
        logger.debug(f"Aggregated {count} novelty(ies) for employee ID {employee_id} in {year}-{month:02d}.")

    return NoveltyTotals(
        overtime_pay=overtime,
        vacation_pay=vacation,
        aguinaldo_pay=aguinaldo,
        expenses=expenses,
        other_deductions=other_deductions,
    )
