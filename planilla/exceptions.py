# planilla/exceptions.py
"""
Typed errors for the payroll engine.

Every error here is a condition the user can fix and resubmit; none of them is
fatal to the process. They subclass ValueError so callers that already catch
ValueError from the managers keep working, and each carries a machine-readable
``code`` next to the Spanish message shown to the user.
"""

from typing import Dict, Optional


class PlanillaError(ValueError):
    """Base exception for all payroll errors."""

    code: str = "PLANILLA_ERROR"


class DuplicatePeriodError(PlanillaError):
    code: str = "DUPLICATE_PERIOD"

    def __init__(self, period: str):
        self.period = period
        super().__init__(f"La planilla para {period} ya ha sido ejecutada.")


class EmptyRosterError(PlanillaError):
    code: str = "EMPTY_ROSTER"

    def __init__(self):
        super().__init__("No hay empleados para ejecutar la planilla.")


class AlreadyPaidThisYearError(PlanillaError):
    code: str = "ALREADY_PAID_THIS_YEAR"

    def __init__(self, employee_id: int, year: int):
        self.employee_id = employee_id
        self.year = year
        super().__init__(f"Las vacaciones del empleado {employee_id} ya fueron pagadas en {year}.")


class NotEligibleError(PlanillaError):
    code: str = "NOT_ELIGIBLE"

    def __init__(self, employee_id: int, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(f"El empleado {employee_id} no es elegible: {reason}")


class OutsideDateWindowError(PlanillaError):
    code: str = "OUTSIDE_DATE_WINDOW"

    def __init__(self, window_start, window_end):
        self.window_start = window_start
        self.window_end = window_end
        super().__init__(
            f"El proceso de aguinaldo solo puede ejecutarse entre el {window_start} y el {window_end}."
        )


class AlreadyRunThisYearError(PlanillaError):
    code: str = "ALREADY_RUN_THIS_YEAR"

    def __init__(self, year: int):
        self.year = year
        super().__init__(f"El proceso de aguinaldo para {year} ya fue ejecutado.")


class DuplicateIdentifierError(PlanillaError):
    """An employee already uses this name or legal identifier."""

    code: str = "DUPLICATE_IDENTIFIER"

    def __init__(self, field_name: str, value: str):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Ya existe un empleado con {field_name} '{value}'.")


class DuplicateUsernameError(PlanillaError):
    code: str = "DUPLICATE_USERNAME"

    def __init__(self, username: str):
        self.username = username
        super().__init__("Este nombre de usuario ya está en uso.")


class NoveltyValidationError(PlanillaError):
    """Novelty input rejected; ``errors`` maps each field to its message."""

    code: str = "INVALID_NOVELTY"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message or " ".join(errors.values()))
