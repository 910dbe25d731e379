# filters.py
"""Shared query/filter builder for the listing and search endpoints.

An ``EmployeeFilter`` holds the optional request parameters and renders
them two ways with the same semantics:

* ``conditions()`` / ``apply()`` produce SQL conditions for the storage query;
* ``matches()`` evaluates a single in-memory ``Employee``.

Rules: ``employeeId`` and ``department`` are exact matches, ``name`` is a
case-insensitive substring of either the first or the last name, and the
joining-date range applies only when *both* bounds are given (inclusive).
Everything supplied is AND-ed; nothing supplied matches every employee.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import String, and_, or_
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement
from sqlmodel import select

from .exceptions import ValidationError
from .models import Employee

LIKE_ESCAPE = "\\"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    return value


def parse_date(value: Optional[str], param: str) -> Optional[date]:
    """Parse an ISO date query parameter; empty means absent."""
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        stamp = value[:-1] + "+00:00" if value.endswith("Z") else value
        return datetime.fromisoformat(stamp).date()
    except ValueError:
        raise ValidationError(
            f"Invalid date for '{param}': {value}",
            errors=[{"field": param, "message": "Expected an ISO date (YYYY-MM-DD)"}],
        )


class casefold(FunctionElement):
    """Unicode-aware case folding of a string column."""

    type = String()
    name = "casefold"
    inherit_cache = True


@compiles(casefold)
def _casefold_default(element, compiler, **kw):
    return "lower(%s)" % compiler.process(element.clauses, **kw)


@compiles(casefold, "sqlite")
def _casefold_sqlite(element, compiler, **kw):
    # Registered per connection by database.register_sqlite_functions
    return "casefold(%s)" % compiler.process(element.clauses, **kw)


def escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


@dataclass(frozen=True)
class EmployeeFilter:
    employee_id: Optional[str] = None
    name: Optional[str] = None
    department: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @classmethod
    def from_query(
            cls,
            employee_id: Optional[str] = None,
            name: Optional[str] = None,
            department: Optional[str] = None,
            date_from: Optional[str] = None,
            date_to: Optional[str] = None,
    ) -> "EmployeeFilter":
        """Build a filter from raw query-string values.

        The date bounds are only parsed when both are present; a lone bound
        is ignored even if it is not a valid date.
        """
        date_from, date_to = _blank_to_none(date_from), _blank_to_none(date_to)
        if date_from is None or date_to is None:
            date_from = date_to = None
        return cls(
            employee_id=_blank_to_none(employee_id),
            name=_blank_to_none(name),
            department=_blank_to_none(department),
            date_from=parse_date(date_from, "dateFrom"),
            date_to=parse_date(date_to, "dateTo"),
        )

    @property
    def has_date_range(self) -> bool:
        # A single bound is ignored rather than treated as open-ended.
        return self.date_from is not None and self.date_to is not None

    def conditions(self) -> List[Any]:
        clauses: List[Any] = []

        if self.employee_id is not None:
            clauses.append(Employee.employee_id == self.employee_id)

        if self.name is not None:
            pattern = f"%{escape_like(self.name.casefold())}%"
            clauses.append(or_(
                casefold(Employee.first_name).like(pattern, escape=LIKE_ESCAPE),
                casefold(Employee.last_name).like(pattern, escape=LIKE_ESCAPE),
            ))

        if self.department is not None:
            clauses.append(Employee.department == self.department)

        if self.has_date_range:
            clauses.append(Employee.date_of_joining >= self.date_from)
            clauses.append(Employee.date_of_joining <= self.date_to)

        return clauses

    def apply(self, statement):
        clauses = self.conditions()
        if clauses:
            statement = statement.where(and_(*clauses))
        return statement

    def statement(self):
        return self.apply(select(Employee))

    def matches(self, employee: Employee) -> bool:
        """Evaluate the filter against a single employee in memory."""
        if self.employee_id is not None and employee.employee_id != self.employee_id:
            return False

        if self.name is not None:
            needle = self.name.casefold()
            if needle not in employee.first_name.casefold() and needle not in employee.last_name.casefold():
                return False

        if self.department is not None and employee.department != self.department:
            return False

        if self.has_date_range:
            if not (self.date_from <= employee.date_of_joining <= self.date_to):
                return False

        return True
