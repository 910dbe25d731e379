# validation.py
"""Explicit validation of employee writes, run before anything is stored.

Field checks (presence, types, no nulls for required fields) come from the
pydantic schemas. Uniqueness of ``employeeId`` and ``email`` is checked with
a lookup; the unique indexes in storage still catch writes that race past it.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pydantic
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from .exceptions import ValidationError
from .models import Employee
from .schemas import EmployeeBase, EmployeeCreate, EmployeeUpdate

REQUIRED_FIELDS = tuple(
    name for name, info in EmployeeBase.model_fields.items() if info.is_required()
)
UNIQUE_FIELDS = ("employee_id", "email")


def wire_name(field_name: str) -> str:
    return to_camel(field_name)


@dataclass
class ValidationResult:
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self, message: str) -> Dict[str, Any]:
        """Return the validated data or raise ``ValidationError``."""
        if not self.ok:
            raise ValidationError(message, errors=self.errors)
        return self.data


def _pydantic_errors(exc: pydantic.ValidationError) -> List[Dict[str, Any]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def validate_create(payload: Any) -> ValidationResult:
    """Check a create body: every required field present and well typed."""
    try:
        employee = EmployeeCreate.model_validate(payload)
    except pydantic.ValidationError as exc:
        return ValidationResult(errors=_pydantic_errors(exc))
    return ValidationResult(data=employee.model_dump())


def validate_update(payload: Any) -> ValidationResult:
    """Check a partial update body: sent fields well typed, required ones not null."""
    try:
        update = EmployeeUpdate.model_validate(payload)
    except pydantic.ValidationError as exc:
        return ValidationResult(errors=_pydantic_errors(exc))

    data = update.model_dump(exclude_unset=True)
    errors = [
        {"field": wire_name(name), "message": "Field is required and cannot be null"}
        for name in REQUIRED_FIELDS
        if name in data and data[name] is None
    ]
    return ValidationResult(data=data, errors=errors)


async def check_unique(
        db: AsyncSession,
        data: Dict[str, Any],
        exclude_id: Optional[str] = None,
) -> ValidationResult:
    """Report values of unique fields that another employee already holds."""
    wanted = {name: data[name] for name in UNIQUE_FIELDS if data.get(name) is not None}
    result = ValidationResult(data=data)
    if not wanted:
        return result

    statement = select(Employee).where(
        or_(*(getattr(Employee, name) == value for name, value in wanted.items()))
    )
    if exclude_id is not None:
        statement = statement.where(Employee.id != exclude_id)

    clashes = (await db.execute(statement)).scalars().all()
    for name, value in wanted.items():
        if any(getattr(other, name) == value for other in clashes):
            result.errors.append({
                "field": wire_name(name),
                "message": f"An employee with {wire_name(name)} '{value}' already exists",
            })
    return result
