# crud.py
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import NotFoundError, StorageFault, ValidationError
from .filters import EmployeeFilter
from .models import Employee
from .validation import check_unique, validate_create, validate_update

logger = logging.getLogger(__name__)


async def _commit_write(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Uniqueness conflict while trying to %s: %s", action, exc.orig)
        raise ValidationError(
            "Conflict: employeeId or email already exists",
            errors=[{"field": "employeeId/email", "message": "Value must be unique"}],
        )
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Storage failure while trying to %s", action)
        raise StorageFault(f"Error trying to {action}", write=True) from exc


# --- Employee CRUD ---

async def create_employee(db: AsyncSession, payload: Any) -> Employee:
    data = validate_create(payload).raise_for_errors("Error adding employee")

    try:
        (await check_unique(db, data)).raise_for_errors("Error adding employee")
        db_employee = Employee(**data)
        db.add(db_employee)
        await _commit_write(db, "add employee")
        await db.refresh(db_employee)
    except SQLAlchemyError as exc:
        raise StorageFault("Error adding employee", write=True) from exc

    logger.info("Created employee %s (id=%s)", db_employee.employee_id, db_employee.id)
    return db_employee


async def get_employee(db: AsyncSession, employee_id: str) -> Optional[Employee]:
    """Look an employee up by internal identifier."""
    try:
        return await db.get(Employee, employee_id)
    except SQLAlchemyError as exc:
        raise StorageFault("Error fetching employee", write=False) from exc


async def find_employees(db: AsyncSession, employee_filter: EmployeeFilter) -> List[Employee]:
    try:
        result = await db.execute(employee_filter.statement())
    except SQLAlchemyError as exc:
        raise StorageFault("Error fetching employees", write=False) from exc
    return list(result.scalars().all())


async def update_employee(db: AsyncSession, employee_id: str, payload: Any) -> Employee:
    """Apply the fields present in ``payload`` to an existing employee."""
    try:
        db_employee = await db.get(Employee, employee_id)
    except SQLAlchemyError as exc:
        raise StorageFault("Error updating employee", write=True) from exc
    if db_employee is None:
        raise NotFoundError("Employee not found")

    update_data = validate_update(payload).raise_for_errors("Error updating employee")

    try:
        (await check_unique(db, update_data, exclude_id=employee_id)).raise_for_errors(
            "Error updating employee"
        )
        for key, value in update_data.items():
            setattr(db_employee, key, value)
        db.add(db_employee)
        await _commit_write(db, "update employee")
        await db.refresh(db_employee)
    except SQLAlchemyError as exc:
        raise StorageFault("Error updating employee", write=True) from exc

    logger.info("Updated employee id=%s fields=%s", employee_id, sorted(update_data))
    return db_employee


async def delete_employee(db: AsyncSession, employee_id: str) -> bool:
    """Delete by internal identifier; returns whether a record was removed."""
    try:
        db_employee = await db.get(Employee, employee_id)
        if db_employee is None:
            return False
        await db.delete(db_employee)
    except SQLAlchemyError as exc:
        raise StorageFault("Error deleting employee", write=True) from exc

    await _commit_write(db, "delete employee")
    logger.info("Deleted employee id=%s", employee_id)
    return True
