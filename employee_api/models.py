# models.py
import uuid
from datetime import date
from typing import Optional

from sqlmodel import SQLModel, Field


def new_internal_id() -> str:
    return uuid.uuid4().hex


class Employee(SQLModel, table=True):
    id: str = Field(
        default_factory=new_internal_id,
        primary_key=True,
        index=True
    )
    employee_id: str = Field(unique=True, index=True)
    first_name: str
    last_name: str
    email: str = Field(unique=True, index=True)
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    department: str = Field(index=True)
    position: Optional[str] = None
    date_of_joining: date
    salary: float
