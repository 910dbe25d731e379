# schemas.py
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def number_to_str(v):
    """Numeric ids and phone numbers are stored as text."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# camelCase on the wire, snake_case in Python
WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
    extra="ignore",
)


class EmployeeBase(BaseModel):
    employee_id: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    department: str = Field(..., min_length=1)
    position: Optional[str] = None
    date_of_joining: date
    salary: float

    @field_validator("employee_id", "phone_number", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return number_to_str(v)

    model_config = ConfigDict(
        **WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "employeeId": "E-1001",
                "firstName": "Jane",
                "lastName": "Doe",
                "email": "jane.doe@example.com",
                "phoneNumber": "+44 20 7946 0000",
                "dateOfBirth": "1990-01-15",
                "department": "Engineering",
                "position": "Backend Developer",
                "dateOfJoining": "2021-03-01",
                "salary": 72000
            }
        }
    )


# Schema for creating an employee
class EmployeeCreate(EmployeeBase):
    pass


# Schema for reading an employee
class EmployeeRead(EmployeeBase):
    id: str


# Schema for updating an employee; only the fields sent are applied
class EmployeeUpdate(BaseModel):
    employee_id: Optional[str] = Field(default=None, min_length=1)
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    department: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = None
    date_of_joining: Optional[date] = None
    salary: Optional[float] = None

    @field_validator("employee_id", "phone_number", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return number_to_str(v)

    model_config = ConfigDict(
        **WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "department": "Platform",
                "salary": 78000
            }
        }
    )


class Message(BaseModel):
    message: str
