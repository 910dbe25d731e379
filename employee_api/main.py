# main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from . import crud, schemas
from .config import Settings, configure_logging, get_settings
from .database import Database, get_async_session
from .exceptions import EmployeeAPIError, NotFoundError, ValidationError
from .filters import EmployeeFilter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["Employees"])


# --- API Endpoints ---

@router.get("", response_model=List[schemas.EmployeeRead])
async def list_employees_endpoint(
        db: AsyncSession = Depends(get_async_session),
        employee_id: Optional[str] = Query(None, alias="employeeId"),
        name: Optional[str] = Query(None),
        department: Optional[str] = Query(None),
        date_from: Optional[str] = Query(None, alias="dateFrom"),
        date_to: Optional[str] = Query(None, alias="dateTo"),
):
    """
    Retrieve employees, optionally filtered.
    The joining-date range applies only when both dateFrom and dateTo are sent.
    """
    employee_filter = EmployeeFilter.from_query(
        employee_id=employee_id,
        name=name,
        department=department,
        date_from=date_from,
        date_to=date_to,
    )
    return await crud.find_employees(db, employee_filter)


@router.get("/search", response_model=List[schemas.EmployeeRead])
async def search_employees_endpoint(
        db: AsyncSession = Depends(get_async_session),
        employee_id: Optional[str] = Query(None, alias="employeeId"),
        name: Optional[str] = Query(None),
        department: Optional[str] = Query(None),
        start_date: Optional[str] = Query(None, alias="startDate"),
        end_date: Optional[str] = Query(None, alias="endDate"),
):
    """Search employees by id, name or department. startDate/endDate are accepted but not applied."""
    if start_date or end_date:
        logger.debug("Search ignores startDate=%s endDate=%s", start_date, end_date)
    employee_filter = EmployeeFilter.from_query(
        employee_id=employee_id,
        name=name,
        department=department,
    )
    return await crud.find_employees(db, employee_filter)


@router.get("/{internal_id}", response_model=schemas.EmployeeRead)
async def get_employee_endpoint(internal_id: str, db: AsyncSession = Depends(get_async_session)):
    """Retrieve an employee by internal identifier."""
    employee = await crud.get_employee(db, internal_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


@router.post(
    "",
    response_model=schemas.EmployeeRead,
    status_code=status.HTTP_201_CREATED,
    openapi_extra={"requestBody": {"content": {"application/json": {
        "schema": schemas.EmployeeCreate.model_json_schema(by_alias=True),
    }}}},
)
async def create_employee_endpoint(
        payload: Any = Body(None),
        db: AsyncSession = Depends(get_async_session),
):
    """Create a new employee record."""
    return await crud.create_employee(db, payload)


@router.put(
    "/{internal_id}",
    response_model=schemas.EmployeeRead,
    openapi_extra={"requestBody": {"content": {"application/json": {
        "schema": schemas.EmployeeUpdate.model_json_schema(by_alias=True),
    }}}},
)
async def update_employee_endpoint(
        internal_id: str,
        payload: Any = Body(None),
        db: AsyncSession = Depends(get_async_session),
):
    """
    Updates the record for a specific employee.
    Only the fields present in the body are changed.
    """
    return await crud.update_employee(db, internal_id, payload)


@router.delete("/{internal_id}", response_model=schemas.Message)
async def delete_employee_endpoint(internal_id: str, db: AsyncSession = Depends(get_async_session)):
    """Delete an employee. Answers 200 whether or not the record existed."""
    removed = await crud.delete_employee(db, internal_id)
    if not removed:
        logger.info("Delete requested for unknown employee id=%s", internal_id)
    return {"message": "Employee deleted successfully"}


# --- Application factory ---

async def employee_api_error_handler(request: Request, exc: EmployeeAPIError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "%s: %s | error_id=%s | path=%s",
        exc.error_code, exc.message, exc.error_id, request.url.path,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies are client errors like any other schema violation."""
    errors = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return await employee_api_error_handler(request, ValidationError("Invalid request", errors=errors))


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.database_url, echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Creating database and tables...")
        await app.state.database.create_all()
        yield
        await app.state.database.dispose()
        logger.info("Database connection closed.")

    app = FastAPI(
        title="Employee Records API",
        description="CRUD and search over employee records.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(EmployeeAPIError, employee_api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Employee Records API."}

    @app.get("/health")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    return app


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
