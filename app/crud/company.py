"""
CRUD operations for companies.

Companies are keyed by handle. Every function takes the request's
Session first and returns plain dicts using the API's camelCase names.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction, integrity_error_code, UNIQUE_VIOLATION, CHECK_VIOLATION, NOT_NULL_VIOLATION
from app.core.exceptions import DuplicateError, InvalidInputError, NotFoundError
from app.crud.job import job_row
from app.helpers.keys import check_allowed_keys
from app.helpers.sql import bind_params, placeholder, sql_for_partial_update, sql_for_where_string

COMPANY_COLUMNS = """
    handle,
    name,
    num_employees AS "numEmployees",
    description,
    logo_url AS "logoUrl"
"""

FILTER_KEYS = ["name", "minEmployees", "maxEmployees"]
UPDATE_KEYS = ["name", "description", "numEmployees", "logoUrl"]
JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def _raise_integrity_error(err: IntegrityError, handle: str, name: Optional[str] = None) -> None:
    """Re-raise a constraint violation as a domain error where one applies."""
    code = integrity_error_code(err)
    if code == UNIQUE_VIOLATION:
        # handle and name are both unique; the driver does not say which one clashed
        taken = handle if name is None else f"{handle} / {name}"
        raise DuplicateError(f"Duplicate company handle or name: {taken}") from err
    if code == CHECK_VIOLATION:
        raise InvalidInputError("numEmployees must not be negative") from err
    if code == NOT_NULL_VIOLATION:
        raise InvalidInputError("name and description cannot be null") from err
    raise err


def create(
    db: Session,
    handle: str,
    name: str,
    num_employees: Optional[int],
    description: str,
    logo_url: Optional[str]
) -> Dict[str, Any]:
    """
    Create a company.

    Returns:
        {handle, name, numEmployees, description, logoUrl}

    Raises:
        DuplicateError: If the handle or the name is already taken
    """
    duplicate_check = db.execute(
        text("SELECT handle FROM companies WHERE handle = :handle"),
        {"handle": handle}
    ).first()
    if duplicate_check:
        raise DuplicateError(f"Duplicate company: {handle}")

    name_check = db.execute(
        text("SELECT handle FROM companies WHERE name = :name"),
        {"name": name}
    ).first()
    if name_check:
        raise DuplicateError(f"Duplicate company name: {name}")

    with transaction(db):
        try:
            result = db.execute(
                text(f"""
                    INSERT INTO companies (handle, name, num_employees, description, logo_url)
                    VALUES (:handle, :name, :num_employees, :description, :logo_url)
                    RETURNING {COMPANY_COLUMNS}
                """),
                {
                    "handle": handle,
                    "name": name,
                    "num_employees": num_employees,
                    "description": description,
                    "logo_url": logo_url,
                }
            )
        except IntegrityError as err:
            _raise_integrity_error(err, handle, name)
        company = dict(result.mappings().one())

    return company


def find_all(db: Session, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name.

    Args:
        filters: Optional {name, minEmployees, maxEmployees}. name is a
            case-insensitive partial match; the bounds are inclusive.

    Raises:
        InvalidInputError: On an unknown filter key, or minEmployees > maxEmployees
    """
    filters = filters or {}
    check_allowed_keys(filters, FILTER_KEYS)

    name = filters.get("name")
    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise InvalidInputError("minEmployees cannot be greater than maxEmployees")

    param_strings: Dict[str, str] = {}
    params: List[Any] = []

    if name:
        params.append(f"%{name}%")
        param_strings["name"] = f"lower(name) LIKE lower({placeholder(len(params))})"

    if min_employees is not None:
        params.append(min_employees)
        param_strings["minEmployees"] = f"num_employees >= {placeholder(len(params))}"

    if max_employees is not None:
        params.append(max_employees)
        param_strings["maxEmployees"] = f"num_employees <= {placeholder(len(params))}"

    where_string = sql_for_where_string(param_strings)

    result = db.execute(
        text(f"""
            SELECT {COMPANY_COLUMNS}
            FROM companies
            {where_string}
            ORDER BY name
        """),
        bind_params(params)
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company with its jobs.

    Returns:
        {handle, name, numEmployees, description, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no such company
    """
    row = db.execute(
        text(f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = :handle"),
        {"handle": handle}
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)

    jobs = db.execute(
        text("""
            SELECT id, title, salary, equity
            FROM jobs
            WHERE company_handle = :handle
            ORDER BY id
        """),
        {"handle": handle}
    ).mappings()
    company["jobs"] = [job_row(job) for job in jobs]

    return company


def update(db: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the supplied fields change.

    Data can include: {name, description, numEmployees, logoUrl}

    Raises:
        InvalidInputError: On an empty payload or a disallowed key
        DuplicateError: If the new name belongs to another company
        NotFoundError: If no such company
    """
    check_allowed_keys(data, UPDATE_KEYS)
    set_cols, values = sql_for_partial_update(data, JS_TO_SQL)

    if data.get("name") is not None:
        name_check = db.execute(
            text("SELECT handle FROM companies WHERE name = :name AND handle <> :handle"),
            {"name": data["name"], "handle": handle}
        ).first()
        if name_check:
            raise DuplicateError(f"Duplicate company name: {data['name']}")

    with transaction(db):
        try:
            result = db.execute(
                text(f"""
                    UPDATE companies
                    SET {set_cols}
                    WHERE handle = :handle
                    RETURNING {COMPANY_COLUMNS}
                """),
                {**bind_params(values), "handle": handle}
            )
        except IntegrityError as err:
            _raise_integrity_error(err, handle, data.get("name"))
        row = result.mappings().first()

    if not row:
        raise NotFoundError(f"No company: {handle}")
    return dict(row)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company; its jobs go with it.

    Raises:
        NotFoundError: If no such company
    """
    with transaction(db):
        row = db.execute(
            text("DELETE FROM companies WHERE handle = :handle RETURNING handle"),
            {"handle": handle}
        ).first()

    if not row:
        raise NotFoundError(f"No company: {handle}")
