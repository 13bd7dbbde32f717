"""
CRUD operations for jobs.

Jobs have a surrogate integer id and belong to one company. Their
technology links are rewritten through app.crud.technology_links in the
same transaction as the job row itself.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction, integrity_error_code, CHECK_VIOLATION, FOREIGN_KEY_VIOLATION, NOT_NULL_VIOLATION
from app.core.exceptions import InvalidInputError, NotFoundError
from app.crud.technology_links import JOB_LINK, replace_technologies, technologies_for
from app.helpers.keys import check_allowed_keys
from app.helpers.sql import bind_params, placeholder, sql_for_partial_update, sql_for_where_string

JOB_COLUMNS = """
    id,
    title,
    salary,
    equity,
    company_handle AS "companyHandle"
"""

FILTER_KEYS = ["title", "minSalary", "hasEquity", "technology"]
UPDATE_KEYS = ["title", "salary", "equity", "technology"]


def job_row(row) -> Dict[str, Any]:
    """Row mapping -> job dict; NUMERIC equity comes back as Decimal from Postgres."""
    job = dict(row)
    if job.get("equity") is not None:
        job["equity"] = float(job["equity"])
    return job


def _check_id(job_id: Any, positive: bool = True) -> None:
    if isinstance(job_id, bool) or not isinstance(job_id, int):
        raise InvalidInputError(f"id must be an integer: {job_id}")
    if positive and job_id < 1:
        raise InvalidInputError(f"id must be a positive integer: {job_id}")


def _raise_integrity_error(err: IntegrityError, company_handle: Optional[str] = None) -> None:
    code = integrity_error_code(err)
    if code == FOREIGN_KEY_VIOLATION:
        raise NotFoundError(f"No company: {company_handle}") from err
    if code == CHECK_VIOLATION:
        raise InvalidInputError("salary must be >= 0 and equity must be <= 1.0") from err
    if code == NOT_NULL_VIOLATION:
        raise InvalidInputError("title and companyHandle cannot be null") from err
    raise err


def create(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job, and link its technologies when a list is given.

    data should be {title, salary, equity, companyHandle, technology?}

    Returns:
        {id, title, salary, equity, companyHandle} plus technology when supplied

    Raises:
        NotFoundError: If the company (or a technology) does not exist
        InvalidInputError: If salary/equity break their store constraints
    """
    technology = data.get("technology")

    with transaction(db):
        try:
            result = db.execute(
                text(f"""
                    INSERT INTO jobs (title, salary, equity, company_handle)
                    VALUES (:title, :salary, :equity, :company_handle)
                    RETURNING {JOB_COLUMNS}
                """),
                {
                    "title": data.get("title"),
                    "salary": data.get("salary"),
                    "equity": data.get("equity"),
                    "company_handle": data.get("companyHandle"),
                }
            )
        except IntegrityError as err:
            _raise_integrity_error(err, data.get("companyHandle"))
        job = job_row(result.mappings().one())

        if technology is not None:
            job["technology"] = replace_technologies(db, JOB_LINK, job["id"], technology)

    return job


def find_all(db: Session, opts: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title.

    Args:
        opts: Optional filters
            title: case-insensitive partial match
            minSalary: salary >= minSalary
            hasEquity: when true, only jobs with equity > 0
            technology: list of names (or a single name); jobs linked to any of them

    Raises:
        InvalidInputError: On an unknown filter key
    """
    opts = opts or {}
    check_allowed_keys(opts, FILTER_KEYS)

    title = opts.get("title")
    min_salary = opts.get("minSalary")
    has_equity = opts.get("hasEquity")
    technology = opts.get("technology")
    if isinstance(technology, str):
        technology = [technology]

    param_strings: Dict[str, str] = {}
    params: List[Any] = []

    if title:
        params.append(f"%{title}%")
        param_strings["title"] = f"lower(title) LIKE lower({placeholder(len(params))})"

    if min_salary is not None:
        params.append(min_salary)
        param_strings["minSalary"] = f"salary >= {placeholder(len(params))}"

    if has_equity:
        param_strings["hasEquity"] = "equity > 0"

    if technology:
        tech_placeholders = []
        for name in technology:
            params.append(name)
            tech_placeholders.append(placeholder(len(params)))
        param_strings["technology"] = (
            f"id IN (SELECT job_id FROM jobs_tech WHERE tech_name IN ({', '.join(tech_placeholders)}))"
        )

    where_string = sql_for_where_string(param_strings)

    result = db.execute(
        text(f"""
            SELECT {JOB_COLUMNS}
            FROM jobs
            {where_string}
            ORDER BY title
        """),
        bind_params(params)
    )
    return [job_row(row) for row in result.mappings()]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job with its technology names.

    Raises:
        NotFoundError: If no such job
    """
    row = db.execute(
        text(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = :id"),
        {"id": job_id}
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No job with id: {job_id}")

    job = job_row(row)
    job["technology"] = technologies_for(db, JOB_LINK, job_id)
    return job


def update(db: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the supplied fields change.

    Data can include: {title, salary, equity, technology}. A technology
    list replaces the job's links wholesale.

    Returns:
        {id, title, salary, equity, companyHandle, technology}

    Raises:
        InvalidInputError: On a bad id, a disallowed key, or an empty payload
        NotFoundError: If no such job
    """
    _check_id(job_id)
    check_allowed_keys(data, UPDATE_KEYS)

    fields = {key: value for key, value in data.items() if key != "technology"}
    technology = data.get("technology")
    if not fields and technology is None:
        raise InvalidInputError("No data")

    with transaction(db):
        if fields:
            set_cols, values = sql_for_partial_update(fields)
            try:
                row = db.execute(
                    text(f"""
                        UPDATE jobs
                        SET {set_cols}
                        WHERE id = :id
                        RETURNING {JOB_COLUMNS}
                    """),
                    {**bind_params(values), "id": job_id}
                ).mappings().first()
            except IntegrityError as err:
                _raise_integrity_error(err)
        else:
            row = db.execute(
                text(f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = :id"),
                {"id": job_id}
            ).mappings().first()

        if not row:
            raise NotFoundError(f"No job with id: {job_id}")

        job = job_row(row)
        if technology is not None:
            job["technology"] = replace_technologies(db, JOB_LINK, job_id, technology)
        else:
            job["technology"] = technologies_for(db, JOB_LINK, job_id)

    return job


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        InvalidInputError: If job_id is not an integer
        NotFoundError: If no such job
    """
    _check_id(job_id, positive=False)

    with transaction(db):
        row = db.execute(
            text("DELETE FROM jobs WHERE id = :id RETURNING title"),
            {"id": job_id}
        ).first()

    if not row:
        raise NotFoundError(f"No job with id: {job_id}")
