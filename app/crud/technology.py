"""
CRUD operations for technologies.

A technology is just its name. The store enforces that names are
lowercase; that check surfaces here as an InvalidInputError.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction, integrity_error_code, CHECK_VIOLATION, UNIQUE_VIOLATION
from app.core.exceptions import DuplicateError, InvalidInputError, NotFoundError
from app.helpers.keys import check_allowed_keys
from app.helpers.sql import bind_params, placeholder, sql_for_partial_update, sql_for_where_string

FILTER_KEYS = ["name"]
UPDATE_KEYS = ["name"]


def _raise_integrity_error(err: IntegrityError, name: str) -> None:
    code = integrity_error_code(err)
    if code == CHECK_VIOLATION:
        raise InvalidInputError("Name must be lowercase") from err
    if code == UNIQUE_VIOLATION:
        raise DuplicateError(f"Duplicate technology: {name}") from err
    raise err


def create(db: Session, name: str) -> Dict[str, Any]:
    """
    Create a technology.

    Returns:
        {name}

    Raises:
        DuplicateError: If the name already exists
        InvalidInputError: If the name is not lowercase
    """
    duplicate_check = db.execute(
        text("SELECT name FROM technologies WHERE name = :name"),
        {"name": name}
    ).first()
    if duplicate_check:
        raise DuplicateError(f"Duplicate technology: {name}")

    with transaction(db):
        try:
            row = db.execute(
                text("INSERT INTO technologies (name) VALUES (:name) RETURNING name"),
                {"name": name}
            ).mappings().one()
        except IntegrityError as err:
            _raise_integrity_error(err, name)

    return dict(row)


def find_all(db: Session, opts: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List technologies ordered by name.

    opts may hold `name`, matched case-insensitively anywhere in the name.
    """
    opts = opts or {}
    check_allowed_keys(opts, FILTER_KEYS)

    param_strings: Dict[str, str] = {}
    params: List[Any] = []

    if opts.get("name"):
        params.append(f"%{opts['name']}%")
        param_strings["name"] = f"lower(name) LIKE lower({placeholder(len(params))})"

    where_string = sql_for_where_string(param_strings)

    result = db.execute(
        text(f"""
            SELECT name
            FROM technologies
            {where_string}
            ORDER BY name
        """),
        bind_params(params)
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, name: str) -> Dict[str, Any]:
    row = db.execute(
        text("SELECT name FROM technologies WHERE name = :name"),
        {"name": name}
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No technology: {name}")
    return dict(row)


def update(db: Session, name: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Rename a technology. Links follow the new name (ON UPDATE CASCADE).

    Raises:
        InvalidInputError: On an empty payload, a disallowed key or a non-lowercase name
        DuplicateError: If the new name is taken
        NotFoundError: If no such technology
    """
    check_allowed_keys(data, UPDATE_KEYS)
    set_cols, values = sql_for_partial_update(data)

    with transaction(db):
        try:
            row = db.execute(
                text(f"""
                    UPDATE technologies
                    SET {set_cols}
                    WHERE name = :name
                    RETURNING name
                """),
                {**bind_params(values), "name": name}
            ).mappings().first()
        except IntegrityError as err:
            _raise_integrity_error(err, data.get("name", name))

    if not row:
        raise NotFoundError(f"No technology: {name}")
    return dict(row)


def remove(db: Session, name: str) -> None:
    with transaction(db):
        row = db.execute(
            text("DELETE FROM technologies WHERE name = :name RETURNING name"),
            {"name": name}
        ).first()

    if not row:
        raise NotFoundError(f"No technology: {name}")
