"""
Full-replace rewrite of a job's or user's technology links.

Both link tables have the same shape (owner key, tech_name), so one
implementation serves both. Neither function commits: callers run them
inside `transaction(db)` together with the owner's own changes, which makes
the delete and the re-insert a single atomic step.
"""

from typing import Any, Dict, List, NamedTuple

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import integrity_error_code, FOREIGN_KEY_VIOLATION
from app.core.exceptions import NotFoundError
from app.helpers.sql import bind_params, placeholder


class Link(NamedTuple):
    table: str
    owner_column: str


JOB_LINK = Link(table="jobs_tech", owner_column="job_id")
USER_LINK = Link(table="users_tech", owner_column="username")


def technologies_for(db: Session, link: Link, owner_key: Any) -> List[str]:
    """Current technology names linked to an owner, ordered by name."""
    result = db.execute(
        text(f"""
            SELECT tech_name AS name
            FROM {link.table}
            WHERE {link.owner_column} = :owner
            ORDER BY tech_name
        """),
        {"owner": owner_key}
    )
    return [row.name for row in result]


def _missing_technologies(db: Session, names: List[str]) -> List[str]:
    """Names from `names` with no row in technologies, in input order."""
    name_placeholders = ", ".join(placeholder(idx) for idx in range(1, len(names) + 1))
    result = db.execute(
        text(f"SELECT name FROM technologies WHERE name IN ({name_placeholders})"),
        bind_params(names)
    )
    known = {row.name for row in result}
    return [name for name in names if name not in known]


def replace_technologies(db: Session, link: Link, owner_key: Any, technology: List[str]) -> List[str]:
    """
    Replace every technology link of an owner with `technology`.

    Old rows are deleted, then one row per distinct name is inserted
    (duplicates in the input collapse to their first occurrence).

    Returns:
        The linked names in insertion order; [] when `technology` is empty

    Raises:
        NotFoundError: Naming the technologies that do not exist
    """
    names = list(dict.fromkeys(technology))

    # Looked up before writing; after a failed INSERT PostgreSQL accepts no more statements in the transaction
    if names:
        missing = _missing_technologies(db, names)
        if missing:
            raise NotFoundError(f"No such technology: {', '.join(missing)}")

    db.execute(
        text(f"DELETE FROM {link.table} WHERE {link.owner_column} = :owner"),
        {"owner": owner_key}
    )

    if len(names) == 0:
        return []

    # (:owner, :p1), (:owner, :p2), ...
    value_string = ", ".join(f"(:owner, {placeholder(idx)})" for idx in range(1, len(names) + 1))
    params: Dict[str, Any] = {"owner": owner_key, **bind_params(names)}

    try:
        db.execute(
            text(f"INSERT INTO {link.table} ({link.owner_column}, tech_name) VALUES {value_string}"),
            params
        )
    except IntegrityError as err:
        # A technology removed between the check and the insert
        if integrity_error_code(err) != FOREIGN_KEY_VIOLATION:
            raise
        raise NotFoundError(f"No such technology in: {', '.join(names)}") from err

    return names
