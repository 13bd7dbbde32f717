"""
CRUD operations for users, their technology links and job applications.

Passwords are hashed on the way in and never selected on the way out,
except by authenticate(), which strips the hash before returning.
"""

from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import transaction, integrity_error_code, FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION, NOT_NULL_VIOLATION
from app.core.exceptions import DuplicateError, InvalidInputError, NotFoundError, UnauthorizedError
from app.core.security import get_password_hash, verify_password
from app.crud.technology_links import USER_LINK, replace_technologies, technologies_for
from app.helpers.keys import check_allowed_keys
from app.helpers.sql import bind_params, sql_for_partial_update
from app.models.user import AppState

USER_COLUMNS = """
    username,
    first_name AS "firstName",
    last_name AS "lastName",
    email,
    is_admin AS "isAdmin"
"""

UPDATE_KEYS = ["firstName", "lastName", "password", "email", "isAdmin", "technology"]
JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}

ALLOWED_STATES = [state.value for state in AppState]


def _user_row(row) -> Dict[str, Any]:
    # SQLite hands booleans back as 0/1
    user = dict(row)
    user["isAdmin"] = bool(user["isAdmin"])
    return user


def update_technology(db: Session, username: str, technology: List[str]) -> List[str]:
    """Replace the user's technology links; see technology_links.replace_technologies."""
    return replace_technologies(db, USER_LINK, username, technology)


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Authenticate user with username, password.

    Returns:
        {username, firstName, lastName, email, isAdmin}

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    row = db.execute(
        text(f"SELECT {USER_COLUMNS}, password FROM users WHERE username = :username"),
        {"username": username}
    ).mappings().first()

    if row and verify_password(password, row["password"]):
        user = _user_row(row)
        del user["password"]
        return user

    raise UnauthorizedError("Invalid username/password")


def register(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Register user with data.

    data should be {username, password, firstName, lastName, email, isAdmin, technology?}

    Returns:
        {username, firstName, lastName, email, isAdmin} plus technology when supplied

    Raises:
        DuplicateError: If the username is taken
        NotFoundError: If a listed technology does not exist
    """
    username = data["username"]

    duplicate_check = db.execute(
        text("SELECT username FROM users WHERE username = :username"),
        {"username": username}
    ).first()
    if duplicate_check:
        raise DuplicateError(f"Duplicate username: {username}")

    hashed_password = get_password_hash(data["password"])
    technology = data.get("technology")

    with transaction(db):
        try:
            row = db.execute(
                text(f"""
                    INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                    VALUES (:username, :password, :first_name, :last_name, :email, :is_admin)
                    RETURNING {USER_COLUMNS}
                """),
                {
                    "username": username,
                    "password": hashed_password,
                    "first_name": data.get("firstName"),
                    "last_name": data.get("lastName"),
                    "email": data.get("email"),
                    "is_admin": bool(data.get("isAdmin", False)),
                }
            ).mappings().one()
        except IntegrityError as err:
            if integrity_error_code(err) == UNIQUE_VIOLATION:
                raise DuplicateError(f"Duplicate username: {username}") from err
            raise
        user = _user_row(row)

        if technology is not None:
            user["technology"] = update_technology(db, username, technology)

    return user


def find_all(db: Session) -> List[Dict[str, Any]]:
    """All users ordered by username."""
    result = db.execute(text(f"SELECT {USER_COLUMNS} FROM users ORDER BY username"))
    return [_user_row(row) for row in result.mappings()]


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Given a username, return data about user.

    Returns:
        {username, firstName, lastName, email, isAdmin, jobs, technology}
        where jobs is [{jobId, appState}, ...] and technology is [name, ...]

    Raises:
        NotFoundError: If no such user
    """
    row = db.execute(
        text(f"SELECT {USER_COLUMNS} FROM users WHERE username = :username"),
        {"username": username}
    ).mappings().first()

    if not row:
        raise NotFoundError(f"No user: {username}")

    user = _user_row(row)

    apps = db.execute(
        text("""
            SELECT job_id AS "jobId", app_state AS "appState"
            FROM applications
            WHERE username = :username
            ORDER BY job_id
        """),
        {"username": username}
    ).mappings()
    user["jobs"] = [dict(app) for app in apps]
    user["technology"] = technologies_for(db, USER_LINK, username)

    return user


def update(db: Session, username: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update user data with `data`; only the supplied fields change.

    Data can include: {firstName, lastName, password, email, isAdmin, technology}

    WARNING: this can set a new password or make a user an admin. Callers
    must have authorized the change before calling.

    Returns:
        {username, firstName, lastName, email, isAdmin, technology}

    Raises:
        InvalidInputError: On a disallowed key or an empty payload
        NotFoundError: If no such user
    """
    check_allowed_keys(data, UPDATE_KEYS)

    fields = {key: value for key, value in data.items() if key != "technology"}
    technology = data.get("technology")
    if not fields and technology is None:
        raise InvalidInputError("No data")

    if "password" in fields:
        if not fields["password"]:
            raise InvalidInputError("Password cannot be empty")
        fields["password"] = get_password_hash(fields["password"])

    with transaction(db):
        if fields:
            set_cols, values = sql_for_partial_update(fields, JS_TO_SQL)
            try:
                row = db.execute(
                    text(f"""
                        UPDATE users
                        SET {set_cols}
                        WHERE username = :username
                        RETURNING {USER_COLUMNS}
                    """),
                    {**bind_params(values), "username": username}
                ).mappings().first()
            except IntegrityError as err:
                if integrity_error_code(err) == NOT_NULL_VIOLATION:
                    raise InvalidInputError("firstName, lastName, email and isAdmin cannot be null") from err
                raise
        else:
            row = db.execute(
                text(f"SELECT {USER_COLUMNS} FROM users WHERE username = :username"),
                {"username": username}
            ).mappings().first()

        if not row:
            raise NotFoundError(f"No user: {username}")

        user = _user_row(row)
        if technology is not None:
            user["technology"] = update_technology(db, username, technology)
        else:
            user["technology"] = technologies_for(db, USER_LINK, username)

    return user


def remove(db: Session, username: str) -> None:
    """
    Delete a user; applications and technology links cascade.

    Raises:
        NotFoundError: If no such user
    """
    with transaction(db):
        row = db.execute(
            text("DELETE FROM users WHERE username = :username RETURNING username"),
            {"username": username}
        ).first()

    if not row:
        raise NotFoundError(f"No user: {username}")


def apply_for_job(db: Session, username: str, job_id: int, app_state: str) -> int:
    """
    Record a user's application for a job.

    Args:
        username: Applicant
        job_id: Job being applied for
        app_state: One of interested, applied, accepted, rejected

    Returns:
        job_id

    Raises:
        InvalidInputError: If app_state is not an allowed state
        DuplicateError: If the user already has an application for this job
        NotFoundError: If the user or the job does not exist
    """
    if app_state not in ALLOWED_STATES:
        raise InvalidInputError("State must be one of: " + ", ".join(ALLOWED_STATES))

    duplicate_check = db.execute(
        text("SELECT username FROM applications WHERE username = :username AND job_id = :job_id"),
        {"username": username, "job_id": job_id}
    ).first()
    if duplicate_check:
        raise DuplicateError("Application already exists")

    try:
        with transaction(db):
            row = db.execute(
                text("""
                    INSERT INTO applications (username, job_id, app_state)
                    VALUES (:username, :job_id, :app_state)
                    RETURNING job_id AS "jobId"
                """),
                {"username": username, "job_id": job_id, "app_state": app_state}
            ).mappings().one()
    except IntegrityError as err:
        code = integrity_error_code(err)
        if code == UNIQUE_VIOLATION:
            raise DuplicateError("Application already exists") from err
        if code != FOREIGN_KEY_VIOLATION:
            raise
        raise _missing_reference(db, username, job_id) from err

    return row["jobId"]


def _missing_reference(db: Session, username: str, job_id: int) -> NotFoundError:
    """Work out which side of a failed application insert does not exist."""
    user_exists = db.execute(
        text("SELECT 1 FROM users WHERE username = :username"),
        {"username": username}
    ).first()
    if not user_exists:
        return NotFoundError(f"No such user with username: {username}")
    return NotFoundError(f"No such job with id: {job_id}")
