"""
Helpers that assemble fragments of parameterized SQL.

Placeholders are SQLAlchemy named binds that keep their position in the
name (:p1, :p2, ...), so a fragment and its values list stay aligned the
same way positional parameters would.
"""

from typing import Any, Dict, List, NamedTuple, Optional

from app.core.exceptions import InvalidInputError


class PartialUpdate(NamedTuple):
    set_cols: str
    values: List[Any]


def placeholder(idx: int) -> str:
    """Bind placeholder for the 1-based position `idx`."""
    return f":p{idx}"


def bind_params(values: List[Any], start: int = 1) -> Dict[str, Any]:
    """
    Build the bind dict for a positional values list.

    >>> bind_params(["Aliya", 32])
    {'p1': 'Aliya', 'p2': 32}
    """
    return {f"p{idx}": value for idx, value in enumerate(values, start=start)}


def sql_for_partial_update(
    data_to_update: Dict[str, Any],
    js_to_sql: Optional[Dict[str, str]] = None
) -> PartialUpdate:
    """
    Generate the SET clause and values for an UPDATE.

    Args:
        data_to_update: Field names mapped to their new values. Values pass
            through untouched, so an explicit None nulls the column.
        js_to_sql: Optional field name -> column name map; unmapped fields
            are used as column names verbatim.

    Returns:
        PartialUpdate with e.g. '"first_name"=:p1, "age"=:p2' and ['Aliya', 32]

    Raises:
        InvalidInputError: If there is nothing to update
    """
    keys = list(data_to_update.keys())
    if len(keys) == 0:
        raise InvalidInputError("No data")

    js_to_sql = js_to_sql or {}

    # {firstName: 'Aliya', age: 32} => ['"first_name"=:p1', '"age"=:p2']
    cols = [f'"{js_to_sql.get(col_name, col_name)}"={placeholder(idx)}' for idx, col_name in enumerate(keys, start=1)]

    return PartialUpdate(
        set_cols=", ".join(cols),
        values=list(data_to_update.values()),
    )


def sql_for_where_string(param_strings: Dict[str, str]) -> str:
    """
    Combine pre-rendered predicates into a WHERE clause.

    Predicates are AND-ed in insertion order. An empty mapping yields an
    empty string so the caller can interpolate it unconditionally.
    """
    if not param_strings:
        return ""
    return "WHERE " + " AND ".join(param_strings.values())
