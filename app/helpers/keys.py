from typing import Any, Iterable, Mapping

from app.core.exceptions import InvalidInputError


def check_allowed_keys(obj: Mapping[str, Any], keys: Iterable[str]) -> None:
    """
    Raise InvalidInputError naming the first key of `obj` not in `keys`.

    Filter options and update payloads go through this before any of their
    keys reach a SQL fragment.
    """
    allowed = set(keys)
    for key in obj:
        if key not in allowed:
            raise InvalidInputError(f'Key "{key}" not allowed')
