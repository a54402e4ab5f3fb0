"""Input coercion helpers used by the services before any store access."""
import math
from typing import Any, Dict, List, Optional

from .errors import InvalidInput


def missing_fields(data: Dict[str, Any], *fields: str) -> List[str]:
    """Return the names in *fields* that are absent or blank in *data*."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def require_fields(data: Dict[str, Any], *fields: str) -> None:
    """Raise :class:`InvalidInput` naming every missing field at once."""
    missing = missing_fields(data, *fields)
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")


def to_text(value: Any, field: str) -> str:
    """Return *value* unchanged when it is a string, else raise
    :class:`InvalidInput`."""
    if not isinstance(value, str):
        raise InvalidInput(f"{field} must be a string")
    return value


def clean_text(value: Any) -> Optional[str]:
    """Trim *value*; blank or ``None`` becomes ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_id(value: Any, field: str) -> int:
    """Coerce an identifier given as int or numeric string."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value.strip())
    raise InvalidInput(f"{field} must be an integer")


def to_number(value: Any, field: str, allow_zero: bool = False) -> float:
    """Coerce *value* to a finite float that is positive (or zero if allowed)."""
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be a number")
    if not math.isfinite(number):
        raise InvalidInput(f"{field} must be a number")
    if number < 0 or (number == 0 and not allow_zero):
        bound = 'non-negative' if allow_zero else 'positive'
        raise InvalidInput(f"{field} must be {bound}")
    return number


def to_tags(value: Any) -> List[str]:
    """Normalise tags from a list or a comma-separated string.

    Blank entries are dropped and duplicates removed, first occurrence wins.
    """
    if value is None or value == '':
        return []
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        raise InvalidInput("tags must be a list of strings")
    tags: List[str] = []
    for item in items:
        if not isinstance(item, str):
            raise InvalidInput("tags must be a list of strings")
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags
