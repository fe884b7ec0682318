from typing import Optional

from .exceptions import InvalidMonthError

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MONTH_INDEX = {name: i for i, name in enumerate(MONTH_NAMES, start=1)}


def month_index(name: Optional[str]) -> int:
    """Map a calendar month name ("March") to its 1-12 index.

    Matching is case-sensitive. Anything else raises InvalidMonthError so a
    typo never turns into a query that silently matches nothing.
    """
    if name is None or name not in _MONTH_INDEX:
        raise InvalidMonthError(name)
    return _MONTH_INDEX[name]
