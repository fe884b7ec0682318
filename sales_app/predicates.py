"""Query predicates over transactions.

Predicates are plain values describing a filter. The store lowers them to
SQLAlchemy clauses with ``to_clause`` so the filtering rules can be built and
inspected without a database.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from sqlalchemy import String, and_, extract, func, or_

from . import models

TEXT_FIELDS = {
    "title": models.Transaction.title,
    "description": models.Transaction.description,
    "category": models.Transaction.category,
}
NUMERIC_FIELDS = {
    "price": models.Transaction.price,
}


@dataclass(frozen=True)
class MonthEquals:
    index: int


@dataclass(frozen=True)
class TextContains:
    field: str
    needle: str


@dataclass(frozen=True)
class NumericEquals:
    field: str
    value: float


@dataclass(frozen=True)
class NumericRange:
    """``lower <= field < upper``; an upper bound of None is open-ended."""

    field: str
    lower: float
    upper: Optional[float] = None


@dataclass(frozen=True)
class And:
    predicates: Tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    predicates: Tuple["Predicate", ...]


Predicate = Union[MonthEquals, TextContains, NumericEquals, NumericRange, And, Or]


def _parse_number(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


def build_query(month_index: int, search: str = "") -> Predicate:
    month = MonthEquals(month_index)
    search = (search or "").strip()
    if not search:
        return month

    alternatives = [TextContains("title", search), TextContains("description", search)]
    price = _parse_number(search)
    if price is not None:
        alternatives.append(NumericEquals("price", price))
    return And((month, Or(tuple(alternatives))))


def _column(field: str, fields: dict):
    try:
        return fields[field]
    except KeyError:
        raise ValueError(f"Field {field!r} cannot be used in this predicate") from None


def to_clause(predicate: Predicate):
    if isinstance(predicate, MonthEquals):
        return extract("month", models.Transaction.date_of_sale) == predicate.index
    if isinstance(predicate, TextContains):
        column = _column(predicate.field, TEXT_FIELDS)
        return func.lower(column, type_=String).contains(predicate.needle.lower(), autoescape=True)
    if isinstance(predicate, NumericEquals):
        return _column(predicate.field, NUMERIC_FIELDS) == predicate.value
    if isinstance(predicate, NumericRange):
        column = _column(predicate.field, NUMERIC_FIELDS)
        if predicate.upper is None:
            return column >= predicate.lower
        return and_(column >= predicate.lower, column < predicate.upper)
    if isinstance(predicate, And):
        return and_(*[to_clause(p) for p in predicate.predicates])
    if isinstance(predicate, Or):
        return or_(*[to_clause(p) for p in predicate.predicates])
    raise ValueError(f"Unsupported predicate: {predicate!r}")
