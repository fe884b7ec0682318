import logging
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .database import SessionLocal
from .exceptions import StoreError
from .predicates import Predicate, to_clause

logger = logging.getLogger(__name__)

GROUPABLE_FIELDS = {
    "category": models.Transaction.category,
    "sold": models.Transaction.sold,
}

#Query helpers, each one runs inside the session it is given

def count_transactions(db: Session, predicate: Predicate) -> int:
    return db.query(func.count(models.Transaction.pk)).filter(to_clause(predicate)).scalar() or 0

def get_transactions(db: Session, predicate: Predicate, skip: int = 0, limit: int = 10): #Page of matching transactions
    return (
        db.query(models.Transaction)
        .filter(to_clause(predicate))
        .order_by(models.Transaction.pk)
        .offset(skip)
        .limit(limit)
        .all()
    )

def sum_transactions(db: Session, predicate: Predicate) -> Tuple[float, int, int]: #Sale amount, sold and unsold counts
    sold = models.Transaction.sold.is_(True)
    row = (
        db.query(
            func.coalesce(func.sum(models.Transaction.price), 0),
            func.coalesce(func.sum(case((sold, 1), else_=0)), 0),
            func.coalesce(func.sum(case((sold, 0), else_=1)), 0),
        )
        .filter(to_clause(predicate))
        .one()
    )
    return float(row[0]), int(row[1]), int(row[2])

def count_by(db: Session, predicate: Predicate, field: str) -> List[Tuple[object, int]]: #Group and count matching transactions
    if field not in GROUPABLE_FIELDS:
        raise ValueError(f"Cannot group transactions by {field!r}")
    column = GROUPABLE_FIELDS[field]
    rows = (
        db.query(column, func.count(models.Transaction.pk))
        .filter(to_clause(predicate))
        .group_by(column)
        .order_by(column)
        .all()
    )
    return [(value, int(count)) for value, count in rows]

def replace_transactions(db: Session, records: Iterable[Dict]) -> int: #Delete everything and insert the new set in one transaction
    try:
        db.query(models.Transaction).delete(synchronize_session=False)
        db_transactions = [models.Transaction(**record) for record in records]
        db.add_all(db_transactions)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return len(db_transactions)


class TransactionStore:
    """Record store over the transactions table.

    Every call opens its own session so concurrent callers never share one.
    SQLAlchemy failures surface as StoreError.
    """

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def _run(self, operation, *args):
        db = self.session_factory()
        try:
            return operation(db, *args)
        except (SQLAlchemyError, OverflowError) as e:
            logger.error("Transaction store query %s failed: %s", operation.__name__, e)
            raise StoreError(f"{operation.__name__} failed") from e
        finally:
            db.close()

    def count(self, predicate: Predicate) -> int:
        return self._run(count_transactions, predicate)

    def fetch(self, predicate: Predicate, skip: int = 0, limit: int = 10) -> List[models.Transaction]:
        return self._run(get_transactions, predicate, skip, limit)

    def totals(self, predicate: Predicate) -> Tuple[float, int, int]:
        return self._run(sum_transactions, predicate)

    def group_count(self, predicate: Predicate, field: str) -> List[Tuple[object, int]]:
        return self._run(count_by, predicate, field)

    def replace_all(self, records: Iterable[Dict]) -> int:
        return self._run(replace_transactions, list(records))
