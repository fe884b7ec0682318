"""Monthly views over the transaction store.

Each view filters transactions to one calendar month (any year) and runs its
store queries in Starlette's threadpool. Independent queries are issued
together through ``gather_all``.
"""

import asyncio
import logging
from typing import List

from starlette.concurrency import run_in_threadpool

from . import schemas
from .months import month_index
from .predicates import And, MonthEquals, NumericRange, build_query

logger = logging.getLogger(__name__)

# (label, lower bound, lower bound of the next bucket)
PRICE_RANGES = [
    ("0-100", 0, 101),
    ("101-200", 101, 201),
    ("201-300", 201, 301),
    ("301-400", 301, 401),
    ("401-500", 401, 501),
    ("501-600", 501, 601),
    ("601-700", 601, 701),
    ("701-800", 701, 801),
    ("801-900", 801, 901),
    ("901-above", 901, None),
]


async def gather_all(*awaitables):
    """Run awaitables concurrently and return their results in order.

    The first failure is re-raised once every other branch has been cancelled
    and has finished, so nothing keeps running after the call returns.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def list_transactions(store, month: str, page: int = 1, per_page: int = 10, search: str = "") -> schemas.TransactionPage:
    predicate = build_query(month_index(month), search)
    rows, total = await gather_all(
        run_in_threadpool(store.fetch, predicate, (page - 1) * per_page, per_page),
        run_in_threadpool(store.count, predicate),
    )
    return schemas.TransactionPage(
        transactions=[schemas.TransactionOut.model_validate(row) for row in rows],
        total=total,
    )


async def get_statistics(store, month: str) -> schemas.Statistics:
    amount, sold, not_sold = await run_in_threadpool(store.totals, MonthEquals(month_index(month)))
    return schemas.Statistics(totalSaleAmount=amount, totalSoldItems=sold, totalNotSoldItems=not_sold)


async def get_bar_chart(store, month: str) -> List[schemas.PriceRangeCount]:
    by_month = MonthEquals(month_index(month))
    counts = await gather_all(*[
        run_in_threadpool(store.count, And((by_month, NumericRange("price", lower, upper))))
        for _, lower, upper in PRICE_RANGES
    ])
    return [
        schemas.PriceRangeCount(range=label, count=count)
        for (label, _, _), count in zip(PRICE_RANGES, counts)
    ]


async def get_pie_chart(store, month: str) -> List[schemas.CategoryCount]:
    groups = await run_in_threadpool(store.group_count, MonthEquals(month_index(month)), "category")
    return [schemas.CategoryCount(category=category, items=items) for category, items in groups]


async def get_combined_data(store, month: str) -> schemas.CombinedData:
    # Validate before fanning out so a bad month is reported as such
    month_index(month)
    statistics, bar_chart, pie_chart = await gather_all(
        get_statistics(store, month),
        get_bar_chart(store, month),
        get_pie_chart(store, month),
    )
    return schemas.CombinedData(statistics=statistics, barChartData=bar_chart, pieChartData=pie_chart)
