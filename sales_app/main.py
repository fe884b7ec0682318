import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse

from . import aggregations, models, schemas
from .config import configure_logging, settings
from .crud import TransactionStore
from .database import engine
from .exceptions import DataQualityError, InvalidMonthError, SeedFetchError, StoreError
from .seed import fetch_seed_records, initialize_database

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="Sales Transactions API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

router = APIRouter()

MAX_PER_PAGE = 100
# largest page whose offset still fits a signed 64-bit integer
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE

# Dependency - transaction store, overridden in tests
def get_store():
    return TransactionStore()

# Dependency - seed feed fetcher
def get_seed_fetcher():
    return fetch_seed_records


@app.exception_handler(InvalidMonthError)
async def invalid_month_handler(request: Request, exc: InvalidMonthError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


def store_failure(message: str, exc: Exception) -> JSONResponse:
    logger.error("%s (%s)", message, exc)
    return JSONResponse(status_code=500, content={"error": message})


@app.get("/health")
def health():
    return {"status": "ok"}

@router.get("/transactions", response_model=schemas.TransactionPage) # paginated search within a month
async def list_transactions(
    month: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    per_page: int = Query(10, alias="perPage", ge=1, le=MAX_PER_PAGE),
    search: str = "",
    store=Depends(get_store),
):
    try:
        return await aggregations.list_transactions(store, month, page, per_page, search)
    except StoreError as e:
        return store_failure("Error fetching transactions.", e)

@router.get("/statistics", response_model=schemas.Statistics)
async def statistics(month: Optional[str] = None, store=Depends(get_store)):
    try:
        return await aggregations.get_statistics(store, month)
    except StoreError as e:
        return store_failure("Error fetching statistics.", e)

@router.get("/bar-chart", response_model=List[schemas.PriceRangeCount])
async def bar_chart(month: Optional[str] = None, store=Depends(get_store)):
    try:
        return await aggregations.get_bar_chart(store, month)
    except StoreError as e:
        return store_failure("Error fetching bar chart data.", e)

@router.get("/pie-chart", response_model=List[schemas.CategoryCount])
async def pie_chart(month: Optional[str] = None, store=Depends(get_store)):
    try:
        return await aggregations.get_pie_chart(store, month)
    except StoreError as e:
        return store_failure("Error fetching pie chart data.", e)

@router.get("/combined-data", response_model=schemas.CombinedData) # statistics + bar chart + pie chart in one call
async def combined_data(month: Optional[str] = None, store=Depends(get_store)):
    try:
        return await aggregations.get_combined_data(store, month)
    except StoreError as e:
        return store_failure("Error fetching combined data.", e)

@router.get("/initialize", response_model=schemas.InitializeResult) # replace all transactions with the seed feed
async def initialize(store=Depends(get_store), fetch=Depends(get_seed_fetcher)):
    try:
        count = await run_in_threadpool(initialize_database, store, fetch=fetch)
    except SeedFetchError as e:
        logger.error("Error initializing database: %s", e)
        return JSONResponse(status_code=502, content={"message": "Error initializing database", "error": str(e)})
    except DataQualityError as e:
        logger.error("Rejected seed data: %s", e)
        return JSONResponse(status_code=422, content={"message": "Error initializing database", "error": str(e)})
    except StoreError as e:
        logger.error("Error writing seed data: %s", e)
        return JSONResponse(
            status_code=500,
            content={"message": "Error initializing database", "error": "Could not store transactions."},
        )
    return JSONResponse(
        status_code=200,
        content=schemas.InitializeResult(message="Database initialized with seed data", count=count).model_dump(),
    )


app.include_router(router, prefix=settings.api_prefix)
