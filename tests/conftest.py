"""Shared fixtures: a file-backed SQLite store and an API client wired to it."""

import os
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any

# Keep the app's import-time engine off the working directory
os.environ.setdefault("SALES_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from sales_app import models
from sales_app.crud import TransactionStore
from sales_app.database import make_engine
from sales_app.main import app, get_seed_fetcher, get_store


def make_record(
    title: str = "Item",
    price: float = 10.0,
    date_of_sale: datetime = datetime(2021, 3, 15, 10, 0),
    category: str = "electronics",
    sold: bool = True,
    description: str | None = None,
    id: str | None = None,
) -> dict[str, Any]:
    """Build a row in the shape TransactionStore.replace_all expects."""
    return {
        "id": id,
        "title": title,
        "price": price,
        "description": description,
        "date_of_sale": date_of_sale,
        "category": category,
        "sold": sold,
        "image": None,
    }


@pytest.fixture
def store(tmp_path: Path) -> Generator[TransactionStore, None, None]:
    """A TransactionStore backed by an empty SQLite file."""
    engine = make_engine(f"sqlite:///{tmp_path / 'sales.db'}")
    models.Base.metadata.create_all(bind=engine)
    yield TransactionStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture
def march_store(store: TransactionStore) -> TransactionStore:
    """Three March sales across two years plus records from other months."""
    store.replace_all([
        make_record("Cotton shirt", 50, datetime(2021, 3, 1), "men's clothing", True, "Plain white shirt"),
        make_record("Gold ring", 150, datetime(2022, 3, 28), "jewelery", False, "18k gold"),
        make_record("Laptop", 999, datetime(2021, 3, 10), "electronics", True, "Fast laptop"),
        make_record("Backpack", 300, datetime(2021, 4, 2), "men's clothing", True),
        make_record("Monitor", 120, datetime(2022, 11, 20), "electronics", False),
    ])
    return store


@pytest.fixture
def seed_payload() -> list[dict[str, Any]]:
    """Raw records in the external feed's format."""
    return [
        {
            "id": 1,
            "title": "Fjallraven Backpack",
            "price": 329.85,
            "description": "Your perfect pack for everyday use",
            "category": "men's clothing",
            "image": "https://example.com/1.jpg",
            "sold": False,
            "dateOfSale": "2021-11-27T20:29:54+05:30",
        },
        {
            "id": 2,
            "productTitle": "Mens Casual T-Shirt",
            "price": "44.6",
            "productDescription": "Slim-fitting style",
            "category": "men's clothing",
            "sold": "true",
            "dateOfSale": "2021-10-27T20:29:54+05:30",
        },
        {
            "id": 3,
            "title": "WD 2TB Hard Drive",
            "price": 64,
            "description": "USB 3.0 and USB 2.0 compatibility",
            "category": "electronics",
            "sold": "false",
            "dateOfSale": "2022-03-01T02:00:00Z",
        },
    ]


@pytest.fixture
def client(store: TransactionStore) -> Generator[TestClient, None, None]:
    """API client whose store is the temporary SQLite store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_seed_payload(seed_payload: list[dict[str, Any]]) -> Generator[list[str], None, None]:
    """Serve seed_payload from /initialize instead of the network; records requested URLs."""
    requested: list[str] = []

    def fake_fetch(url: str, timeout: float) -> list[dict[str, Any]]:
        requested.append(url)
        return seed_payload

    app.dependency_overrides[get_seed_fetcher] = lambda: fake_fetch
    yield requested
    app.dependency_overrides.pop(get_seed_fetcher, None)
