"""Bulk loader: replace every stored transaction with the external seed feed.

Run directly to seed the configured database::

    python -m sales_app.seed --url https://example.com/transactions.json
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

import requests

from . import models
from .config import configure_logging, settings
from .crud import TransactionStore
from .database import engine
from .exceptions import SalesAppError, SeedFetchError
from .preprocessing import normalize_seed_records

logger = logging.getLogger(__name__)


def fetch_seed_records(url: str, timeout: float) -> List[Dict]:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise SeedFetchError(f"Could not fetch seed data from {url}: {e}") from e
    except ValueError as e:
        raise SeedFetchError(f"Seed data from {url} is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise SeedFetchError(f"Seed data from {url} must be a JSON array, got {type(payload).__name__}")
    return payload


def initialize_database(store: TransactionStore, url: Optional[str] = None, timeout: Optional[float] = None, fetch=fetch_seed_records) -> int:
    """Fetch the seed feed and replace the store contents with it.

    The payload is fully validated before the store is touched, and the store
    swaps the data inside one transaction, so a failed load keeps the old rows.

    Returns:
        Number of transactions now stored.
    """
    url = url or settings.seed_url
    timeout = timeout or settings.seed_timeout

    logger.info("Fetching seed data from %s", url)
    raw_records = fetch(url, timeout)
    records = normalize_seed_records(raw_records)
    count = store.replace_all(records)
    logger.info("Loaded %d transactions from seed data", count)
    return count


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Replace the transactions table with the seed feed.")
    parser.add_argument("--url", default=settings.seed_url, help="Seed JSON URL")
    parser.add_argument("--timeout", type=float, default=settings.seed_timeout, help="HTTP timeout in seconds")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    models.Base.metadata.create_all(bind=engine)
    try:
        initialize_database(TransactionStore(), args.url, args.timeout)
    except SalesAppError as e:
        logger.error("Seeding failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
