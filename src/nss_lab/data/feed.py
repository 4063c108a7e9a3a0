# src/nss_lab/data/feed.py
from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import List, Union

import polars as pl
import requests
from pydantic import ValidationError

from nss_lab.data.base import BaseIngestor
from nss_lab.data.schemas import REQUIRED_COLUMNS, NssRow
from nss_lab.params.store import ParameterStore

LOGGER = logging.getLogger(__name__)

DEFAULT_FEED_URL = (
    "https://raw.githubusercontent.com/internQuant/FinScraps/auto-scraping/"
    "data/scraped/anbima/irts_params.feather"
)

FEED_SCHEMA = {
    c: (pl.Utf8 if c in ("type", "date") else pl.Float64) for c in REQUIRED_COLUMNS
}


class FeedError(RuntimeError):
    """Fetch failure or malformed parameter feed."""


class NssFeedIngestor(BaseIngestor):
    """
    Async ingestor for the historical NSS parameter feed (Feather / Arrow IPC).

    Failures are hard: a bad HTTP status, a network error, an unreadable file
    or a missing required column all raise FeedError.
    """

    def __init__(
        self, source: Union[str, Path] = DEFAULT_FEED_URL, timeout_seconds: float = 30.0
    ):
        super().__init__(source)
        self.timeout_seconds = float(timeout_seconds)

    # ---------------------------------------------------------------
    # Fetch
    # ---------------------------------------------------------------
    def _download(self) -> bytes:
        try:
            res = requests.get(self.source, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            raise FeedError(f"Failed to fetch feed {self.source}: {e}") from e
        if not res.ok:
            raise FeedError(f"Failed to fetch feed: HTTP {res.status_code}")
        return res.content

    async def fetch_data(self) -> pl.DataFrame:
        if self.is_remote:
            payload = await asyncio.to_thread(self._download)
            source: Union[io.BytesIO, Path] = io.BytesIO(payload)
        else:
            source = Path(self.source)
            if not source.exists():
                raise FeedError(f"Feed file not found: {source}")

        try:
            df = pl.read_ipc(source)
        except Exception as e:
            raise FeedError(f"Could not read feed as Arrow IPC/Feather: {e}") from e

        LOGGER.debug("Feed columns: %s (%d rows)", df.columns, df.height)
        return df

    # ---------------------------------------------------------------
    # Transform
    # ---------------------------------------------------------------
    async def transform(self, raw_df: pl.DataFrame) -> List[NssRow]:
        """
        Check required columns, then convert rows to NssRow
        (dates normalized to YYYY-MM-DD).
        """
        for col in REQUIRED_COLUMNS:
            if col not in raw_df.columns:
                LOGGER.warning("Found columns: %s", raw_df.columns)
                raise FeedError(f"Missing expected column '{col}' in feed")

        try:
            records = [NssRow(**r) for r in raw_df.select(list(REQUIRED_COLUMNS)).to_dicts()]
        except ValidationError as e:
            raise FeedError(f"Invalid NSS parameter row: {e}") from e
        LOGGER.info("Loaded %d NSS parameter rows", len(records))
        return records

    # ---------------------------------------------------------------
    # Pipelines
    # ---------------------------------------------------------------
    async def run_pipeline(self) -> pl.DataFrame:
        """fetch -> transform -> normalized Polars frame."""
        records = await self.run()
        return pl.DataFrame([r.model_dump() for r in records], schema=FEED_SCHEMA)

    async def load_store(self) -> ParameterStore:
        records = await self.run()
        return ParameterStore.from_rows(records)


def load_nss_rows(
    source: Union[str, Path] = DEFAULT_FEED_URL, timeout_seconds: float = 30.0
) -> List[NssRow]:
    """Blocking convenience wrapper around NssFeedIngestor.run()."""
    return asyncio.run(NssFeedIngestor(source, timeout_seconds).run())


def load_feed_store(
    source: Union[str, Path] = DEFAULT_FEED_URL, timeout_seconds: float = 30.0
) -> ParameterStore:
    return asyncio.run(NssFeedIngestor(source, timeout_seconds).load_store())
